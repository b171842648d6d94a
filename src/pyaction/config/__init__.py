"""
pyaction Configuration System

Dataclass based settings populated from environment variables, plus the
section/key lookup store that controllers and middleware read from.
"""

import os
from typing import Optional, Dict, Any, Mapping, Union
from dataclasses import dataclass, field, fields, is_dataclass


@dataclass
class AppConfig:
    """Core application settings"""
    secret_key: str = os.getenv('SECRET_KEY', '')
    charset: str = os.getenv('APP_CHARSET', 'utf-8')
    debug: bool = os.getenv('DEBUG', 'False').lower() == 'true'
    cli: bool = os.getenv('PYACTION_CLI', 'False').lower() == 'true'


@dataclass
class ViewConfig:
    """Template rendering settings"""
    template_dir: str = os.getenv('TEMPLATE_DIR', 'templates')
    extension: str = os.getenv('TEMPLATE_EXTENSION', '.html')
    auto_escape: bool = os.getenv('TEMPLATE_AUTO_ESCAPE', 'True').lower() == 'true'


@dataclass
class DebugConfig:
    """Debug middleware settings"""
    log_path: str = os.getenv('DEBUG_LOG_PATH', os.path.join('data', 'debug'))
    profile: bool = os.getenv('DEBUG_PROFILE', 'True').lower() == 'true'
    cookie_name: str = os.getenv('DEBUG_COOKIE_NAME', 'debug_trace_id')


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = os.getenv('LOG_LEVEL', 'INFO')
    file: Optional[str] = os.getenv('LOG_FILE')
    json_format: bool = os.getenv('LOG_JSON_FORMAT', 'False').lower() == 'true'


@dataclass
class Settings:
    """Top level configuration, one attribute per section"""
    app: AppConfig = field(default_factory=AppConfig)
    view: ViewConfig = field(default_factory=ViewConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigStore:
    """
    Section/key configuration lookup.

    Wraps either a ``Settings`` instance or a plain nested mapping such as
    ``{"app": {"secret_key": "..."}}``. Missing sections and keys read as None.
    """

    def __init__(self, source: Union[Settings, Mapping[str, Mapping[str, Any]], None] = None):
        if source is None:
            source = Settings()
        self._sections: Dict[str, Dict[str, Any]] = {}
        if is_dataclass(source):
            for f in fields(source):
                section = getattr(source, f.name)
                self._sections[f.name] = {
                    sf.name: getattr(section, sf.name) for sf in fields(section)
                }
        else:
            for name, values in source.items():
                self._sections[name] = dict(values)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get a value, or ``default`` when the section or key is missing"""
        return self._sections.get(section, {}).get(key, default)

    def set(self, section: str, key: str, value: Any) -> None:
        """Set a value, creating the section if needed"""
        self._sections.setdefault(section, {})[key] = value

    def section(self, section: str) -> Dict[str, Any]:
        """Return a copy of a whole section"""
        return dict(self._sections.get(section, {}))

    def __contains__(self, section: str) -> bool:
        return section in self._sections


# Configuration presets for different environments
class ConfigPresets:
    """Configuration presets for different environments"""

    @staticmethod
    def development() -> Settings:
        """Development configuration"""
        return Settings(
            app=AppConfig(debug=True, secret_key='dev-secret-key-change-in-production'),
            logging=LoggingConfig(level='DEBUG'),
        )

    @staticmethod
    def production() -> Settings:
        """Production configuration"""
        return Settings(
            app=AppConfig(debug=False),
            debug=DebugConfig(profile=False),
            logging=LoggingConfig(level='WARNING'),
        )

    @staticmethod
    def testing() -> Settings:
        """Testing configuration"""
        return Settings(
            app=AppConfig(debug=True, secret_key='test-secret-key'),
            logging=LoggingConfig(level='ERROR'),
        )


def get_config_from_environment() -> ConfigStore:
    """Get configuration based on environment"""
    env = os.getenv('PYACTION_ENV', 'development').lower()

    if env == 'production':
        return ConfigStore(ConfigPresets.production())
    elif env == 'testing':
        return ConfigStore(ConfigPresets.testing())
    else:
        return ConfigStore(ConfigPresets.development())


__all__ = [
    'AppConfig', 'ViewConfig', 'DebugConfig', 'LoggingConfig', 'Settings',
    'ConfigStore', 'ConfigPresets', 'get_config_from_environment',
]
