"""
Exceptions raised by the pyaction dispatch layer.

Every error here is fatal to the current request cycle. None of them are
recovered inside a controller; they propagate to the front controller, which
maps them onto an HTTP error response.
"""

from typing import Dict, Any, Optional
import json


class BaseFrameworkException(Exception):
    """
    Base exception class for pyaction.

    Carries an HTTP status code and a machine readable error code so the
    front controller can build an error response without inspecting types.
    """

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self,
                 message: str,
                 status_code: Optional[int] = None,
                 error_code: Optional[str] = None,
                 payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.payload = payload or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses"""
        result = {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "status_code": self.status_code
            }
        }

        if self.payload:
            result.update(self.payload)

        return result

    def to_json(self) -> str:
        """Convert exception to JSON string"""
        return json.dumps(self.to_dict(), default=str)

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


class DispatchError(BaseFrameworkException):
    """Base class for action dispatch failures"""
    pass


class MethodNotFound(DispatchError):
    """The requested action does not exist on the controller"""
    status_code = 404
    error_code = "method_not_found"

    def __init__(self, controller: str, method: str):
        super().__init__(f"Action does not exist: {controller}.{method}")
        self.controller = controller
        self.method = method


class MethodNotAccessible(DispatchError):
    """The requested action exists but is not public"""
    status_code = 403
    error_code = "method_not_accessible"

    def __init__(self, controller: str, method: str):
        super().__init__(f"Calling non-public action: {controller}.{method}")
        self.controller = controller
        self.method = method


class MissingParameter(DispatchError):
    """A required action parameter was not supplied"""
    status_code = 400
    error_code = "missing_parameter"

    def __init__(self, name: str):
        super().__init__(f"Missing request parameter: {name}")
        self.name = name


class ControllerNotFound(DispatchError):
    """No controller is registered under the requested name"""
    status_code = 404
    error_code = "controller_not_found"

    def __init__(self, name: str):
        super().__init__(f"Controller does not exist: {name}")
        self.name = name


class ConfigurationError(BaseFrameworkException):
    """Base class for configuration problems"""
    error_code = "configuration_error"


class MissingSecretConfiguration(ConfigurationError):
    """No secret is available for cookie encryption"""
    error_code = "missing_secret"

    def __init__(self, message: str = "Set secret_key in the app configuration first"):
        super().__init__(message)


class UndefinedPropertyAccess(BaseFrameworkException, AttributeError):
    """Read of a controller field that is not exposed"""
    error_code = "undefined_property"

    def __init__(self, owner: str, name: str):
        super().__init__(f"Undefined property: {owner}.{name}")
        self.owner = owner
        self.name = name


__all__ = [
    'BaseFrameworkException', 'DispatchError', 'MethodNotFound',
    'MethodNotAccessible', 'MissingParameter', 'ControllerNotFound',
    'ConfigurationError', 'MissingSecretConfiguration', 'UndefinedPropertyAccess',
]
