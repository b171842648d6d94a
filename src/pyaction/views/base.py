"""
View service used by controllers to render templates.

A template id such as ``"user/profile"`` maps to ``user/profile.html`` under
the configured template directory. When a layout is set, the action template
is rendered first and handed to the layout as ``content``; layout sections are
rendered with the same data and exposed as ``sections[name]``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

import jinja2
from markupsafe import Markup

from pyaction.config import ViewConfig

logger = logging.getLogger(__name__)


class ViewInterface(ABC):
    """Rendering service contract"""

    @abstractmethod
    def render(self, template_id: str, data: Mapping[str, Any]) -> bytes:
        ...

    @abstractmethod
    def set_layout(self, name: Optional[str]) -> None:
        ...

    @abstractmethod
    def set_layout_section(self, name: str, filename: str) -> None:
        ...


class JinjaView(ViewInterface):
    """Jinja2 backed view service"""

    def __init__(self,
                 config: Optional[ViewConfig] = None,
                 loader: Optional[jinja2.BaseLoader] = None,
                 charset: str = "utf-8",
                 **options):
        self.config = config or ViewConfig()
        self.charset = charset
        self.env = jinja2.Environment(
            loader=loader or jinja2.FileSystemLoader(self.config.template_dir),
            autoescape=self.config.auto_escape,
            **options
        )
        self.layout: Optional[str] = None
        self.sections: Dict[str, str] = {}

    def template_name(self, template_id: str) -> str:
        name = template_id.strip('/')
        if self.config.extension and not name.endswith(self.config.extension):
            name += self.config.extension
        return name

    def set_layout(self, name: Optional[str]) -> None:
        self.layout = name

    def set_layout_section(self, name: str, filename: str) -> None:
        self.sections[name] = filename

    def _render_text(self, template_id: str, context: Mapping[str, Any]) -> str:
        template = self.env.get_template(self.template_name(template_id))
        return template.render(**context)

    def render(self, template_id: str, data: Mapping[str, Any]) -> bytes:
        """Render a template, wrapped in the current layout if one is set"""
        logger.debug("Rendering template %s", template_id)
        content = self._render_text(template_id, data)
        if self.layout:
            context = dict(data)
            context['sections'] = {
                name: Markup(self._render_text(filename, data))
                for name, filename in self.sections.items()
            }
            context['content'] = Markup(content)
            content = self._render_text(self.layout, context)
        return content.encode(self.charset)
