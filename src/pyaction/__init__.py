"""
pyaction - request-handling core of a small MVC web framework

Controllers expose ``<name>_action`` methods; the front controller binds
request parameters to their arguments and turns whatever they return into a
response.

Example:
    >>> from pyaction import Controller, FrontController, Request
    >>>
    >>> class HelloController(Controller):
    ...     def index_action(self, name='World'):
    ...         return f'Hello, {name}!'
    >>>
    >>> app = FrontController()
    >>> app.register('hello', HelloController)
    >>> app.handle(Request(uri='/hello?name=you')).body.getvalue()
    b'Hello, you!'
"""

__version__ = "0.1.0"
__author__ = "pyaction Team"

from pyaction.config import ConfigStore, Settings
from pyaction.controllers import Controller, ActionResult, MSG_OK, MSG_ERR
from pyaction.events import EventBus, QueryEvent
from pyaction.exceptions import (
    BaseFrameworkException,
    MethodNotFound,
    MethodNotAccessible,
    MissingParameter,
    MissingSecretConfiguration,
    UndefinedPropertyAccess,
)
from pyaction.http import Cookie, Request, Response, Uri
from pyaction.middleware import DebuggerMiddleware, MiddlewareInterface
from pyaction.routing import FrontController
from pyaction.security import Cipher, CipherInterface
from pyaction.views import JinjaView, ViewInterface

__all__ = [
    "Controller", "ActionResult", "MSG_OK", "MSG_ERR",
    "FrontController", "Request", "Response", "Cookie", "Uri",
    "ConfigStore", "Settings", "EventBus", "QueryEvent",
    "DebuggerMiddleware", "MiddlewareInterface",
    "Cipher", "CipherInterface", "JinjaView", "ViewInterface",
    "BaseFrameworkException", "MethodNotFound", "MethodNotAccessible",
    "MissingParameter", "MissingSecretConfiguration", "UndefinedPropertyAccess",
    "__version__", "__author__",
]
