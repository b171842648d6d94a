"""
Base controller class for the pyaction MVC framework.

A controller handles exactly one request. The front controller builds it
with the request, the response it should fill and its collaborators, calls
``init()`` and then ``execute(action_name, params)``.

Actions are public methods named ``<action>_action``. Their parameters are
described once, when the controller class is defined, so dispatch binds
request values to arguments without per-call reflection::

    class PostController(Controller):
        def show_action(self, id, page=1):
            self.assign('post', load_post(id))
            return self.render()

``execute('show', {'id': '7'})`` calls ``show_action('7', 1)``.
"""

import inspect
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pyaction.config import ConfigStore, ViewConfig
from pyaction.exceptions import (
    MethodNotAccessible,
    MethodNotFound,
    MissingParameter,
    MissingSecretConfiguration,
    UndefinedPropertyAccess,
)
from pyaction.http.cookies import Cookie
from pyaction.http.request import Request
from pyaction.http.response import Response
from pyaction.http.uri import Uri
from pyaction.security.cipher import Cipher, CipherInterface
from pyaction.views.base import JinjaView, ViewInterface

logger = logging.getLogger(__name__)

ACTION_SUFFIX = "_action"

# Message codes passed to Controller.message()
MSG_OK = 0
MSG_ERR = 1


@dataclass(frozen=True)
class ActionParameter:
    """One formal parameter of an action"""
    name: str
    required: bool
    default: Any = None
    keyword_only: bool = False


@dataclass(frozen=True)
class ActionDescriptor:
    """An action method and its parameter list"""
    name: str
    method_name: str
    parameters: Tuple[ActionParameter, ...]

    @property
    def public(self) -> bool:
        return not self.method_name.startswith('_')

    @classmethod
    def from_function(cls, method_name: str, func) -> 'ActionDescriptor':
        parameters = []
        signature = inspect.signature(func)
        for index, param in enumerate(signature.parameters.values()):
            if index == 0:
                # bound instance
                continue
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            has_default = param.default is not param.empty
            parameters.append(ActionParameter(
                name=param.name,
                required=not has_default,
                default=param.default if has_default else None,
                keyword_only=param.kind is param.KEYWORD_ONLY,
            ))
        return cls(
            name=method_name[:-len(ACTION_SUFFIX)],
            method_name=method_name,
            parameters=tuple(parameters),
        )

    def bind(self, params: Mapping[str, Any]) -> Tuple[List[Any], Dict[str, Any]]:
        """Resolve arguments from ``params``, in declaration order"""
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for param in self.parameters:
            value = params[param.name] if param.name in params else param.default
            if value is None and param.required:
                raise MissingParameter(param.name)
            if param.keyword_only:
                kwargs[param.name] = value
            else:
                args.append(value)
        return args, kwargs


class ResultKind(str, Enum):
    """What an action returned"""
    RESPONSE = "response"
    SCALAR = "scalar"
    EMPTY = "empty"


@dataclass(frozen=True)
class ActionResult:
    """Tagged action return value"""
    kind: ResultKind
    value: Any = None

    @classmethod
    def of(cls, value: Any) -> 'ActionResult':
        if isinstance(value, Response):
            return cls(ResultKind.RESPONSE, value)
        if value is None:
            return cls(ResultKind.EMPTY)
        return cls(ResultKind.SCALAR, str(value))


class Controller:
    """Base controller: parameter access, navigation, output and dispatch"""

    # action used when execute() gets an empty name
    default_action: str = 'index'

    # template rendered by message()
    message_template: str = 'message'

    jsonp_enabled: bool = False
    json_callback: str = 'jsoncallback'

    _actions: Dict[str, ActionDescriptor] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        actions: Dict[str, ActionDescriptor] = {}
        for klass in reversed(cls.__mro__):
            for attr, value in vars(klass).items():
                if attr.endswith(ACTION_SUFFIX) and attr != ACTION_SUFFIX and inspect.isfunction(value):
                    actions[attr] = ActionDescriptor.from_function(attr, value)
                elif attr in actions:
                    # overridden by something that is not an action
                    del actions[attr]
        cls._actions = actions

    def __init__(self,
                 request: Request,
                 response: Response,
                 config: Optional[ConfigStore] = None,
                 view: Optional[ViewInterface] = None,
                 cipher: Optional[CipherInterface] = None,
                 route: Optional[str] = None):
        self._request = request
        self._response = response
        self._config = config or ConfigStore()
        self._view = view or JinjaView(
            ViewConfig(**self._config.section('view')) if 'view' in self._config else None,
            charset=self.charset,
        )
        self._cipher = cipher or Cipher.create_simple()
        self._route = request.route if route is None else route
        self._data: Dict[str, Any] = {}

    def init(self) -> None:
        """Hook for subclasses; called by the front controller after construction"""

    @classmethod
    def actions(cls) -> Dict[str, ActionDescriptor]:
        return dict(cls._actions)

    @property
    def request(self) -> Request:
        return self._request

    @property
    def response(self) -> Response:
        return self._response

    @property
    def config(self) -> ConfigStore:
        return self._config

    @property
    def view(self) -> ViewInterface:
        return self._view

    @property
    def cipher(self) -> CipherInterface:
        return self._cipher

    @property
    def route(self) -> str:
        return self._route

    @property
    def data(self) -> Dict[str, Any]:
        return dict(self._data)

    @property
    def charset(self) -> str:
        return self._config.get('app', 'charset') or 'utf-8'

    def __getattr__(self, name: str):
        raise UndefinedPropertyAccess(type(self).__name__, name)

    # Request parameters

    def get_server(self, name: str, default: Any = None, apply_filter: bool = True) -> Any:
        return self._request.get_server_param(name, default, apply_filter)

    def get(self, name: str, default: Any = None, apply_filter: bool = True) -> Any:
        """Query value, falling back to the body when the query has none"""
        value = self._request.get_query_param(name, None, apply_filter)
        if value is None:
            value = self._request.get_post_param(name, default, apply_filter)
        return value

    def get_query(self, name: Optional[str] = None, default: Any = None, apply_filter: bool = True) -> Any:
        if name is None:
            return self._request.get_query_params(apply_filter)
        return self._request.get_query_param(name, default, apply_filter)

    def get_post(self, name: Optional[str] = None, default: Any = None, apply_filter: bool = True) -> Any:
        if name is None:
            return self._request.get_parsed_body(apply_filter)
        return self._request.get_post_param(name, default, apply_filter)

    def get_cookie(self, name: str, is_secure: bool = False, secret: Optional[str] = None,
                   apply_filter: bool = True) -> Any:
        """Cookie value, decrypted with the app secret when ``is_secure``"""
        value = self._request.get_cookie_param(name, None, apply_filter)
        if is_secure and value:
            value = self._cipher.decrypt(value, self._resolve_secret(secret))
        return value

    def set_cookie(self, cookie: Cookie, secure: bool = False, secret: Optional[str] = None) -> None:
        """Attach ``cookie`` to the response, encrypting its value when ``secure``"""
        if secure:
            cookie.set_value(self._cipher.encrypt(cookie.get_value(), self._resolve_secret(secret)))
        self._response = self._response.with_cookie(cookie)

    def _resolve_secret(self, secret: Optional[str]) -> str:
        if secret is None:
            secret = self._config.get('app', 'secret_key')
        if not secret:
            raise MissingSecretConfiguration()
        return secret

    # Output data

    def assign(self, name: Union[str, Mapping[str, Any]], value: Any = None) -> None:
        if isinstance(name, Mapping):
            self._data.update(name)
        else:
            self._data[name] = value

    def get_data(self) -> Dict[str, Any]:
        return self._data

    def set_layout(self, filename: Optional[str]) -> None:
        self._view.set_layout(filename)

    def set_layout_section(self, name: str, filename: str) -> None:
        self._view.set_layout_section(name, filename)

    # Navigation

    def get_referrer(self) -> str:
        """Referer header, only when it points at this host; fragment removed"""
        refer = self.get_server('HTTP_REFERER', apply_filter=False) or ''
        host = self.get_server('HTTP_HOST', apply_filter=False) or ''
        if not refer or not host or host not in refer:
            return ''
        return refer.split('#', 1)[0]

    def redirect(self, url: Union[str, Uri], status: int = 302) -> Response:
        return self._response.with_header('Location', str(url)).with_status(status)

    def go_home(self) -> Response:
        return self.redirect(self._request.base_url or '/')

    def go_back(self, default_url: str = '', verify_host: bool = True) -> Response:
        """
        Redirect to where the user came from.

        Candidates, in order: the ``refer`` request parameter, the ``refer``
        cookie, the Referer header, ``default_url``. Relative values are
        forced to a single leading slash. Absolute values must point at the
        current host when ``verify_host`` is set, otherwise they are dropped
        and the user is sent home.
        """
        url = self.get('refer', apply_filter=False)
        if not url:
            url = self.get_cookie('refer', apply_filter=False)
        if not url:
            url = self.get_referrer()
        if not url:
            url = default_url
        if not url:
            return self.go_home()

        url = str(url)
        if '//' not in url:
            url = '/' + url.lstrip('/')
        elif verify_host:
            try:
                host = Uri.parse(url).host
            except ValueError:
                host = None
            if not host or host != self._request.uri.host:
                logger.info("Discarded back url for foreign host: %s", url)
                url = ''

        if not url:
            return self.go_home()
        return self.redirect(url)

    def refresh(self, anchor: str = '') -> Response:
        uri = self._request.uri
        if anchor:
            uri = uri.with_fragment(anchor)
        return self.redirect(uri)

    # Rendering

    def json_encode(self, data: Any) -> str:
        return json.dumps(data, ensure_ascii=False, separators=(',', ':'))

    def serve_json(self, data: Any = None) -> Response:
        """JSON (or JSONP) response built from ``data`` or the assigned data"""
        if not data:
            data = self._data
        content = self.json_encode(data)
        callback = self.get(self.json_callback)
        if self.jsonp_enabled and callback:
            func = '' if callback[0] == '?' else callback
            content = f"{func}({content})"

        response = self._response.with_header('Content-Type', f"application/json; charset={self.charset}")
        response.body.write(content)
        return response

    def message(self, message: str, code: int = MSG_ERR, jump_url: Optional[str] = None) -> Response:
        self.assign({
            'code': code,
            'msg': message,
            'jumpUrl': jump_url,
        })
        content = self._view.render(self.message_template, self._data)
        self._response.body.write(content)
        return self._response

    def render(self, filename: str = '', data: Optional[Mapping[str, Any]] = None) -> Response:
        """Render ``filename`` (default: the current route) into the response body"""
        if not filename:
            filename = self._route
        context = {**self._data, **(data or {})}
        content = self._view.render(filename, context)
        self._response.body.write(content)
        return self._response

    # Dispatch

    def execute(self, action_name: str, params: Optional[Mapping[str, Any]] = None) -> Response:
        """Run ``<action_name>_action`` and normalise what it returns"""
        params = params or {}
        if not action_name:
            action_name = self.default_action
        method_name = action_name + ACTION_SUFFIX

        descriptor = self._actions.get(method_name)
        if descriptor is None:
            raise MethodNotFound(type(self).__name__, method_name)
        if not descriptor.public:
            raise MethodNotAccessible(type(self).__name__, method_name)

        args, kwargs = descriptor.bind(params)
        logger.debug("Dispatching %s.%s", type(self).__name__, method_name)
        result = ActionResult.of(getattr(self, method_name)(*args, **kwargs))

        if result.kind is ResultKind.RESPONSE:
            return result.value
        if result.kind is ResultKind.SCALAR:
            self._response.body.write(result.value)
        return self._response


__all__ = [
    'Controller', 'ActionParameter', 'ActionDescriptor', 'ActionResult',
    'ResultKind', 'ACTION_SUFFIX', 'MSG_OK', 'MSG_ERR',
]
