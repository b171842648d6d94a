"""
Front controller: resolves a route to a controller action and runs it.

Routes have the form ``<controller>/<action>``; either part may be empty, in
which case the default controller or the controller's default action is
used. Dispatch errors are turned into JSON error responses here and every
other exception propagates to the server.
"""

import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Type

from pyaction.config import ConfigStore, ViewConfig
from pyaction.controllers.base import Controller
from pyaction.events import EventBus
from pyaction.exceptions import ControllerNotFound, DispatchError
from pyaction.http.request import Request
from pyaction.http.response import Response
from pyaction.middleware.base import MiddlewareInterface, MiddlewareManager, MiddlewarePriority
from pyaction.security.cipher import Cipher, CipherInterface
from pyaction.views.base import JinjaView, ViewInterface

logger = logging.getLogger(__name__)


class FrontController:
    """Maps routes onto registered controllers"""

    def __init__(self,
                 config: Optional[ConfigStore] = None,
                 view_factory: Optional[Callable[[], ViewInterface]] = None,
                 cipher: Optional[CipherInterface] = None,
                 events: Optional[EventBus] = None,
                 default_controller: str = 'index'):
        self.config = config or ConfigStore()
        self.view_factory = view_factory or self._default_view
        self.cipher = cipher or Cipher.create_simple()
        self.events = events or EventBus()
        self.default_controller = default_controller
        self.controllers: Dict[str, Type[Controller]] = {}
        self.middleware_manager = MiddlewareManager()

    def _default_view(self) -> ViewInterface:
        return JinjaView(
            ViewConfig(**self.config.section('view')) if 'view' in self.config else None,
            charset=self.config.get('app', 'charset') or 'utf-8',
        )

    def register(self, name: str, controller_class: Type[Controller]) -> None:
        """Register ``controller_class`` under ``name``"""
        if not issubclass(controller_class, Controller):
            raise TypeError(f"{controller_class!r} is not a Controller")
        self.controllers[name] = controller_class
        logger.debug("Registered controller %s -> %s", name, controller_class.__name__)

    def controller(self, name: str):
        """Decorator form of register()"""
        def decorator(cls: Type[Controller]) -> Type[Controller]:
            self.register(name, cls)
            return cls
        return decorator

    def add_middleware(self, middleware: MiddlewareInterface,
                       priority: MiddlewarePriority = MiddlewarePriority.NORMAL) -> None:
        self.middleware_manager.add(middleware, priority)

    def resolve(self, route: str) -> Tuple[str, str]:
        """Split a route into (controller name, action name)"""
        controller_name, _, action_name = route.strip('/').partition('/')
        return controller_name or self.default_controller, action_name

    def handle(self, request: Request, response: Optional[Response] = None,
               route_params: Optional[Mapping[str, Any]] = None) -> Response:
        """Run the request through the middleware and the matched action"""
        if response is None:
            response = Response(charset=self.config.get('app', 'charset') or 'utf-8')
        route = request.route or request.uri.path
        controller_name, action_name = self.resolve(route)
        controller_class = self.controllers.get(controller_name)
        default_action = (controller_class or Controller).default_action
        canonical = f"{controller_name}/{action_name or default_action}"
        # middleware sees the resolved route
        request.route = canonical

        def dispatch() -> Response:
            if controller_class is None:
                raise ControllerNotFound(controller_name)
            controller = controller_class(
                request,
                response,
                config=self.config,
                view=self.view_factory(),
                cipher=self.cipher,
                route=canonical,
            )
            controller.init()
            params = {**request.get_query_params(), **(route_params or {})}
            return controller.execute(action_name, params)

        try:
            return self.middleware_manager.run(request, dispatch)
        except DispatchError as e:
            logger.warning("Dispatch of %s failed: %s", route, e)
            return Response.json(e.to_dict(), status_code=e.status_code)

    def __call__(self, environ: Dict[str, Any], start_response: Callable) -> Iterable[bytes]:
        """WSGI entry point"""
        request = Request.from_environ(environ)
        response = self.handle(request)
        status = f"{response.status_code} {response.reason_phrase}"
        start_response(status, response.header_items())
        return [response.body.getvalue()]
