"""
Middleware pipeline for pyaction.

A middleware wraps the rest of the request cycle::

    class Timing(MiddlewareInterface):
        def process(self, request, next):
            started = time.time()
            response = next()
            return response.with_header('X-Elapsed', f"{time.time() - started:.3f}")

``next()`` runs the remaining middleware and finally the controller; it takes
no arguments because the request is not replaced along the way.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from pyaction.http.request import Request
from pyaction.http.response import Response

logger = logging.getLogger(__name__)

NextHandler = Callable[[], Response]


class MiddlewareInterface(ABC):
    """A step in the request pipeline"""

    @abstractmethod
    def process(self, request: Request, next: NextHandler) -> Response:
        ...


class MiddlewarePriority(int, Enum):
    """Middleware priority levels"""
    LOWEST = -100
    LOW = -50
    NORMAL = 0
    HIGH = 50
    HIGHEST = 100


@dataclass
class MiddlewareInfo:
    """Middleware information and metadata"""
    name: str
    middleware: MiddlewareInterface
    priority: MiddlewarePriority = MiddlewarePriority.NORMAL
    enabled: bool = True


class MiddlewareManager:
    """Ordered middleware chain; higher priority runs first (outermost)"""

    def __init__(self):
        self.middlewares: List[MiddlewareInfo] = []

    def add(self, middleware: MiddlewareInterface,
            priority: MiddlewarePriority = MiddlewarePriority.NORMAL,
            name: Optional[str] = None) -> None:
        """Add middleware to the manager"""
        name = name or type(middleware).__name__
        self.middlewares.append(MiddlewareInfo(name=name, middleware=middleware, priority=priority))
        # stable sort keeps insertion order within a priority
        self.middlewares.sort(key=lambda m: m.priority.value, reverse=True)
        logger.info("Added middleware %s with priority %d", name, priority.value)

    def remove(self, name: str) -> bool:
        """Remove middleware by name"""
        for i, info in enumerate(self.middlewares):
            if info.name == name:
                self.middlewares.pop(i)
                logger.info("Removed middleware %s", name)
                return True
        return False

    def enable(self, name: str) -> bool:
        info = self.get_middleware(name)
        if info is None:
            return False
        info.enabled = True
        return True

    def disable(self, name: str) -> bool:
        info = self.get_middleware(name)
        if info is None:
            return False
        info.enabled = False
        return True

    def get_middleware(self, name: str) -> Optional[MiddlewareInfo]:
        """Get middleware by name"""
        for info in self.middlewares:
            if info.name == name:
                return info
        return None

    def run(self, request: Request, handler: NextHandler) -> Response:
        """Run ``handler`` wrapped by every enabled middleware"""
        chain = [info.middleware for info in self.middlewares if info.enabled]

        def call(index: int) -> Response:
            if index == len(chain):
                return handler()
            return chain[index].process(request, lambda: call(index + 1))

        return call(0)


__all__ = [
    'MiddlewareInterface', 'MiddlewarePriority', 'MiddlewareInfo',
    'MiddlewareManager', 'NextHandler',
]
