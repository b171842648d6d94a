"""
Middleware components for pyaction.
"""

from pyaction.middleware.base import (
    MiddlewareInfo,
    MiddlewareInterface,
    MiddlewareManager,
    MiddlewarePriority,
    NextHandler,
)
from pyaction.middleware.debugger import DebuggerMiddleware, load_trace

__all__ = [
    'MiddlewareInterface', 'MiddlewarePriority', 'MiddlewareInfo',
    'MiddlewareManager', 'NextHandler', 'DebuggerMiddleware', 'load_trace',
]
