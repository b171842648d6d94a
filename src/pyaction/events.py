"""
Event System for pyaction

A small synchronous publish/subscribe bus. Components announce what they did
(for example the database layer announcing each executed query) and listeners
such as the debug middleware record it. Delivery happens inline, in
registration order, on the emitting thread.
"""

import logging
import time
import uuid
from typing import Dict, List, Callable, Any, Tuple
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# source name the database layer emits query events under
DB_EVENT_SOURCE = "db"
EVENT_QUERY = "query"


@dataclass
class Event:
    """Base event class"""
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: float = field(default_factory=time.time)
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class QueryEvent(Event):
    """An executed SQL statement"""
    sql: str = ""
    params: Any = None
    time: float = 0.0


EventKey = Tuple[str, str]


class EventBus:
    """Synchronous event bus keyed by (source, event name)"""

    def __init__(self):
        self._handlers: Dict[EventKey, List[Callable[[Event], Any]]] = {}

    @staticmethod
    def _key(source: Any, name: str) -> EventKey:
        if isinstance(source, type):
            source = f"{source.__module__}.{source.__qualname__}"
        return str(source), name

    def on(self, source: Any, name: str, handler: Callable[[Event], Any]) -> None:
        """Subscribe ``handler`` to events named ``name`` from ``source``"""
        self._handlers.setdefault(self._key(source, name), []).append(handler)

    def off(self, source: Any, name: str, handler: Callable[[Event], Any] = None) -> None:
        """Unsubscribe one handler, or all handlers when none is given"""
        key = self._key(source, name)
        if handler is None:
            self._handlers.pop(key, None)
            return
        handlers = self._handlers.get(key, [])
        if handler in handlers:
            handlers.remove(handler)

    def has_listeners(self, source: Any, name: str) -> bool:
        return bool(self._handlers.get(self._key(source, name)))

    def emit(self, source: Any, name: str, event: Event) -> int:
        """Deliver ``event`` to every subscriber; returns how many were called"""
        handlers = list(self._handlers.get(self._key(source, name), []))
        for handler in handlers:
            handler(event)
        if handlers:
            logger.debug("Delivered %s.%s to %d handler(s)", source, name, len(handlers))
        return len(handlers)


__all__ = ['Event', 'QueryEvent', 'EventBus', 'EVENT_QUERY', 'DB_EVENT_SOURCE']
