"""
Debug trace middleware.

Requests carrying a truthy ``_debug`` query parameter are profiled and a trace
file is written under ``<debug.log_path>``. The trace id is returned to the
browser in the ``debug_trace_id`` cookie so a debug viewer can load it.
"""

import json
import logging
import os
import time
import uuid
from typing import Any, Dict, List, Optional

import psutil

from pyaction.config import ConfigStore
from pyaction.events import DB_EVENT_SOURCE, EVENT_QUERY, EventBus, QueryEvent
from pyaction.http.cookies import Cookie
from pyaction.http.request import Request
from pyaction.http.response import Response
from pyaction.middleware.base import MiddlewareInterface, NextHandler
from pyaction.performance.profiler import Profiler

logger = logging.getLogger(__name__)


class DebuggerMiddleware(MiddlewareInterface):
    """Record SQL, timing, memory and profile data for debug requests"""

    def __init__(self, config: ConfigStore, events: EventBus, profiler: Optional[Profiler] = None):
        self.cli = bool(config.get('app', 'cli'))
        self.cookie_name = config.get('debug', 'cookie_name') or 'debug_trace_id'
        self.log_path: Optional[str] = None
        self.profile_path: Optional[str] = None
        self.profiler: Optional[Profiler] = None
        self.sql_logs: List[Dict[str, Any]] = []
        self._recording = False

        if not self.cli:
            self.log_path = config.get('debug', 'log_path') or os.path.join('data', 'debug')
            self.profile_path = os.path.join(self.log_path, 'profiles')
            os.makedirs(self.profile_path, mode=0o755, exist_ok=True)
            if profiler is not None:
                self.profiler = profiler
            elif config.get('debug', 'profile'):
                self.profiler = Profiler(self.profile_path)
            events.on(DB_EVENT_SOURCE, EVENT_QUERY, self._on_query)

    def _on_query(self, event: QueryEvent) -> None:
        if self._recording:
            self.sql_logs.append({
                'time': event.time,
                'sql': event.sql,
                'params': event.params,
            })

    def process(self, request: Request, next: NextHandler) -> Response:
        if self.cli or not request.get_query_param('_debug'):
            return next()

        start_time = request.get_server_param('REQUEST_TIME_FLOAT', None, False)
        start_time = float(start_time) if start_time else time.time()
        self.sql_logs = []
        self._recording = True
        if self.profiler is not None:
            self.profiler.start_profiling()

        try:
            response = next()
        finally:
            self._recording = False
            if self.profiler is not None:
                self.profiler.stop_profiling(report=False)

        data = {
            'route': request.route,
            'request': repr(request),
            'get': request.get_query_params(False),
            'post': request.get_parsed_body(False),
            'cookies': request.get_cookie_params(False),
            'server': request.get_server_params(),
            'startTime': start_time,
            'execTime': time.time() - start_time,
            'memoryUsage': psutil.Process().memory_info().rss,
            'sqlLogs': self.sql_logs,
        }
        if self.profiler is not None:
            data['profileRunId'] = self.profiler.save_run(request.route)

        trace_id = uuid.uuid4().hex
        with open(os.path.join(self.log_path, f"{trace_id}.log"), 'w', encoding='utf-8') as f:
            json.dump(data, f, default=str)
        logger.debug("Wrote debug trace %s for %s", trace_id, request.route)

        return response.with_cookie(Cookie(self.cookie_name, trace_id))


def load_trace(log_path: str, trace_id: str) -> Dict[str, Any]:
    """Read back a trace written by DebuggerMiddleware"""
    if not trace_id.isalnum():
        raise ValueError(f"Invalid trace id: {trace_id}")
    with open(os.path.join(log_path, f"{trace_id}.log"), encoding='utf-8') as f:
        return json.load(f)
