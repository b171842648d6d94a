"""
pyaction HTTP Response - immutable-by-convention response value.

Every mutator (``with_header``, ``with_status``, ``with_cookie`` ...) returns a
new ``Response`` and leaves the original untouched, so callers must keep the
value they get back. The body stream is the one exception: like a PSR-7
message, copies share the body of the response they were derived from and
``body.write()`` mutates it in place.
"""

import copy
import json
from http import HTTPStatus
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pyaction.http.cookies import Cookie


class Body:
    """Writable in-memory body stream"""

    def __init__(self, content: Union[str, bytes, None] = None, charset: str = "utf-8"):
        self.charset = charset
        self._buffer = bytearray()
        if content:
            self.write(content)

    def write(self, data: Union[str, bytes]) -> int:
        """Append to the stream; returns the number of bytes written"""
        if isinstance(data, str):
            data = data.encode(self.charset)
        self._buffer.extend(data)
        return len(data)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def truncate(self) -> None:
        self._buffer.clear()

    def __len__(self) -> int:
        return len(self._buffer)

    def __str__(self) -> str:
        return self._buffer.decode(self.charset, errors="replace")


class Response:
    """
    HTTP response value with status, headers, cookies and a body stream.

    Header names are case-insensitive and stored lower-cased.
    """

    def __init__(
        self,
        content: Union[str, bytes, None] = None,
        status_code: int = 200,
        headers: Optional[Dict[str, str]] = None,
        charset: str = "utf-8",
    ):
        self.status_code = status_code
        self.headers: Dict[str, str] = {k.lower(): v for k, v in (headers or {}).items()}
        self.cookies: List[Cookie] = []
        self.charset = charset
        self.body = Body(content, charset)

    def _clone(self) -> 'Response':
        clone = copy.copy(self)
        clone.headers = dict(self.headers)
        clone.cookies = list(self.cookies)
        return clone

    def get_body(self) -> Body:
        return self.body

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get a response header."""
        return self.headers.get(name.lower(), default)

    @property
    def reason_phrase(self) -> str:
        try:
            return HTTPStatus(self.status_code).phrase
        except ValueError:
            return "Unknown"

    def with_header(self, name: str, value: Any) -> 'Response':
        """Return a copy with the header replaced"""
        clone = self._clone()
        clone.headers[name.lower()] = str(value)
        return clone

    def with_status(self, status_code: int) -> 'Response':
        """Return a copy with a new status code"""
        clone = self._clone()
        clone.status_code = int(status_code)
        return clone

    def with_cookie(self, cookie: Cookie) -> 'Response':
        """Return a copy with ``cookie`` appended"""
        clone = self._clone()
        clone.cookies.append(cookie)
        return clone

    def get_cookie(self, name: str) -> Optional[Cookie]:
        """Last cookie set under ``name``"""
        for cookie in reversed(self.cookies):
            if cookie.name == name:
                return cookie
        return None

    def header_items(self) -> List[Tuple[str, str]]:
        """Headers as sent on the wire, one ``set-cookie`` per cookie"""
        items = list(self.headers.items())
        if "content-type" not in self.headers:
            items.append(("content-type", f"text/html; charset={self.charset}"))
        items.extend(("set-cookie", cookie.to_header()) for cookie in self.cookies)
        return items

    async def __call__(self, scope: Dict[str, Any], receive: Callable, send: Callable) -> None:
        """ASGI response callable."""
        content = self.body.getvalue()
        headers = [
            [key.encode("latin-1"), value.encode("latin-1")]
            for key, value in self.header_items()
        ]
        if "content-length" not in self.headers:
            headers.append([b"content-length", str(len(content)).encode()])

        await send({
            "type": "http.response.start",
            "status": self.status_code,
            "headers": headers,
        })
        await send({
            "type": "http.response.body",
            "body": content,
            "more_body": False,
        })

    @classmethod
    def json(cls, content: Any, status_code: int = 200, charset: str = "utf-8") -> 'Response':
        """Create a JSON response."""
        return cls(
            content=json.dumps(content, ensure_ascii=False),
            status_code=status_code,
            headers={"content-type": f"application/json; charset={charset}"},
            charset=charset,
        )

    def __repr__(self) -> str:
        return f"<Response {self.status_code} {self.reason_phrase}>"
