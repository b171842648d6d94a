"""
Cookie value carried by responses.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional


@dataclass
class Cookie:
    """A response cookie: name, value and attributes"""
    name: str
    value: str = ""
    max_age: Optional[int] = None
    expires: Optional[datetime] = None
    path: str = "/"
    domain: Optional[str] = None
    secure: bool = False
    httponly: bool = False
    samesite: Optional[str] = None

    def get_value(self) -> str:
        return self.value

    def set_value(self, value: str) -> None:
        self.value = value

    def to_header(self) -> str:
        """Render the ``Set-Cookie`` header value"""
        cookie_parts = [f"{self.name}={self.value}"]

        if self.max_age is not None:
            cookie_parts.append(f"Max-Age={self.max_age}")
        if self.expires is not None:
            expires = self.expires
            if expires.tzinfo is None:
                expires = expires.replace(tzinfo=timezone.utc)
            cookie_parts.append(f"Expires={format_datetime(expires, usegmt=True)}")
        if self.path:
            cookie_parts.append(f"Path={self.path}")
        if self.domain:
            cookie_parts.append(f"Domain={self.domain}")
        if self.secure:
            cookie_parts.append("Secure")
        if self.httponly:
            cookie_parts.append("HttpOnly")
        if self.samesite:
            cookie_parts.append(f"SameSite={self.samesite}")

        return "; ".join(cookie_parts)
