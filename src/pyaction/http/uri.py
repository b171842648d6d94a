"""
Immutable URI value.
"""

from dataclasses import dataclass, replace
from typing import Optional
from urllib.parse import urlsplit, urlunsplit


@dataclass(frozen=True)
class Uri:
    """URI split into components; ``with_*`` methods return new values"""
    scheme: str = ""
    host: str = ""
    port: Optional[int] = None
    path: str = ""
    query: str = ""
    fragment: str = ""
    userinfo: str = ""

    @classmethod
    def parse(cls, url: str) -> 'Uri':
        parts = urlsplit(url)
        userinfo, _, hostport = parts.netloc.rpartition("@")
        return cls(
            scheme=parts.scheme,
            host=split_host(hostport),
            port=parts.port,
            path=parts.path,
            query=parts.query,
            fragment=parts.fragment,
            userinfo=userinfo,
        )

    @property
    def authority(self) -> str:
        if not self.host:
            return ""
        authority = self.host
        if self.userinfo:
            authority = f"{self.userinfo}@{authority}"
        if self.port is not None:
            authority = f"{authority}:{self.port}"
        return authority

    def with_fragment(self, fragment: str) -> 'Uri':
        return replace(self, fragment=fragment.lstrip("#"))

    def __str__(self) -> str:
        return urlunsplit((self.scheme, self.authority, self.path, self.query, self.fragment))


def split_host(hostport: str) -> str:
    """Host part of ``host[:port]`` with its original case kept"""
    if hostport.startswith("["):
        return hostport.partition("]")[0] + "]"
    return hostport.partition(":")[0]
