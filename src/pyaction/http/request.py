"""
Read-only request accessor.

Controllers never parse HTTP themselves; the front controller hands them a
``Request`` holding already-decoded query, body, cookie and server
parameters. Every getter can pass values through a filter before returning
them (HTML-escaping by default).
"""

import html
from http.cookies import SimpleCookie
from typing import Any, Callable, Dict, Mapping, Optional, Union
from urllib.parse import parse_qsl

from pyaction.http.uri import Uri

FilterFunc = Callable[[Any], Any]


def default_filter(value: Any) -> Any:
    """Trim and HTML-escape strings, recursing into lists and dicts"""
    if isinstance(value, str):
        return html.escape(value.strip())
    if isinstance(value, list):
        return [default_filter(v) for v in value]
    if isinstance(value, dict):
        return {k: default_filter(v) for k, v in value.items()}
    return value


class Request:
    """Request accessor over query/body/cookie/server parameters"""

    def __init__(self,
                 method: str = "GET",
                 uri: Union[str, Uri] = "/",
                 query: Optional[Mapping[str, Any]] = None,
                 body: Optional[Mapping[str, Any]] = None,
                 cookies: Optional[Mapping[str, str]] = None,
                 server: Optional[Mapping[str, Any]] = None,
                 base_url: str = "",
                 route: str = "",
                 filter_func: Optional[FilterFunc] = default_filter):
        self.method = method.upper()
        self._query: Dict[str, Any] = dict(query or {})
        self._body: Dict[str, Any] = dict(body or {})
        self._cookies: Dict[str, str] = dict(cookies or {})
        self._server: Dict[str, Any] = dict(server or {})
        self._base_url = base_url
        self.route = route
        self._filter = filter_func

        if not isinstance(uri, Uri):
            uri = Uri.parse(uri)
        if not uri.host and self._server.get('HTTP_HOST'):
            host, _, port = str(self._server['HTTP_HOST']).partition(':')
            uri = Uri(
                scheme=uri.scheme or ('https' if self._server.get('HTTPS') in ('on', '1') else 'http'),
                host=host,
                port=int(port) if port.isdigit() else None,
                path=uri.path,
                query=uri.query,
                fragment=uri.fragment,
            )
        if uri.host and 'HTTP_HOST' not in self._server:
            self._server['HTTP_HOST'] = uri.host if uri.port is None else f"{uri.host}:{uri.port}"
        if not self._query and uri.query:
            self._query = dict(parse_qsl(uri.query, keep_blank_values=True))
        self._uri = uri

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any], base_url: str = "", route: str = "") -> 'Request':
        """Build a request from a WSGI environ with an url-encoded body"""
        scheme = environ.get('wsgi.url_scheme', 'http')
        host = environ.get('HTTP_HOST') or environ.get('SERVER_NAME', '')
        path = environ.get('PATH_INFO', '/') or '/'
        query_string = environ.get('QUERY_STRING', '')
        url = f"{scheme}://{host}{path}"
        if query_string:
            url += f"?{query_string}"

        body: Dict[str, Any] = {}
        content_type = environ.get('CONTENT_TYPE', '')
        stream = environ.get('wsgi.input')
        if stream is not None and content_type.startswith('application/x-www-form-urlencoded'):
            length = int(environ.get('CONTENT_LENGTH') or 0)
            raw = stream.read(length) if length else b''
            body = dict(parse_qsl(raw.decode('utf-8'), keep_blank_values=True))

        cookies: Dict[str, str] = {}
        if environ.get('HTTP_COOKIE'):
            jar = SimpleCookie()
            jar.load(environ['HTTP_COOKIE'])
            cookies = {name: morsel.value for name, morsel in jar.items()}

        server = {k: v for k, v in environ.items() if isinstance(v, str)}
        return cls(
            method=environ.get('REQUEST_METHOD', 'GET'),
            uri=url,
            query=dict(parse_qsl(query_string, keep_blank_values=True)),
            body=body,
            cookies=cookies,
            server=server,
            base_url=base_url,
            route=route,
        )

    def _apply(self, value: Any, apply_filter: bool) -> Any:
        if apply_filter and self._filter is not None and value is not None:
            return self._filter(value)
        return value

    def get_query_param(self, name: str, default: Any = None, apply_filter: bool = True) -> Any:
        return self._apply(self._query.get(name, default), apply_filter)

    def get_post_param(self, name: str, default: Any = None, apply_filter: bool = True) -> Any:
        return self._apply(self._body.get(name, default), apply_filter)

    def get_cookie_param(self, name: str, default: Any = None, apply_filter: bool = True) -> Any:
        return self._apply(self._cookies.get(name, default), apply_filter)

    def get_server_param(self, name: str, default: Any = None, apply_filter: bool = True) -> Any:
        return self._apply(self._server.get(name, default), apply_filter)

    def get_query_params(self, apply_filter: bool = True) -> Dict[str, Any]:
        return self._apply(dict(self._query), apply_filter)

    def get_parsed_body(self, apply_filter: bool = True) -> Dict[str, Any]:
        return self._apply(dict(self._body), apply_filter)

    def get_cookie_params(self, apply_filter: bool = True) -> Dict[str, Any]:
        return self._apply(dict(self._cookies), apply_filter)

    def get_server_params(self) -> Dict[str, Any]:
        return dict(self._server)

    @property
    def uri(self) -> Uri:
        return self._uri

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def host(self) -> str:
        return self._uri.host

    def __repr__(self) -> str:
        return f"<Request {self.method} {self._uri}>"
