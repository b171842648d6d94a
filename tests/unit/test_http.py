"""
Unit tests for Request, Response and Uri values
"""
import io

import pytest

from pyaction.http import Cookie, Request, Response, Uri
from pyaction.http.request import default_filter


class TestUri:
    """Test Uri parsing and immutability"""

    def test_parse_and_str(self):
        uri = Uri.parse("https://user@example.com:8443/a/b?x=1#top")
        assert uri.scheme == "https"
        assert uri.host == "example.com"
        assert uri.port == 8443
        assert uri.fragment == "top"
        assert str(uri) == "https://user@example.com:8443/a/b?x=1#top"

    def test_host_case_preserved(self):
        uri = Uri.parse("http://EXAMPLE.com:8080/x")
        assert uri.host == "EXAMPLE.com"
        assert uri.port == 8080

    def test_ipv6_host(self):
        assert str(Uri.parse("http://[::1]:8000/")) == "http://[::1]:8000/"

    def test_with_fragment_returns_new_value(self):
        uri = Uri.parse("http://example.com/a")
        changed = uri.with_fragment("b")
        assert str(uri) == "http://example.com/a"
        assert str(changed) == "http://example.com/a#b"


class TestRequest:
    """Test the request accessor"""

    def test_query_parsed_from_uri(self):
        request = Request(uri="http://example.com/list?page=2&q=")
        assert request.get_query_params() == {'page': '2', 'q': ''}

    def test_host_from_server_params(self):
        request = Request(uri="/path", server={'HTTP_HOST': 'example.com:8080'})
        assert request.uri.host == "example.com"
        assert request.uri.port == 8080
        assert str(request.uri) == "http://example.com:8080/path"

    def test_http_host_filled_from_uri(self):
        request = Request(uri="http://example.com/")
        assert request.get_server_param('HTTP_HOST') == "example.com"

    def test_filter_applied(self):
        request = Request(query={'q': ' <script> '})
        assert request.get_query_param('q') == "&lt;script&gt;"
        assert request.get_query_param('q', apply_filter=False) == " <script> "

    def test_filter_on_whole_mapping(self):
        request = Request(body={'a': '<b>', 'n': 1})
        assert request.get_parsed_body() == {'a': '&lt;b&gt;', 'n': 1}

    def test_defaults(self):
        request = Request()
        assert request.get_post_param('missing', 'd') == 'd'
        assert request.get_cookie_param('missing') is None

    def test_accessor_does_not_mutate(self):
        request = Request(query={'a': '1'})
        request.get_query_params()['a'] = '2'
        assert request.get_query_param('a') == '1'

    def test_default_filter_recurses(self):
        assert default_filter(['<a>', {'k': '"'}]) == ['&lt;a&gt;', {'k': '&quot;'}]

    def test_from_environ(self):
        body = b"title=Hello+World"
        environ = {
            'REQUEST_METHOD': 'POST',
            'wsgi.url_scheme': 'http',
            'HTTP_HOST': 'example.com',
            'PATH_INFO': '/post/save',
            'QUERY_STRING': 'draft=1',
            'CONTENT_TYPE': 'application/x-www-form-urlencoded',
            'CONTENT_LENGTH': str(len(body)),
            'HTTP_COOKIE': 'lang=en; sid=abc',
            'wsgi.input': io.BytesIO(body),
        }
        request = Request.from_environ(environ)
        assert request.method == 'POST'
        assert request.uri.path == '/post/save'
        assert request.get_query_param('draft') == '1'
        assert request.get_post_param('title') == 'Hello World'
        assert request.get_cookie_param('sid') == 'abc'


class TestResponse:
    """Test the response value"""

    def test_with_header_is_non_destructive(self):
        response = Response()
        changed = response.with_header('X-Test', 'yes')
        assert response.get_header('x-test') is None
        assert changed.get_header('X-TEST') == 'yes'

    def test_with_status(self):
        response = Response()
        assert response.with_status(404).status_code == 404
        assert response.status_code == 200

    def test_with_cookie_appends(self):
        response = Response().with_cookie(Cookie('a', '1')).with_cookie(Cookie('a', '2'))
        assert response.get_cookie('a').value == '2'
        assert len(response.cookies) == 2

    def test_derived_responses_share_body(self):
        response = Response()
        derived = response.with_header('X-Test', 'yes')
        derived.body.write("shared")
        assert response.body.getvalue() == b"shared"

    def test_body_accepts_text_and_bytes(self):
        response = Response("a")
        response.get_body().write(b"b")
        response.get_body().write("ü")
        assert response.body.getvalue() == "abü".encode()

    def test_header_items_include_cookies(self):
        response = Response().with_cookie(Cookie('sid', 'x'))
        items = dict(response.header_items())
        assert items['set-cookie'] == "sid=x; Path=/"
        assert items['content-type'] == "text/html; charset=utf-8"

    def test_json_factory(self):
        response = Response.json({'a': 'é'}, status_code=201)
        assert response.status_code == 201
        assert response.body.getvalue() == '{"a": "é"}'.encode()

    def test_repr(self):
        assert repr(Response(status_code=404)) == "<Response 404 Not Found>"

    @pytest.mark.asyncio
    async def test_asgi_call(self):
        sent = []

        async def send(message):
            sent.append(message)

        response = Response("hi", status_code=201).with_cookie(Cookie('sid', 'x'))
        await response({'type': 'http'}, None, send)

        start, body = sent
        assert start['status'] == 201
        assert [b'set-cookie', b'sid=x; Path=/'] in start['headers']
        assert [b'content-length', b'2'] in start['headers']
        assert body == {'type': 'http.response.body', 'body': b'hi', 'more_body': False}
