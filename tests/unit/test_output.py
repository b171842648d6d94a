"""
Unit tests for assign, serve_json, render and message
"""
import json
from unittest.mock import MagicMock

import pytest

from pyaction.controllers import MSG_ERR, MSG_OK, Controller
from pyaction.http import Request
from pyaction.views import ViewInterface


class JsonpController(Controller):
    jsonp_enabled = True


class TestAssign:
    """Test assign"""

    def test_assign_single_value(self, make_controller, faker):
        title = faker.sentence()
        controller = make_controller()
        controller.assign('title', title)
        assert controller.get_data() == {'title': title}

    def test_assign_mapping_overwrites_in_place(self, make_controller):
        controller = make_controller()
        controller.assign({'a': 1})
        controller.assign({'a': 2, 'b': 3})
        assert controller.get_data() == {'a': 2, 'b': 3}
        assert list(controller.get_data()) == ['a', 'b']

    def test_overwrite_keeps_position(self, make_controller):
        controller = make_controller()
        controller.assign('x', 1)
        controller.assign('y', 2)
        controller.assign('x', 3)
        assert list(controller.get_data().items()) == [('x', 3), ('y', 2)]

    def test_data_property_is_a_copy(self, make_controller):
        controller = make_controller()
        controller.assign('x', 1)
        controller.data['x'] = 99
        assert controller.get_data() == {'x': 1}


class TestServeJson:
    """Test serve_json and JSONP wrapping"""

    def test_uses_assigned_data(self, make_controller):
        controller = make_controller()
        controller.assign({'x': 1, 'y': [1, 2]})
        response = controller.serve_json()
        assert json.loads(response.body.getvalue()) == {'x': 1, 'y': [1, 2]}
        assert response.get_header('Content-Type') == 'application/json; charset=utf-8'

    def test_explicit_data_wins(self, make_controller):
        controller = make_controller()
        controller.assign('ignored', True)
        response = controller.serve_json({'ok': 1})
        assert response.body.getvalue() == b'{"ok":1}'

    def test_unicode_left_unescaped(self, make_controller):
        controller = make_controller()
        response = controller.serve_json({'name': '李四'})
        assert response.body.getvalue().decode('utf-8') == '{"name":"李四"}'

    def test_jsonp_disabled_by_default(self, make_controller):
        request = Request(uri="http://example.com/", query={'jsoncallback': 'cb'})
        response = make_controller(request=request).serve_json({'x': 1})
        assert response.body.getvalue() == b'{"x":1}'

    def test_jsonp_wraps_callback(self, make_controller):
        request = Request(uri="http://example.com/", query={'jsoncallback': 'cb'})
        response = make_controller(JsonpController, request=request).serve_json({'x': 1})
        assert response.body.getvalue() == b'cb({"x":1})'

    def test_jsonp_question_mark_callback(self, make_controller):
        request = Request(uri="http://example.com/", query={'jsoncallback': '?cb'})
        response = make_controller(JsonpController, request=request).serve_json({'x': 1})
        assert response.body.getvalue() == b'({"x":1})'

    def test_jsonp_empty_callback_ignored(self, make_controller):
        request = Request(uri="http://example.com/", query={'jsoncallback': ''})
        response = make_controller(JsonpController, request=request).serve_json({'x': 1})
        assert response.body.getvalue() == b'{"x":1}'

    def test_configured_charset(self, config, make_controller):
        config.set('app', 'charset', 'gbk')
        response = make_controller().serve_json({'x': 1})
        assert response.get_header('content-type') == 'application/json; charset=gbk'


class TestRender:
    """Test render, message and layouts"""

    def test_render_defaults_to_route(self, make_controller):
        controller = make_controller(route='home')
        controller.assign('title', 'Welcome')
        response = controller.render()
        assert response.body.getvalue() == b"home:Welcome"

    def test_render_empty_filename_uses_route_template(self, make_controller):
        view = MagicMock(spec=ViewInterface)
        view.render.return_value = b"ok"
        controller = make_controller(route='home')
        controller._view = view
        controller.render("")
        view.render.assert_called_once_with('home', {})

    def test_caller_data_wins(self, make_controller):
        controller = make_controller(route='post/show')
        controller.assign({'id': 1, 'author': 'ann'})
        response = controller.render('post/show', {'id': 2})
        assert response.body.getvalue() == b"post 2 by ann"

    def test_render_writes_current_response(self, make_controller):
        controller = make_controller()
        response = controller.render('home', {'title': 'x'})
        assert response is controller.response

    def test_message(self, make_controller):
        controller = make_controller()
        response = controller.message('Saved', MSG_OK, '/list')
        assert response.body.getvalue() == b"0|Saved|/list"
        assert controller.get_data() == {'code': MSG_OK, 'msg': 'Saved', 'jumpUrl': '/list'}

    def test_message_defaults_to_error(self, make_controller):
        controller = make_controller()
        controller.message('Failed')
        assert controller.get_data()['code'] == MSG_ERR

    def test_layout_with_section(self, make_controller):
        controller = make_controller()
        controller.set_layout('layout')
        controller.set_layout_section('sidebar', 'sidebar')
        response = controller.render('home', {'title': 'T'})
        assert response.body.getvalue() == b"<main>home:T</main><aside>side:T</aside>"

    def test_template_output_is_escaped(self, make_controller):
        controller = make_controller()
        response = controller.render('home', {'title': '<b>'})
        assert response.body.getvalue() == b"home:&lt;b&gt;"

    def test_missing_template_propagates(self, make_controller):
        import jinja2
        with pytest.raises(jinja2.TemplateNotFound):
            make_controller().render('nope')
