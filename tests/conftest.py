"""
pyaction Test Configuration and Fixtures
"""
import tempfile
from pathlib import Path

import jinja2
import pytest
from faker import Faker

from pyaction.config import ConfigPresets, ConfigStore, DebugConfig
from pyaction.controllers import Controller
from pyaction.http import Request, Response
from pyaction.security import SimpleCipher
from pyaction.views import JinjaView

TEMPLATES = {
    "home.html": "home:{{ title }}",
    "message.html": "{{ code }}|{{ msg }}|{{ jumpUrl }}",
    "post/show.html": "post {{ id }} by {{ author }}",
    "layout.html": "<main>{{ content }}</main><aside>{{ sections.sidebar }}</aside>",
    "sidebar.html": "side:{{ title }}",
}


@pytest.fixture
def faker():
    """Faker instance for generating test data."""
    return Faker()


@pytest.fixture
def temp_dir():
    """Temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def settings(temp_dir):
    """Testing settings with debug traces written to a temp dir."""
    settings = ConfigPresets.testing()
    settings.debug = DebugConfig(log_path=str(temp_dir / "debug"), profile=False)
    return settings


@pytest.fixture
def config(settings):
    """Test application configuration."""
    return ConfigStore(settings)


@pytest.fixture
def cipher():
    """Fast cipher; key derivation cost does not matter in tests."""
    return SimpleCipher(iterations=1000)


@pytest.fixture
def view():
    """View service over in-memory templates."""
    return JinjaView(loader=jinja2.DictLoader(TEMPLATES))


@pytest.fixture
def make_request():
    """Request factory defaulting to host example.com."""
    def factory(uri="http://example.com/", **kwargs):
        return Request(uri=uri, **kwargs)
    return factory


@pytest.fixture
def response():
    return Response()


@pytest.fixture
def make_controller(config, view, cipher, make_request):
    """Build a controller of the given class around a request."""
    def factory(controller_class=Controller, request=None, response=None, route="home", **request_kwargs):
        request = request or make_request(**request_kwargs)
        return controller_class(
            request,
            response or Response(),
            config=config,
            view=view,
            cipher=cipher,
            route=route,
        )
    return factory


# Custom markers
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
