"""
HTTP value objects consumed by controllers.
"""

from pyaction.http.cookies import Cookie
from pyaction.http.request import Request, default_filter
from pyaction.http.response import Body, Response
from pyaction.http.uri import Uri

__all__ = ['Body', 'Cookie', 'Request', 'Response', 'Uri', 'default_filter']
