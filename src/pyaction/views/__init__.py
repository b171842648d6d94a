from pyaction.views.base import JinjaView, ViewInterface

__all__ = ['JinjaView', 'ViewInterface']
