from pyaction.routing.dispatcher import FrontController

__all__ = ['FrontController']
