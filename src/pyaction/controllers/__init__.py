from pyaction.controllers.base import (
    ACTION_SUFFIX,
    MSG_ERR,
    MSG_OK,
    ActionDescriptor,
    ActionParameter,
    ActionResult,
    Controller,
    ResultKind,
)

__all__ = [
    'Controller', 'ActionParameter', 'ActionDescriptor', 'ActionResult',
    'ResultKind', 'ACTION_SUFFIX', 'MSG_OK', 'MSG_ERR',
]
