"""Logging helpers for globemesh.

Library modules only create loggers under the ``globemesh`` namespace; the
package ``__init__`` attaches a NullHandler so nothing is printed unless the
application configures logging. Scripts call configure_logging() to get a
single stdout handler without touching the process root logger.
"""
from __future__ import annotations

import logging
import sys
from typing import Union

_ROOT_NAME = 'globemesh'
_FORMAT = '%(levelname)s %(name)s: %(message)s'


def get_logger(name: str) -> logging.Logger:
    """Return ``name`` as a child of the 'globemesh' logger."""
    if name != _ROOT_NAME and not name.startswith(_ROOT_NAME + '.'):
        name = f'{_ROOT_NAME}.{name}'
    return logging.getLogger(name)


def configure_logging(level: Union[str, int] = 'INFO', stream=None) -> logging.Logger:
    """Route 'globemesh' records to ``stream`` (stdout by default) at ``level``.

    Repeated calls replace the handler installed by the previous call. At
    DEBUG, matplotlib's font manager chatter is held back at INFO.

    Raises
    ------
    ValueError
        If ``level`` is not a known level name.
    """
    root = logging.getLogger(_ROOT_NAME)
    root.setLevel(level.upper() if isinstance(level, str) else level)
    for h in list(root.handlers):
        if getattr(h, '_globemesh_console', False):
            root.removeHandler(h)
    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._globemesh_console = True
    root.addHandler(handler)
    root.propagate = False
    if root.level <= logging.DEBUG:
        logging.getLogger('matplotlib').setLevel(logging.INFO)
    return root


__all__ = ['get_logger', 'configure_logging']
