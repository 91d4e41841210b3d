import io
import logging

import pytest

from globemesh.core.errors import GlobeMeshError, InvalidPolygonError, TriangulationStateError
from globemesh.core.logging_utils import configure_logging, get_logger


@pytest.fixture
def pkg_logger():
    pkg = logging.getLogger('globemesh')
    saved = (pkg.level, list(pkg.handlers), pkg.propagate, logging.getLogger('matplotlib').level)
    yield pkg
    pkg.setLevel(saved[0])
    pkg.handlers[:] = saved[1]
    pkg.propagate = saved[2]
    logging.getLogger('matplotlib').setLevel(saved[3])


def test_get_logger_namespaces_short_names():
    assert get_logger('sampling').name == 'globemesh.sampling'
    assert get_logger('globemesh.sampling') is logging.getLogger('globemesh.sampling')
    assert get_logger('globemesh').name == 'globemesh'
    # a sibling package sharing the prefix is still nested
    assert get_logger('globemeshx').name == 'globemesh.globemeshx'


def test_package_ships_a_null_handler():
    import globemesh  # noqa: F401
    pkg = logging.getLogger('globemesh')
    assert any(isinstance(h, logging.NullHandler) for h in pkg.handlers)


def test_configure_logging_installs_one_console_handler(pkg_logger):
    buf = io.StringIO()
    configure_logging('warning', stream=buf)
    configure_logging('info', stream=buf)
    ours = [h for h in pkg_logger.handlers if getattr(h, '_globemesh_console', False)]
    assert len(ours) == 1
    assert pkg_logger.level == logging.INFO
    assert pkg_logger.propagate is False
    get_logger('pipeline').info('meshed %d regions', 3)
    get_logger('pipeline').debug('hidden')
    assert buf.getvalue() == 'INFO globemesh.pipeline: meshed 3 regions\n'


def test_configure_logging_debug_holds_matplotlib_at_info(pkg_logger):
    configure_logging(logging.DEBUG, stream=io.StringIO())
    assert pkg_logger.level == logging.DEBUG
    assert logging.getLogger('matplotlib').level == logging.INFO


def test_configure_logging_rejects_unknown_level(pkg_logger):
    with pytest.raises(ValueError):
        configure_logging('not-a-level')


@pytest.mark.parametrize('exc, builtin', [
    (InvalidPolygonError, ValueError),
    (TriangulationStateError, RuntimeError),
])
def test_error_hierarchy(exc, builtin):
    assert issubclass(exc, GlobeMeshError)
    assert issubclass(exc, builtin)
    with pytest.raises(GlobeMeshError):
        raise exc('boom')
