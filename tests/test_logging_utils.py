import logging

import numpy as np
import pytest

from repulsive_layout.logging_utils import _safe_repr, apply_debug_logging, debug_log_call


def test_debug_log_call_traces_entry_and_exit(caplog):
    logger = logging.getLogger("tests.trace")

    @debug_log_call(logger)
    def double(value):
        return value * 2

    with caplog.at_level(logging.DEBUG, logger="tests.trace"):
        assert double(21) == 42

    messages = [record.getMessage() for record in caplog.records]
    assert any(msg.startswith("Entering") and "double" in msg and "21" in msg for msg in messages)
    assert any(msg.startswith("Exiting") and "42" in msg for msg in messages)


def test_debug_log_call_is_silent_above_debug(caplog):
    logger = logging.getLogger("tests.quiet")

    @debug_log_call(logger)
    def noop():
        return None

    with caplog.at_level(logging.INFO, logger="tests.quiet"):
        noop()
    assert caplog.records == []


def test_debug_log_call_reraises(caplog):
    logger = logging.getLogger("tests.fail")

    @debug_log_call(logger)
    def boom():
        raise IndexError("bad index")

    with caplog.at_level(logging.DEBUG, logger="tests.fail"):
        with pytest.raises(IndexError):
            boom()
    assert "Exception in" in caplog.text


def test_debug_log_call_does_not_wrap_twice():
    logger = logging.getLogger("tests.twice")

    def func():
        return 1

    wrapped = debug_log_call(logger)(func)
    assert debug_log_call(logger)(wrapped) is wrapped


def test_safe_repr_summarises_arrays():
    assert "shape=(100, 2)" in _safe_repr(np.zeros((100, 2)))
    assert "max=3" in _safe_repr(np.arange(100.0).reshape(25, 4) % 4)
    assert "values=[1.0, 2.0]" in _safe_repr(np.array([1.0, 2.0]))
    assert "items" in _safe_repr(list(range(50)))


def test_apply_debug_logging_wraps_local_functions_only():
    namespace = {"__name__": "tests.namespace"}
    exec(
        "import math\n"
        "def local():\n"
        "    return 3\n",
        namespace,
    )
    sqrt = namespace["math"].sqrt
    apply_debug_logging(namespace)
    assert getattr(namespace["local"], "_debug_logging_wrapped", False)
    assert namespace["local"]() == 3
    assert namespace["math"].sqrt is sqrt
