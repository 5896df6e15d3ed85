# tests/conftest.py
import logging

import pytest

from dimcalc.expr.evaluator import evaluate
from dimcalc.expr.parser import parse_expression
from dimcalc.scope import Scope
from dimcalc.units.registry import DEFAULT_REGISTRY as _ureg


@pytest.fixture(scope="session")
def ureg():
    return _ureg


@pytest.fixture
def scope():
    return Scope.with_constants()


@pytest.fixture
def calc(scope):
    """Parse and evaluate one expression against a fresh constant scope."""
    def _calc(text: str):
        return evaluate(parse_expression(text), scope)
    return _calc


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("dimcalc")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
