"""
dimcalc: a unit-aware calculator that renders formulas as LaTeX.

Numbers, physical units and named functions are evaluated with dimensional
analysis, SI-prefix resolution and scale normalization, then typeset. This
module exposes the small, stable public API; everything else lives in the
subpackages.
"""

from importlib import metadata as _metadata

from dimcalc.core.quantity import Quantity
from dimcalc.core.unit import EMPTY, Unit
from dimcalc.errors import CalcError
from dimcalc.expr.evaluator import evaluate
from dimcalc.expr.parser import parse_expression
from dimcalc.scope import Scope
from dimcalc.statement import render_document
from dimcalc.units.registry import parse_unit

__license__ = "MIT"

# Try to read the installed package version first; fall back to pyproject.toml for local dev.
try:
    __version__ = _metadata.version("dimcalc")
except _metadata.PackageNotFoundError:
    import tomllib
    with open("pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]


def calc(text: str) -> Quantity:
    """Evaluate one expression against the constant scope."""
    return evaluate(parse_expression(text), Scope.with_constants())


__all__ = [
    "__version__",
    "__license__",
    "CalcError",
    "EMPTY",
    "Quantity",
    "Scope",
    "Unit",
    "calc",
    "evaluate",
    "parse_expression",
    "parse_unit",
    "render_document",
]
