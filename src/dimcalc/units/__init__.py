"""Unit table, SI prefixes and unit-expression parsing.

``dimcalc.units.default_registry`` and ``dimcalc.units.parse_unit`` are
resolved on first access, so importing the package does not build the
unit table.
"""
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from dimcalc.core.unit import Unit

_LAZY = ("default_registry", "parse_unit")


def __getattr__(name: str) -> Any:
    if name not in _LAZY:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from dimcalc.units.registry import DEFAULT_REGISTRY

    if name == "default_registry":
        return DEFAULT_REGISTRY
    parse: Callable[[str], "Unit"] = DEFAULT_REGISTRY.parse
    return parse


def __dir__() -> list[str]:
    return sorted([*globals(), *_LAZY])
