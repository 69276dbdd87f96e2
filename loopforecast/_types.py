from __future__ import annotations

import operator
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Callable, Union

if TYPE_CHECKING:
    from loopforecast.requirement import Requirement

Resources = MutableMapping[str, float]
Stats = MutableMapping[str, float]
Skills = MutableMapping[str, float]

Effect = Callable[[Resources, Skills], None]
DynamicFlag = Union[bool, "Requirement", Callable[[Resources], bool]]

_OPS: dict[str, Callable[[float, float], bool]] = {
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
    "==": operator.eq,
    "!=": operator.ne,
}


def resolve_flag(value: DynamicFlag, resources: Resources) -> bool:
    """Resolve a literal bool, a Requirement or a predicate over resources."""
    evaluate = getattr(value, "evaluate", None)
    if evaluate is not None:
        return bool(evaluate(resources))
    if callable(value):
        return bool(value(resources))
    return bool(value)


def compare(left: float, op: str, right: float) -> bool:
    """Compare two values using a string operator."""
    fn = _OPS.get(op)
    if fn is None:
        raise ValueError(f"Unknown operator: {op!r}. Expected one of {list(_OPS)}")
    return fn(left, right)
