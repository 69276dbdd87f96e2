from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from loopforecast._types import Resources, compare


class Requirement(ABC):
    """Base class for start conditions, boolean checks on current resources."""

    @abstractmethod
    def evaluate(self, resources: Resources) -> bool: ...

    def __and__(self, other: Requirement) -> Requirement:
        return _AllRequirement([self, other])

    def __or__(self, other: Requirement) -> Requirement:
        return _AnyRequirement([self, other])

    def __call__(self, resources: Resources) -> bool:
        return self.evaluate(resources)


# ── Private implementations ──────────────────────────────────────────


class _ResourceRequirement(Requirement):
    def __init__(self, resource: str, op: str, threshold: float) -> None:
        self.resource = resource
        self.op = op
        self.threshold = threshold

    def evaluate(self, resources: Resources) -> bool:
        return compare(resources.get(self.resource, 0), self.op, self.threshold)


class _HasRequirement(Requirement):
    def __init__(self, resource: str) -> None:
        self.resource = resource

    def evaluate(self, resources: Resources) -> bool:
        return bool(resources.get(self.resource, 0))


class _AllRequirement(Requirement):
    def __init__(self, reqs: list[Requirement]) -> None:
        self.reqs = reqs

    def evaluate(self, resources: Resources) -> bool:
        return all(r.evaluate(resources) for r in self.reqs)


class _AnyRequirement(Requirement):
    def __init__(self, reqs: list[Requirement]) -> None:
        self.reqs = reqs

    def evaluate(self, resources: Resources) -> bool:
        return any(r.evaluate(resources) for r in self.reqs)


class _CustomRequirement(Requirement):
    def __init__(self, fn: Callable[[Resources], bool]) -> None:
        self.fn = fn

    def evaluate(self, resources: Resources) -> bool:
        return bool(self.fn(resources))


# ── Public factory ───────────────────────────────────────────────────


class Req:
    """Factory for built-in start conditions."""

    @staticmethod
    def resource(resource: str, op: str, threshold: float) -> Requirement:
        return _ResourceRequirement(resource, op, threshold)

    @staticmethod
    def has(resource: str) -> Requirement:
        """True when the resource is present and truthy (e.g. a bought item)."""
        return _HasRequirement(resource)

    @staticmethod
    def all(*reqs: Requirement) -> Requirement:
        return _AllRequirement(list(reqs))

    @staticmethod
    def any(*reqs: Requirement) -> Requirement:
        return _AnyRequirement(list(reqs))

    @staticmethod
    def custom(fn: Callable[[Resources], bool]) -> Requirement:
        return _CustomRequirement(fn)
