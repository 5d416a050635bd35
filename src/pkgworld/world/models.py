"""World file record models.

Defines the value types stored in the world file: VersionConstraint,
FlagAssignment and RequestRecord, plus the name-only identity predicate
used by every merge rule.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Iterable

from packaging.version import Version


class Operator(StrEnum):
    """Comparison operators allowed in a version clause."""

    EQ = "=="
    GE = ">="
    GT = ">"
    LE = "<="
    LT = "<"


@dataclass(frozen=True)
class VersionClause:
    """A single ``<op><version>`` comparison, e.g. ``>=1.0``."""

    op: Operator
    version: str

    def __post_init__(self) -> None:
        # Canonical PEP 440 spelling; InvalidVersion for anything else.
        object.__setattr__(self, "op", Operator(self.op))
        object.__setattr__(self, "version", str(Version(self.version)))

    def __str__(self) -> str:
        return f"{self.op}{self.version}"


@dataclass(frozen=True)
class VersionConstraint:
    """A version range in disjunctive normal form.

    ``alternatives`` is a tuple of conjunctions; each conjunction is a
    tuple of clauses that must all hold. An empty ``alternatives`` tuple
    is the wildcard and matches any version.
    """

    alternatives: tuple[tuple[VersionClause, ...], ...] = ()

    @property
    def is_any(self) -> bool:
        return not self.alternatives

    @classmethod
    def wildcard(cls) -> VersionConstraint:
        return cls()

    @classmethod
    def exactly(cls, version: str) -> VersionConstraint:
        return cls(((VersionClause(Operator.EQ, version),),))


ANY_VERSION = VersionConstraint.wildcard()


@dataclass(frozen=True)
class FlagAssignment:
    """A build flag switched on or off."""

    name: str
    enabled: bool = True

    def __str__(self) -> str:
        return self.name if self.enabled else f"-{self.name}"


@dataclass(frozen=True)
class RequestRecord:
    """One explicitly requested package.

    ``==`` compares every field. Use :func:`same_identity` when only the
    package name matters.
    """

    name: str
    constraint: VersionConstraint = ANY_VERSION
    flags: tuple[FlagAssignment, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any iterable of flags but store a tuple so records stay hashable.
        if not isinstance(self.flags, tuple):
            object.__setattr__(self, "flags", tuple(self.flags))


def same_identity(a: RequestRecord, b: RequestRecord) -> bool:
    """Return True when both records refer to the same package.

    Version constraints and flag assignments are ignored.
    """
    return a.name == b.name


def dedupe_by_name(records: Iterable[RequestRecord]) -> list[RequestRecord]:
    """Keep the first record seen for each package name, preserving order."""
    seen: dict[str, RequestRecord] = {}
    for record in records:
        seen.setdefault(record.name, record)
    return list(seen.values())
