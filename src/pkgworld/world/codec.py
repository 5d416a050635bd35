"""Line codec for world file records.

Each record is rendered on a single line::

    stm-io-hooks -any --flags="-debug"
    text >=1.2 && <2.1 --flags="integer-gmp -bytestring-builder"

``format_line`` produces the canonical form and ``parse_line`` accepts
it back, so ``parse_line(format_line(r)) == r`` holds for every valid
record.
"""

from __future__ import annotations

import re

from packaging.version import InvalidVersion, Version

from .models import (
    ANY_VERSION,
    FlagAssignment,
    Operator,
    RequestRecord,
    VersionClause,
    VersionConstraint,
)

ANY_TOKEN = "-any"

_NAME_RE = re.compile(r"^[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*$")
_FLAG_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")
_FLAGS_SUFFIX_RE = re.compile(r'\s--flags="([^"]*)"$')
_CLAUSE_RE = re.compile(r"^(==|>=|<=|>|<)\s*(\S+)$")


class RecordParseError(ValueError):
    """Raised when text is not a valid world file record."""


def _is_valid_name(name: str) -> bool:
    if not _NAME_RE.match(name):
        return False
    # Every dash-separated word needs a letter so names never look like versions.
    return all(any(ch.isalpha() for ch in word) for word in name.split("-"))


def _normalize_version(raw: str) -> str:
    try:
        return str(Version(raw))
    except InvalidVersion as exc:
        raise RecordParseError(f"Invalid version {raw!r}") from exc


def parse_constraint(text: str) -> VersionConstraint:
    """Parse a version constraint such as ``>=1.0 && <2 || ==3.0``."""
    text = text.strip()
    if not text or text == ANY_TOKEN:
        return ANY_VERSION

    alternatives: list[tuple[VersionClause, ...]] = []
    for branch in text.split("||"):
        clauses: list[VersionClause] = []
        for part in branch.split("&&"):
            match = _CLAUSE_RE.match(part.strip())
            if match is None:
                raise RecordParseError(f"Invalid version clause {part.strip()!r}")
            op, raw_version = match.groups()
            clauses.append(VersionClause(Operator(op), _normalize_version(raw_version)))
        alternatives.append(tuple(clauses))
    return VersionConstraint(tuple(alternatives))


def format_constraint(constraint: VersionConstraint) -> str:
    if constraint.is_any:
        return ANY_TOKEN
    return " || ".join(
        " && ".join(str(clause) for clause in branch)
        for branch in constraint.alternatives
    )


def parse_flags(text: str) -> tuple[FlagAssignment, ...]:
    """Parse a whitespace separated flag list like ``-debug +fast gmp``."""
    flags: list[FlagAssignment] = []
    for token in text.split():
        enabled = True
        name = token
        if token[0] in "+-":
            enabled = token[0] == "+"
            name = token[1:]
        if not _FLAG_NAME_RE.match(name):
            raise RecordParseError(f"Invalid flag {token!r}")
        flags.append(FlagAssignment(name, enabled))
    return tuple(flags)


def format_flags(flags: tuple[FlagAssignment, ...]) -> str:
    return " ".join(str(flag) for flag in flags)


def parse_line(text: str) -> RequestRecord:
    """Parse one world file line into a :class:`RequestRecord`.

    Raises:
        RecordParseError: If the line is not a valid record.
    """
    line = text.strip()
    if not line:
        raise RecordParseError("Empty record line")

    flags: tuple[FlagAssignment, ...] = ()
    suffix = _FLAGS_SUFFIX_RE.search(line)
    if suffix is not None:
        flags = parse_flags(suffix.group(1))
        line = line[: suffix.start()].rstrip()

    name, _, rest = line.partition(" ")
    if not _is_valid_name(name):
        raise RecordParseError(f"Invalid package name {name!r}")
    if "--flags" in rest:
        raise RecordParseError(f"Malformed flag list in {text.strip()!r}")

    return RequestRecord(name=name, constraint=parse_constraint(rest), flags=flags)


def format_line(record: RequestRecord) -> str:
    """Render a record as a single canonical line (no trailing newline)."""
    line = f"{record.name} {format_constraint(record.constraint)}"
    if record.flags:
        line += f' --flags="{format_flags(record.flags)}"'
    return line
