"""World file: the list of packages a user explicitly requested.

Public API surface -- all consumers import from this package.
"""

from .codec import (
    ANY_TOKEN,
    RecordParseError,
    format_constraint,
    format_flags,
    format_line,
    parse_constraint,
    parse_flags,
    parse_line,
)
from .merge import (
    UpdateRule,
    apply,
    delete,
    get_contents,
    insert,
    load_all,
    subtract,
    union,
)
from .models import (
    ANY_VERSION,
    FlagAssignment,
    Operator,
    RequestRecord,
    VersionClause,
    VersionConstraint,
    dedupe_by_name,
    same_identity,
)
from .store import (
    CorruptStoreError,
    StoreError,
    load,
    same_contents,
    save_if_changed,
)
from .targets import (
    WORLD_PKG,
    WorldTargetError,
    expand_targets,
    is_good_world_target,
    is_world_target,
    world_target,
)

__all__ = [
    "ANY_TOKEN",
    "ANY_VERSION",
    "CorruptStoreError",
    "FlagAssignment",
    "Operator",
    "RecordParseError",
    "RequestRecord",
    "StoreError",
    "UpdateRule",
    "VersionClause",
    "VersionConstraint",
    "WORLD_PKG",
    "WorldTargetError",
    "apply",
    "dedupe_by_name",
    "delete",
    "expand_targets",
    "format_constraint",
    "format_flags",
    "format_line",
    "get_contents",
    "insert",
    "is_good_world_target",
    "is_world_target",
    "load",
    "load_all",
    "parse_constraint",
    "parse_flags",
    "parse_line",
    "same_contents",
    "same_identity",
    "save_if_changed",
    "subtract",
    "union",
    "world_target",
]
