"""Entity descriptor data classes.

Frozen dataclasses describing one entity type: its table, fields,
primary key, relationships and computed fields. A descriptor is built
once per entity type and shared read-only by every operation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from row_mapper.core.enums import JoinKind

#: Join condition target meaning "bind a value supplied by the caller".
BOUND_PARAMETER = "?"


@dataclass(frozen=True)
class JoinCondition:
    """One ``column => target`` equality of a join's ON clause."""

    column: str  # column of the joined table
    target: str  # base-table column, qualified column, or BOUND_PARAMETER

    @property
    def is_bound(self) -> bool:
        return self.target == BOUND_PARAMETER


@dataclass(frozen=True)
class JoinSpec:
    """A single relationship entry (``require`` or ``include``)."""

    kind: JoinKind
    table: str
    conditions: tuple[JoinCondition, ...]

    @property
    def bound_parameter_count(self) -> int:
        return sum(1 for cond in self.conditions if cond.is_bound)


@dataclass(frozen=True)
class EntityDescriptor:
    """Resolved metadata for one entity type."""

    table: str
    fields: tuple[str, ...]
    primary_key: tuple[str, ...]
    joins: tuple[JoinSpec, ...] = ()
    computed: Mapping[str, str] = field(default_factory=dict, hash=False)  # field -> From expression

    def __post_init__(self) -> None:
        object.__setattr__(self, "computed", MappingProxyType(dict(self.computed)))

    def joins_of(self, kind: JoinKind) -> tuple[JoinSpec, ...]:
        """Relationships of one category, in declaration order."""
        return tuple(join for join in self.joins if join.kind is kind)

    def is_computed(self, name: str) -> bool:
        return name in self.computed

    @property
    def writable_fields(self) -> tuple[str, ...]:
        """Fields that may appear in INSERT and UPDATE statements."""
        return tuple(name for name in self.fields if name not in self.computed)

    @property
    def bound_parameter_count(self) -> int:
        """Values the caller must supply for ``?`` join conditions."""
        return sum(join.bound_parameter_count for join in self.joins)
