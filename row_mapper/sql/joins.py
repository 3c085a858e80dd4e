"""Join clause resolution.

Turns an entity's relationships into a JOIN clause appended to the base
table identifier, and rewrites computed fields of the select list into
``<expression> AS <field>``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from row_mapper.core.enums import JoinKind
from row_mapper.mapping.descriptor import EntityDescriptor, JoinCondition, JoinSpec


@dataclass(frozen=True)
class JoinResolution:
    """Output of resolve_joins()."""

    clause: str  # empty when the entity has no relationships
    fields: tuple[str, ...]
    bound_parameter_count: int = 0

    def source(self, table: str) -> str:
        """The FROM target: *table* followed by the join clause."""
        return f"{table} {self.clause}" if self.clause else table


def _render_condition(join: JoinSpec, condition: JoinCondition, base_table: str) -> str:
    if condition.is_bound:
        return f"{join.table}.{condition.column} = ?"
    target = condition.target
    if "." not in target:
        target = f"{base_table}.{target}"
    return f"{join.table}.{condition.column} = {target}"


def render_join(join: JoinSpec, base_table: str) -> str:
    """Render one relationship as ``[LEFT ]JOIN table ON ...``."""
    conditions = " AND ".join(_render_condition(join, cond, base_table) for cond in join.conditions)
    return f"{join.kind.keyword} {join.table} ON {conditions}"


def resolve_joins(descriptor: EntityDescriptor, fields: Sequence[str]) -> JoinResolution:
    """Build the JOIN clause and the rewritten select list.

    Joins are emitted ``require`` first, then ``include``, each category
    in declaration order. Independently, every field with a computed
    expression is replaced by ``<expression> AS <field>``; other fields are
    kept as given, in the same order.

    Args:
        descriptor: The entity being selected.
        fields: Select list, optionally qualified with the base table.
    """
    base_table = descriptor.table
    fragments: list[str] = []
    bound = 0
    for kind in (JoinKind.REQUIRE, JoinKind.INCLUDE):
        for join in descriptor.joins_of(kind):
            fragments.append(render_join(join, base_table))
            bound += join.bound_parameter_count

    prefix = f"{base_table}."
    rewritten: list[str] = []
    for field in fields:
        name = field[len(prefix) :] if field.startswith(prefix) else field
        if descriptor.is_computed(name):
            rewritten.append(f"{descriptor.computed[name]} AS {name}")
        else:
            rewritten.append(field)

    return JoinResolution(
        clause=" ".join(fragments),
        fields=tuple(rewritten),
        bound_parameter_count=bound,
    )
