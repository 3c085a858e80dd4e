"""Relationship metadata parsing.

Relationship conditions are written in a small declaration syntax::

    "id => group_id, tenant => ?"

Each ``column => target`` pair equates a column of the joined table with
a column of the base table (``target``), a qualified column of another
table (``other.column``), or a caller-supplied value (``?``). ``=`` is
accepted in place of ``=>``.

The same parser serves inline relationship declarations on the builder
and nested class-level metadata mappings of the form::

    {
        "class": {"require": {"groups": "id => group_id"}, "include": [...]},
        "properties": {"group_name": {"From": "groups.name"}},
    }
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from row_mapper.core.enums import JoinKind
from row_mapper.core.exceptions import DescriptorError
from row_mapper.core.sanitizer import is_identifier
from row_mapper.mapping.descriptor import BOUND_PARAMETER, JoinCondition

_PAIR_SEPARATOR = re.compile(r"\s*=>?\s*")


def parse_condition_list(text: str) -> list[JoinCondition]:
    """Parse ``"a => b, c => ?"`` into ordered JoinConditions.

    Raises:
        DescriptorError: If the text is empty or a pair is malformed.
    """
    body = text.strip()
    if body.startswith("(") and body.endswith(")"):
        body = body[1:-1]

    conditions: list[JoinCondition] = []
    for chunk in body.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        parts = _PAIR_SEPARATOR.split(chunk, maxsplit=1)
        if len(parts) != 2:
            raise DescriptorError(f"Malformed join condition {chunk!r} in {text!r}")
        conditions.append(_make_condition(parts[0], parts[1], text))

    if not conditions:
        raise DescriptorError(f"Empty join condition list: {text!r}")
    return conditions


def _make_condition(column: Any, target: Any, source: Any) -> JoinCondition:
    column = str(column).strip()
    target = str(target).strip()
    if not is_identifier(column) or "." in column:
        raise DescriptorError(f"Invalid join column {column!r} in {source!r}")
    if target != BOUND_PARAMETER and not is_identifier(target):
        raise DescriptorError(f"Invalid join target {target!r} in {source!r}")
    return JoinCondition(column=column, target=target)


def coerce_conditions(conditions: Any) -> tuple[JoinCondition, ...]:
    """Normalize any accepted condition form to a tuple of JoinConditions.

    Accepts declaration text, a ``{column: target}`` mapping, or a
    sequence of ``"column => target"`` strings.
    """
    if isinstance(conditions, str):
        return tuple(parse_condition_list(conditions))
    if isinstance(conditions, Mapping):
        if not conditions:
            raise DescriptorError("Empty join condition mapping")
        return tuple(
            _make_condition(column, target, conditions) for column, target in conditions.items()
        )
    if isinstance(conditions, Sequence) and all(isinstance(c, str) for c in conditions):
        return tuple(parse_condition_list(", ".join(conditions)))
    raise DescriptorError(f"Unsupported join condition declaration: {conditions!r}")


def iter_relationships(class_metadata: Mapping[str, Any]) -> Iterator[tuple[JoinKind, str, Any]]:
    """Yield ``(kind, table, conditions)`` for every declared relationship.

    Categories are matched case-insensitively. Entries may be a mapping of
    ``{table: conditions}`` or a list of such mappings; a list entry that
    has no table of its own is unwrapped one level before it is rejected.
    """
    by_name = {str(key).lower(): value for key, value in class_metadata.items()}
    for kind in JoinKind:
        declared = by_name.get(kind.value)
        if declared is None:
            continue
        if isinstance(declared, Mapping):
            for table, conditions in declared.items():
                yield kind, table, conditions
        elif isinstance(declared, Sequence) and not isinstance(declared, str):
            for entry in declared:
                yield from _unwrap_entry(kind, entry)
        else:
            raise DescriptorError(f"Malformed '{kind.value}' metadata: {declared!r}")


def _unwrap_entry(kind: JoinKind, entry: Any) -> Iterator[tuple[JoinKind, str, Any]]:
    if isinstance(entry, Mapping) and entry:
        for table, conditions in entry.items():
            yield kind, table, conditions
    elif (
        isinstance(entry, Sequence)
        and not isinstance(entry, str)
        and len(entry) == 2
        and isinstance(entry[0], str)
    ):
        yield kind, entry[0], entry[1]
    elif (
        isinstance(entry, Sequence)
        and not isinstance(entry, str)
        and entry
        and all(isinstance(inner, Mapping) and inner for inner in entry)
    ):
        # singly-nested list of {table: conditions}
        for inner in entry:
            yield from _unwrap_entry(kind, inner)
    else:
        raise DescriptorError(f"Malformed '{kind.value}' relationship entry: {entry!r}")


def computed_fields(property_metadata: Mapping[str, Any]) -> dict[str, str]:
    """Extract ``{field: From expression}`` from per-property metadata."""
    computed: dict[str, str] = {}
    for name, annotations in property_metadata.items():
        if not isinstance(annotations, Mapping):
            continue
        for key, value in annotations.items():
            if str(key).lower() == "from":
                computed[name] = str(value)
    return computed
