"""Positional parameter handling.

Generated SQL always uses ``?`` placeholders. This module flattens bound
values into the flat positional list drivers expect, counts placeholders
for the value-count check and converts ``?`` to the driver's paramstyle.
String literals are never touched.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from functools import lru_cache
from typing import Any

# Matches single-quoted string literals ('' escapes included)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^']|'')*'")


def flatten_values(values: Iterable[Any]) -> list[Any]:
    """Flatten nested sequences into one positional list, in order.

    Strings, bytes and mappings are bound as single values.
    """
    flat: list[Any] = []
    for value in values:
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
            flat.extend(flatten_values(value))
        else:
            flat.append(value)
    return flat


def _split_literals(sql: str) -> list[tuple[bool, str]]:
    """Split *sql* into ``(is_literal, text)`` segments."""
    parts: list[tuple[bool, str]] = []
    last_end = 0
    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append((False, sql[last_end:start]))
        parts.append((True, match.group()))
        last_end = end
    if last_end < len(sql):
        parts.append((False, sql[last_end:]))
    return parts


@lru_cache(maxsize=256)
def count_placeholders(sql: str) -> int:
    """Number of ``?`` placeholders outside string literals."""
    return sum(text.count("?") for is_literal, text in _split_literals(sql) if not is_literal)


def normalize_placeholders(sql: str, paramstyle: str) -> str:
    """Convert ``?`` placeholders to the target paramstyle.

    Args:
        sql: SQL with ``?`` placeholders.
        paramstyle: ``qmark`` (no conversion), ``format`` (``%s``) or
            ``numeric`` (``:1``, ``:2``, ...).

    Returns:
        SQL in the driver's native placeholder style.
    """
    if paramstyle == "qmark":
        return sql
    if paramstyle not in ("format", "numeric"):
        raise ValueError(f"Unsupported paramstyle: {paramstyle}")
    return _convert(sql, paramstyle)


@lru_cache(maxsize=256)
def _convert(sql: str, paramstyle: str) -> str:
    parts: list[str] = []
    position = 0
    for is_literal, text in _split_literals(sql):
        if paramstyle == "format":
            # format-style drivers treat every % as a directive
            text = text.replace("%", "%%")
        if is_literal:
            parts.append(text)
            continue
        chunks = text.split("?")
        out = [chunks[0]]
        for chunk in chunks[1:]:
            position += 1
            out.append("%s" if paramstyle == "format" else f":{position}")
            out.append(chunk)
        parts.append("".join(out))
    return "".join(parts)
