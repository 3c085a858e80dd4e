"""Identifier validation and ORDER BY sanitizing.

Values are always bound, never interpolated. The only caller-influenced
text that reaches generated SQL is identifiers (table, field and filter
names), which are validated here, and the ORDER BY expression, which is
reduced to a safe character set.
"""

from __future__ import annotations

import re

from row_mapper.core.exceptions import SQLSanitizationError

# name or qualifier.name, e.g. ``users`` or ``users.id``
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?")

# Anything an ORDER BY clause may keep: word characters, commas,
# whitespace and parentheses.
_ORDER_UNSAFE = re.compile(r"[^A-Za-z0-9_,\s()]")


def is_identifier(name: str) -> bool:
    """Return True if *name* is a plain or single-qualified SQL identifier."""
    return bool(_IDENTIFIER.fullmatch(name))


def validate_identifier(name: str, kind: str = "identifier") -> str:
    """Return *name* unchanged, or raise if it is not a safe identifier.

    Raises:
        SQLSanitizationError: If *name* contains anything besides letters,
            digits, underscores and at most one qualifying dot.
    """
    if not isinstance(name, str) or not is_identifier(name):
        raise SQLSanitizationError(f"Invalid {kind}: {name!r}")
    return name


def sanitize_order(order: str) -> str:
    """Strip every character that cannot appear in a plain ORDER BY list.

    >>> sanitize_order("name DESC; DROP TABLE users")
    'name DESC DROP TABLE users'
    """
    return _ORDER_UNSAFE.sub("", order)
