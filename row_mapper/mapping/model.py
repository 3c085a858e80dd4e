"""Row-to-entity hydration.

Two modes: build a new instance per row (``map_one`` / ``map_many``), or
fill a pre-existing instance in place (``fill``).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from row_mapper.core.exceptions import ColumnMismatchError
from row_mapper.mapping.entity import Trackable

T = TypeVar("T")


def _assign(instance: Any, row: dict[str, Any]) -> None:
    """Set every row column as an attribute of *instance*."""
    failed: list[str] = []
    for column, value in row.items():
        try:
            setattr(instance, column, value)
        except (AttributeError, TypeError, ValueError):
            failed.append(column)
    if failed:
        raise ColumnMismatchError(type(instance).__name__, failed)


class EntityMapper(Generic[T]):
    """Maps result rows onto entity instances.

    New instances are constructed with ``target_class(*ctor_args)`` and
    then populated attribute by attribute, so the class must accept being
    built from the constructor arguments alone.

    Args:
        target_class: The class to construct for each row.
        ctor_args: Positional constructor arguments for every instance.
    """

    def __init__(self, target_class: type[T], ctor_args: Sequence[Any] = ()) -> None:
        self._target_class = target_class
        self._ctor_args = tuple(ctor_args)

    def map_one(self, row: dict[str, Any]) -> T:
        """Build and populate a new instance from *row*."""
        instance = self._target_class(*self._ctor_args)
        _assign(instance, row)
        if isinstance(instance, Trackable):
            instance.mark_clean()
        return instance

    def map_many(self, rows: list[dict[str, Any]]) -> list[T]:
        """Map all rows via map_one, preserving order."""
        return [self.map_one(row) for row in rows]

    @staticmethod
    def fill(instance: Any, row: dict[str, Any] | None) -> None:
        """Populate an existing *instance* from *row*; ``None`` leaves it untouched."""
        if row is not None:
            _assign(instance, row)
