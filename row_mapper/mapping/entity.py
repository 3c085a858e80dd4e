"""Entity base class with dirty tracking.

EntityAdapter works with any object exposing its fields as attributes.
Objects that also implement ``mark_clean()`` are marked clean after they
are loaded; Entity is a ready-made base class that does so.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Trackable(Protocol):
    """An entity that tracks pending writes."""

    def mark_clean(self) -> None:
        """Forget pending changes."""
        ...


class Entity:
    """Base class for mapped entities.

    Fields are declared as annotated class attributes with defaults::

        class User(Entity):
            id: int | None = None
            name: str | None = None

    Any keyword accepted by the constructor is assigned as an attribute.
    Every public assignment marks the field dirty until mark_clean().
    """

    def __init__(self, **values: Any) -> None:
        object.__setattr__(self, "_dirty", set())
        for name, value in values.items():
            setattr(self, name, value)

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if not name.startswith("_"):
            self._pending().add(name)

    def _pending(self) -> set[str]:
        # subclasses may skip Entity.__init__
        return self.__dict__.setdefault("_dirty", set())

    @property
    def is_dirty(self) -> bool:
        return bool(self._pending())

    @property
    def dirty_fields(self) -> frozenset[str]:
        return frozenset(self._pending())

    def mark_clean(self) -> None:
        self._pending().clear()

    def __repr__(self) -> str:
        values = ", ".join(
            f"{name}={value!r}" for name, value in vars(self).items() if not name.startswith("_")
        )
        return f"{type(self).__name__}({values})"
