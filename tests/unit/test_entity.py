"""Unit tests for Entity dirty tracking and EntityMapper hydration."""

from __future__ import annotations

import pytest

from row_mapper.core.exceptions import ColumnMismatchError
from row_mapper.mapping.entity import Entity, Trackable
from row_mapper.mapping.model import EntityMapper


class User(Entity):
    id: int | None = None
    name: str | None = None


class Tagged:
    def __init__(self, tag: str) -> None:
        self.tag = tag


class Slotted:
    __slots__ = ("id",)


class TestEntity:
    def test_constructor_values_are_dirty(self) -> None:
        user = User(name="alice")
        assert user.name == "alice"
        assert user.id is None
        assert user.dirty_fields == frozenset({"name"})

    def test_assignment_marks_dirty(self) -> None:
        user = User()
        assert not user.is_dirty
        user.id = 3
        assert user.is_dirty
        assert user.dirty_fields == frozenset({"id"})

    def test_mark_clean(self) -> None:
        user = User(id=1, name="a")
        user.mark_clean()
        assert not user.is_dirty

    def test_private_attributes_not_tracked(self) -> None:
        user = User()
        user._cache = {}
        assert not user.is_dirty

    def test_subclass_skipping_init(self) -> None:
        class Bare(Entity):
            def __init__(self) -> None:
                self.id = 1

        bare = Bare()
        assert bare.dirty_fields == frozenset({"id"})

    def test_is_trackable(self) -> None:
        assert isinstance(User(), Trackable)
        assert not isinstance(Tagged("x"), Trackable)

    def test_repr(self) -> None:
        assert repr(User(id=1)) == "User(id=1)"


class TestEntityMapper:
    def test_map_many_preserves_order(self) -> None:
        users = EntityMapper(User).map_many([{"id": 2, "name": "b"}, {"id": 1, "name": "a"}])
        assert [(u.id, u.name) for u in users] == [(2, "b"), (1, "a")]

    def test_mapped_entities_are_clean(self) -> None:
        user = EntityMapper(User).map_one({"id": 1, "name": "a"})
        assert not user.is_dirty

    def test_extra_columns_assigned(self) -> None:
        user = EntityMapper(User).map_one({"id": 1, "group_name": "admins"})
        assert user.group_name == "admins"

    def test_constructor_arguments(self) -> None:
        items = EntityMapper(Tagged, ["t"]).map_many([{"id": 1}, {"id": 2}])
        assert [item.tag for item in items] == ["t", "t"]
        assert [item.id for item in items] == [1, 2]

    def test_fill_existing_instance(self) -> None:
        user = User(id=1, name="stale")
        EntityMapper.fill(user, {"id": 1, "name": "fresh"})
        assert user.name == "fresh"

    def test_fill_with_no_row_leaves_instance(self) -> None:
        user = User(id=1, name="kept")
        EntityMapper.fill(user, None)
        assert user.name == "kept"

    def test_unassignable_column(self) -> None:
        with pytest.raises(ColumnMismatchError) as exc_info:
            EntityMapper(Slotted).map_one({"id": 1, "name": "a"})
        assert exc_info.value.columns == ["name"]
