"""Mapping layer - entity descriptors and row hydration."""

from __future__ import annotations

from row_mapper.mapping.builder import EntityDescriptorBuilder, descriptor_from_metadata, entity
from row_mapper.mapping.descriptor import (
    BOUND_PARAMETER,
    EntityDescriptor,
    JoinCondition,
    JoinSpec,
)
from row_mapper.mapping.entity import Entity, Trackable
from row_mapper.mapping.metadata import parse_condition_list
from row_mapper.mapping.model import EntityMapper

__all__ = [
    "entity",
    "descriptor_from_metadata",
    "EntityDescriptorBuilder",
    "EntityDescriptor",
    "JoinSpec",
    "JoinCondition",
    "BOUND_PARAMETER",
    "parse_condition_list",
    "Entity",
    "Trackable",
    "EntityMapper",
]
