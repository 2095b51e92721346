"""Core schema handling for seedsynth."""

from seedsynth.core.dependency import DependencyGraph, build_dependency_graph
from seedsynth.core.models import (
    ColumnInfo,
    ConstraintSet,
    EventEntity,
    ForeignKeyInfo,
    GroupEntity,
    NameEntity,
    TableDescriptor,
    TagEntity,
)
from seedsynth.core.schema import SchemaExtractor

__all__ = [
    "ColumnInfo",
    "ConstraintSet",
    "DependencyGraph",
    "EventEntity",
    "ForeignKeyInfo",
    "GroupEntity",
    "NameEntity",
    "SchemaExtractor",
    "TableDescriptor",
    "TagEntity",
    "build_dependency_graph",
]
