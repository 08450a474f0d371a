"""Structural diffing, breaking-change classification and migration planning."""

from .classifier import BREAKING_POLICY, BreakingChangeClassifier
from .engine import DiffEngine
from .formatter import DiffFormatter
from .models import (
    AspectChange,
    ChangeRecord,
    ConfigurationChange,
    DomainDiff,
    EntityChange,
    EnumChange,
    EnumValueChange,
    IndexChange,
    PropertyChange,
    RelationshipChange,
    RuleChange,
    RuleSetChange,
    ValueObjectChange,
)
from .plan import MigrationPlanGenerator
from .types import ChangeAspect, ChangeType, ElementKind
from .versioning import SchemaVersionManager, VersionBump

__all__ = [
    "BREAKING_POLICY",
    "AspectChange",
    "BreakingChangeClassifier",
    "ChangeAspect",
    "ChangeRecord",
    "ChangeType",
    "ConfigurationChange",
    "DiffEngine",
    "DiffFormatter",
    "DomainDiff",
    "ElementKind",
    "EntityChange",
    "EnumChange",
    "EnumValueChange",
    "IndexChange",
    "MigrationPlanGenerator",
    "PropertyChange",
    "RelationshipChange",
    "RuleChange",
    "RuleSetChange",
    "SchemaVersionManager",
    "ValueObjectChange",
    "VersionBump",
]
