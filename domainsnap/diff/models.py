"""Change records and the DomainDiff value.

Every record is immutable. Top-level records (one per added, removed or
modified entity, value object, enum, rule set or configuration) may carry
nested records describing the individual field deltas of a modification.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from itertools import chain

from ..snapshot.models import Snapshot
from .types import ChangeAspect, ChangeType


@dataclass(frozen=True, kw_only=True)
class ChangeRecord:
    """Base class for every change."""

    change_type: ChangeType
    description: str
    is_breaking: bool

    @property
    def nested_changes(self) -> tuple["ChangeRecord", ...]:
        """Directly nested changes (empty for leaf changes)."""
        return ()

    def iter_all(self) -> Iterator["ChangeRecord"]:
        """This change followed by every nested change, depth first."""
        yield self
        for nested in self.nested_changes:
            yield from nested.iter_all()

    def iter_leaves(self) -> Iterator["ChangeRecord"]:
        """The most specific changes this record consists of."""
        if not self.nested_changes:
            yield self
            return
        for nested in self.nested_changes:
            yield from nested.iter_leaves()


@dataclass(frozen=True, kw_only=True)
class AspectChange(ChangeRecord):
    """A change to one field of an element (key set, table name, ...)."""

    element_name: str
    aspect: ChangeAspect
    old_value: str | None = None
    new_value: str | None = None


@dataclass(frozen=True, kw_only=True)
class PropertyChange(ChangeRecord):
    """A change to a property of an entity or value object."""

    owner_name: str
    property_name: str
    aspect: ChangeAspect | None = None
    old_value: str | None = None
    new_value: str | None = None

    @property
    def entity_name(self) -> str:
        return self.owner_name


@dataclass(frozen=True, kw_only=True)
class EntityChange(ChangeRecord):
    """An entity added, removed or modified."""

    entity_name: str
    aspect_changes: tuple[AspectChange, ...] = ()
    property_changes: tuple[PropertyChange, ...] = ()

    @property
    def nested_changes(self) -> tuple[ChangeRecord, ...]:
        return (*self.aspect_changes, *self.property_changes)


@dataclass(frozen=True, kw_only=True)
class ValueObjectChange(ChangeRecord):
    """A value object added, removed or modified."""

    value_object_name: str
    aspect_changes: tuple[AspectChange, ...] = ()
    property_changes: tuple[PropertyChange, ...] = ()

    @property
    def nested_changes(self) -> tuple[ChangeRecord, ...]:
        return (*self.aspect_changes, *self.property_changes)


@dataclass(frozen=True, kw_only=True)
class EnumValueChange(ChangeRecord):
    """An enum member added, removed or given a different code."""

    enum_name: str
    value_name: str
    old_value: str | None = None
    new_value: str | None = None


@dataclass(frozen=True, kw_only=True)
class EnumChange(ChangeRecord):
    """An enum added, removed or modified."""

    enum_name: str
    aspect_changes: tuple[AspectChange, ...] = ()
    value_changes: tuple[EnumValueChange, ...] = ()

    @property
    def nested_changes(self) -> tuple[ChangeRecord, ...]:
        return (*self.aspect_changes, *self.value_changes)


@dataclass(frozen=True, kw_only=True)
class RuleChange(ChangeRecord):
    """A rule added, removed or modified within a rule set."""

    rule_set_name: str
    rule_id: str
    target_type: str


@dataclass(frozen=True, kw_only=True)
class RuleSetChange(ChangeRecord):
    """A rule set added, removed or modified."""

    rule_set_name: str
    target_type: str
    aspect_changes: tuple[AspectChange, ...] = ()
    rule_changes: tuple[RuleChange, ...] = ()

    @property
    def nested_changes(self) -> tuple[ChangeRecord, ...]:
        return (*self.aspect_changes, *self.rule_changes)


@dataclass(frozen=True, kw_only=True)
class IndexChange(ChangeRecord):
    """An index added, removed or redefined in a configuration."""

    entity_name: str
    index_name: str
    aspect: ChangeAspect | None = None


@dataclass(frozen=True, kw_only=True)
class RelationshipChange(ChangeRecord):
    """A relationship added, removed or redefined in a configuration."""

    entity_name: str
    relationship: str
    aspect: ChangeAspect | None = None


@dataclass(frozen=True, kw_only=True)
class ConfigurationChange(ChangeRecord):
    """A persistence configuration added, removed or modified."""

    entity_name: str
    aspect_changes: tuple[AspectChange, ...] = ()
    mapping_changes: tuple[PropertyChange, ...] = ()
    index_changes: tuple[IndexChange, ...] = ()
    relationship_changes: tuple[RelationshipChange, ...] = ()

    @property
    def nested_changes(self) -> tuple[ChangeRecord, ...]:
        return (
            *self.aspect_changes,
            *self.mapping_changes,
            *self.index_changes,
            *self.relationship_changes,
        )


@dataclass(frozen=True, kw_only=True)
class DomainDiff:
    """Structural difference between two snapshots."""

    before: Snapshot
    after: Snapshot
    entity_changes: tuple[EntityChange, ...] = ()
    value_object_changes: tuple[ValueObjectChange, ...] = ()
    enum_changes: tuple[EnumChange, ...] = ()
    rule_set_changes: tuple[RuleSetChange, ...] = ()
    configuration_changes: tuple[ConfigurationChange, ...] = ()

    @property
    def domain(self) -> str:
        return self.before.name

    def top_level_changes(self) -> list[ChangeRecord]:
        """All top-level change records, category by category."""
        return list(
            chain(
                self.entity_changes,
                self.value_object_changes,
                self.enum_changes,
                self.rule_set_changes,
                self.configuration_changes,
            )
        )

    def leaf_changes(self) -> list[ChangeRecord]:
        """The most specific change records across every category."""
        return [
            leaf for change in self.top_level_changes() for leaf in change.iter_leaves()
        ]

    @property
    def has_changes(self) -> bool:
        return self.total_changes > 0

    @property
    def total_changes(self) -> int:
        """Number of top-level changes; nested changes are not counted."""
        return len(self.top_level_changes())

    @property
    def has_breaking_changes(self) -> bool:
        """True if any change at any nesting level is breaking."""
        return any(
            record.is_breaking
            for change in self.top_level_changes()
            for record in change.iter_all()
        )

    def breaking_changes(self) -> list[ChangeRecord]:
        return [change for change in self.leaf_changes() if change.is_breaking]

    def non_breaking_changes(self) -> list[ChangeRecord]:
        return [change for change in self.leaf_changes() if not change.is_breaking]

    @property
    def breaking_change_descriptions(self) -> list[str]:
        return [change.description for change in self.breaking_changes()]

    def change_counts(self) -> tuple[int, int]:
        """Counts of (breaking, non-breaking) specific changes."""
        leaves = self.leaf_changes()
        breaking = sum(1 for change in leaves if change.is_breaking)
        return breaking, len(leaves) - breaking
