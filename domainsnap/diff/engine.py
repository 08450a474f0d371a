"""Structural comparison of two snapshots.

Elements are matched by name within each category (entities, value objects,
enums, rule sets, configurations) and again within each nested collection
(properties, enum members, rules, column mappings, indexes, relationships).
Names only in *before* are Removed, names only in *after* are Added, and
names in both are compared field by field. There is no similarity matching:
a renamed element shows up as one removal plus one addition.

The engine makes no breaking/non-breaking judgment itself; every verdict
comes from the BreakingChangeClassifier.
"""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import fields, replace
from typing import Any, TypeVar

from ..core.logging import get_logger
from ..core.manifest import (
    ConfigurationManifest,
    EntityManifest,
    EnumManifest,
    IndexManifest,
    PropertyConfigurationManifest,
    PropertyManifest,
    RelationshipManifest,
    RuleManifest,
    RuleSetManifest,
    ValueObjectManifest,
)
from ..snapshot.models import Snapshot
from .classifier import BreakingChangeClassifier
from .models import (
    AspectChange,
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
from .types import ChangeAspect, ChangeType, ElementKind

logger = get_logger(__name__)

T = TypeVar("T")

ASPECT_LABELS = {
    ChangeAspect.TYPE: "type",
    ChangeAspect.NAMESPACE: "namespace",
    ChangeAspect.METADATA: "metadata",
    ChangeAspect.REQUIRED: "requiredness",
    ChangeAspect.COLLECTION: "collection flag",
    ChangeAspect.MAX_LENGTH: "max length",
    ChangeAspect.PRECISION: "precision",
    ChangeAspect.SCALE: "scale",
    ChangeAspect.CONCURRENCY_TOKEN: "concurrency token flag",
    ChangeAspect.COMPUTED: "computed flag",
    ChangeAspect.KEY_PROPERTIES: "key properties",
    ChangeAspect.TABLE_NAME: "table name",
    ChangeAspect.SCHEMA_NAME: "schema name",
    ChangeAspect.UNDERLYING_TYPE: "underlying type",
    ChangeAspect.VALUE_CODE: "code",
    ChangeAspect.TARGET_TYPE: "target type",
    ChangeAspect.INCLUDES: "includes",
    ChangeAspect.DEFINITION: "definition",
    ChangeAspect.UNIQUENESS: "uniqueness",
    ChangeAspect.MAPPING: "mapping",
}

# Property fields compared one by one, in reporting order.
PROPERTY_ASPECTS = (
    (ChangeAspect.TYPE, "type_name"),
    (ChangeAspect.REQUIRED, "is_required"),
    (ChangeAspect.COLLECTION, "is_collection"),
    (ChangeAspect.MAX_LENGTH, "max_length"),
    (ChangeAspect.PRECISION, "precision"),
    (ChangeAspect.SCALE, "scale"),
    (ChangeAspect.CONCURRENCY_TOKEN, "is_concurrency_token"),
    (ChangeAspect.COMPUTED, "is_computed"),
    (ChangeAspect.METADATA, "metadata"),
)


def _pairs(
    before: Iterable[T], after: Iterable[T], key: Callable[[T], str]
) -> Iterator[tuple[str, T | None, T | None]]:
    """Match two collections by name, yielding (name, old, new) in name order."""
    before_map = {key(item): item for item in before}
    after_map = {key(item): item for item in after}

    for name in sorted(before_map.keys() | after_map.keys()):
        yield name, before_map.get(name), after_map.get(name)


def _show(value: Any) -> str:
    if value is None:
        return "(none)"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list | tuple):
        return "[" + ", ".join(str(v) for v in value) + "]"
    if isinstance(value, int):
        return str(value)
    return f"'{value}'"


def _value(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, list | tuple):
        return ", ".join(str(v) for v in value)
    if isinstance(value, dict):
        return None
    return str(value)


def _required_label(is_required: bool) -> str:
    return "required" if is_required else "optional"


def _differing_fields(old: Any, new: Any) -> list[str]:
    return [f.name for f in fields(old) if getattr(old, f.name) != getattr(new, f.name)]


class DiffEngine:
    """Compares two snapshots and produces a DomainDiff."""

    def __init__(self, classifier: BreakingChangeClassifier | None = None):
        self.classifier = classifier or BreakingChangeClassifier()

    def compare(self, before: Snapshot, after: Snapshot) -> DomainDiff:
        """Compare two snapshots.

        Args:
            before: Snapshot before the changes
            after: Snapshot after the changes

        Returns:
            Fully populated DomainDiff

        Raises:
            ValueError: If either snapshot is missing
        """
        if before is None:
            raise ValueError("before snapshot is required")
        if after is None:
            raise ValueError("after snapshot is required")

        old, new = before.manifest, after.manifest

        diff = DomainDiff(
            before=before,
            after=after,
            entity_changes=tuple(self._compare_entities(old.entities, new.entities)),
            value_object_changes=tuple(
                self._compare_value_objects(old.value_objects, new.value_objects)
            ),
            enum_changes=tuple(self._compare_enums(old.enums, new.enums)),
            rule_set_changes=tuple(
                self._compare_rule_sets(old.rule_sets, new.rule_sets)
            ),
            configuration_changes=tuple(
                self._compare_configurations(old.configurations, new.configurations)
            ),
        )

        logger.debug(
            "Diff computed",
            domain=before.name,
            before_version=str(before.version),
            after_version=str(after.version),
            total_changes=diff.total_changes,
            has_breaking_changes=diff.has_breaking_changes,
        )
        return diff

    # ------------------------------------------------------------------
    # Entities and value objects
    # ------------------------------------------------------------------

    def _compare_entities(
        self, before: list[EntityManifest], after: list[EntityManifest]
    ) -> list[EntityChange]:
        changes = []
        kind = ElementKind.ENTITY

        for name, old, new in _pairs(before, after, lambda e: e.name):
            if new is None:
                changes.append(
                    EntityChange(
                        change_type=ChangeType.REMOVED,
                        entity_name=name,
                        description=f"Entity '{name}' removed",
                        is_breaking=self.classifier.classify(kind, ChangeType.REMOVED),
                    )
                )
            elif old is None:
                changes.append(
                    EntityChange(
                        change_type=ChangeType.ADDED,
                        entity_name=name,
                        description=f"Entity '{name}' added",
                        is_breaking=self.classifier.classify(kind, ChangeType.ADDED),
                    )
                )
            else:
                aspects = self._compare_aspects(
                    kind,
                    "Entity",
                    name,
                    [
                        (ChangeAspect.TYPE, old.type_name, new.type_name),
                        (ChangeAspect.NAMESPACE, old.namespace, new.namespace),
                        (
                            ChangeAspect.KEY_PROPERTIES,
                            sorted(old.key_properties),
                            sorted(new.key_properties),
                        ),
                        (ChangeAspect.TABLE_NAME, old.table_name, new.table_name),
                        (ChangeAspect.SCHEMA_NAME, old.schema_name, new.schema_name),
                        (ChangeAspect.METADATA, old.metadata, new.metadata),
                    ],
                )
                properties = self._compare_properties(
                    name, old.properties, new.properties
                )

                if aspects or properties:
                    changes.append(
                        EntityChange(
                            change_type=ChangeType.MODIFIED,
                            entity_name=name,
                            description=f"Entity '{name}' modified",
                            is_breaking=any(
                                c.is_breaking for c in (*aspects, *properties)
                            ),
                            aspect_changes=tuple(aspects),
                            property_changes=tuple(properties),
                        )
                    )

        return changes

    def _compare_value_objects(
        self, before: list[ValueObjectManifest], after: list[ValueObjectManifest]
    ) -> list[ValueObjectChange]:
        changes = []
        kind = ElementKind.VALUE_OBJECT

        for name, old, new in _pairs(before, after, lambda v: v.name):
            if new is None:
                changes.append(
                    ValueObjectChange(
                        change_type=ChangeType.REMOVED,
                        value_object_name=name,
                        description=f"Value object '{name}' removed",
                        is_breaking=self.classifier.classify(kind, ChangeType.REMOVED),
                    )
                )
            elif old is None:
                changes.append(
                    ValueObjectChange(
                        change_type=ChangeType.ADDED,
                        value_object_name=name,
                        description=f"Value object '{name}' added",
                        is_breaking=self.classifier.classify(kind, ChangeType.ADDED),
                    )
                )
            else:
                aspects = self._compare_aspects(
                    kind,
                    "Value object",
                    name,
                    [
                        (ChangeAspect.TYPE, old.type_name, new.type_name),
                        (ChangeAspect.NAMESPACE, old.namespace, new.namespace),
                        (ChangeAspect.METADATA, old.metadata, new.metadata),
                    ],
                )
                properties = self._compare_properties(
                    name, old.properties, new.properties
                )

                if aspects or properties:
                    changes.append(
                        ValueObjectChange(
                            change_type=ChangeType.MODIFIED,
                            value_object_name=name,
                            description=f"Value object '{name}' modified",
                            is_breaking=any(
                                c.is_breaking for c in (*aspects, *properties)
                            ),
                            aspect_changes=tuple(aspects),
                            property_changes=tuple(properties),
                        )
                    )

        return changes

    def _compare_properties(
        self,
        owner: str,
        before: list[PropertyManifest],
        after: list[PropertyManifest],
    ) -> list[PropertyChange]:
        changes = []
        kind = ElementKind.PROPERTY

        for name, old, new in _pairs(before, after, lambda p: p.name):
            label = f"Property '{owner}.{name}'"

            if new is None:
                changes.append(
                    PropertyChange(
                        change_type=ChangeType.REMOVED,
                        owner_name=owner,
                        property_name=name,
                        old_value=old.type_name,
                        description=f"{label} removed",
                        is_breaking=self.classifier.classify(kind, ChangeType.REMOVED),
                    )
                )
            elif old is None:
                suffix = " (required)" if new.is_required else ""
                changes.append(
                    PropertyChange(
                        change_type=ChangeType.ADDED,
                        owner_name=owner,
                        property_name=name,
                        new_value=new.type_name,
                        description=f"{label} added{suffix}",
                        is_breaking=self.classifier.classify(
                            kind, ChangeType.ADDED, new=new.is_required
                        ),
                    )
                )
            else:
                for aspect, attribute in PROPERTY_ASPECTS:
                    old_field = getattr(old, attribute)
                    new_field = getattr(new, attribute)
                    if old_field == new_field:
                        continue

                    changes.append(
                        PropertyChange(
                            change_type=ChangeType.MODIFIED,
                            owner_name=owner,
                            property_name=name,
                            aspect=aspect,
                            old_value=self._property_value(aspect, old_field),
                            new_value=self._property_value(aspect, new_field),
                            description=self._property_description(
                                label, aspect, old_field, new_field
                            ),
                            is_breaking=self.classifier.classify(
                                kind, ChangeType.MODIFIED, aspect, old_field, new_field
                            ),
                        )
                    )

        return changes

    def _property_value(self, aspect: ChangeAspect, value: Any) -> str | None:
        if aspect == ChangeAspect.REQUIRED:
            return _required_label(value)
        return _value(value)

    def _property_description(
        self, label: str, aspect: ChangeAspect, old: Any, new: Any
    ) -> str:
        if aspect == ChangeAspect.TYPE:
            return f"{label} type changed from '{old}' to '{new}'"
        if aspect == ChangeAspect.REQUIRED:
            return (
                f"{label} changed from {_required_label(old)} "
                f"to {_required_label(new)}"
            )
        if aspect == ChangeAspect.COLLECTION:
            shape = "a collection" if new else "a single value"
            return f"{label} changed to {shape}"
        if aspect == ChangeAspect.METADATA:
            return f"{label} metadata changed"
        return (
            f"{label} {ASPECT_LABELS[aspect]} changed from {_show(old)} "
            f"to {_show(new)}"
        )

    # ------------------------------------------------------------------
    # Enums
    # ------------------------------------------------------------------

    def _compare_enums(
        self, before: list[EnumManifest], after: list[EnumManifest]
    ) -> list[EnumChange]:
        changes = []
        kind = ElementKind.ENUM

        for name, old, new in _pairs(before, after, lambda e: e.name):
            if new is None:
                changes.append(
                    EnumChange(
                        change_type=ChangeType.REMOVED,
                        enum_name=name,
                        description=f"Enum '{name}' removed",
                        is_breaking=self.classifier.classify(kind, ChangeType.REMOVED),
                    )
                )
            elif old is None:
                changes.append(
                    EnumChange(
                        change_type=ChangeType.ADDED,
                        enum_name=name,
                        description=f"Enum '{name}' added",
                        is_breaking=self.classifier.classify(kind, ChangeType.ADDED),
                    )
                )
            else:
                aspects = self._compare_aspects(
                    kind,
                    "Enum",
                    name,
                    [
                        (ChangeAspect.TYPE, old.type_name, new.type_name),
                        (ChangeAspect.NAMESPACE, old.namespace, new.namespace),
                        (
                            ChangeAspect.UNDERLYING_TYPE,
                            old.underlying_type,
                            new.underlying_type,
                        ),
                        (ChangeAspect.METADATA, old.metadata, new.metadata),
                    ],
                )
                values = self._compare_enum_values(name, old.values, new.values)

                if aspects or values:
                    changes.append(
                        EnumChange(
                            change_type=ChangeType.MODIFIED,
                            enum_name=name,
                            description=f"Enum '{name}' modified",
                            is_breaking=any(c.is_breaking for c in (*aspects, *values)),
                            aspect_changes=tuple(aspects),
                            value_changes=tuple(values),
                        )
                    )

        return changes

    def _compare_enum_values(
        self, enum_name: str, before: dict[str, Any], after: dict[str, Any]
    ) -> list[EnumValueChange]:
        changes = []
        kind = ElementKind.ENUM_VALUE

        for member in sorted(before.keys() | after.keys()):
            label = f"Enum value '{enum_name}.{member}'"

            if member not in after:
                change_type = ChangeType.REMOVED
                description = f"{label} removed"
            elif member not in before:
                change_type = ChangeType.ADDED
                description = f"{label} added"
            elif before[member] != after[member]:
                change_type = ChangeType.MODIFIED
                description = (
                    f"{label} code changed from {before[member]} to {after[member]}"
                )
            else:
                continue

            aspect = ChangeAspect.VALUE_CODE if change_type == ChangeType.MODIFIED else None
            changes.append(
                EnumValueChange(
                    change_type=change_type,
                    enum_name=enum_name,
                    value_name=member,
                    old_value=_value(before.get(member)),
                    new_value=_value(after.get(member)),
                    description=description,
                    is_breaking=self.classifier.classify(
                        kind, change_type, aspect, before.get(member), after.get(member)
                    ),
                )
            )

        return changes

    # ------------------------------------------------------------------
    # Rule sets
    # ------------------------------------------------------------------

    def _compare_rule_sets(
        self, before: list[RuleSetManifest], after: list[RuleSetManifest]
    ) -> list[RuleSetChange]:
        changes = []
        kind = ElementKind.RULE_SET

        for name, old, new in _pairs(before, after, lambda r: r.name):
            if new is None:
                changes.append(
                    RuleSetChange(
                        change_type=ChangeType.REMOVED,
                        rule_set_name=name,
                        target_type=old.target_type,
                        description=f"Rule set '{name}' for '{old.target_type}' removed",
                        is_breaking=self.classifier.classify(kind, ChangeType.REMOVED),
                    )
                )
            elif old is None:
                changes.append(
                    RuleSetChange(
                        change_type=ChangeType.ADDED,
                        rule_set_name=name,
                        target_type=new.target_type,
                        description=f"Rule set '{name}' for '{new.target_type}' added",
                        is_breaking=self.classifier.classify(kind, ChangeType.ADDED),
                    )
                )
            else:
                aspects = self._compare_aspects(
                    kind,
                    "Rule set",
                    name,
                    [
                        (ChangeAspect.TARGET_TYPE, old.target_type, new.target_type),
                        (
                            ChangeAspect.INCLUDES,
                            sorted(old.includes),
                            sorted(new.includes),
                        ),
                        (ChangeAspect.METADATA, old.metadata, new.metadata),
                    ],
                )
                rules = self._compare_rules(new, old.rules, new.rules)

                if aspects or rules:
                    changes.append(
                        RuleSetChange(
                            change_type=ChangeType.MODIFIED,
                            rule_set_name=name,
                            target_type=new.target_type,
                            description=f"Rule set '{name}' for '{new.target_type}' modified",
                            is_breaking=any(c.is_breaking for c in (*aspects, *rules)),
                            aspect_changes=tuple(aspects),
                            rule_changes=tuple(rules),
                        )
                    )

        return changes

    def _compare_rules(
        self,
        rule_set: RuleSetManifest,
        before: list[RuleManifest],
        after: list[RuleManifest],
    ) -> list[RuleChange]:
        changes = []
        kind = ElementKind.RULE

        for rule_id, old, new in _pairs(before, after, lambda r: r.id):
            label = f"Rule '{rule_id}' in rule set '{rule_set.name}'"

            if new is None:
                change_type, description = ChangeType.REMOVED, f"{label} removed"
            elif old is None:
                change_type, description = ChangeType.ADDED, f"{label} added"
            else:
                differing = _differing_fields(
                    replace(old, tags=sorted(old.tags)),
                    replace(new, tags=sorted(new.tags)),
                )
                if not differing:
                    continue
                change_type = ChangeType.MODIFIED
                description = f"{label} modified ({', '.join(differing)})"

            changes.append(
                RuleChange(
                    change_type=change_type,
                    rule_set_name=rule_set.name,
                    rule_id=rule_id,
                    target_type=rule_set.target_type,
                    description=description,
                    is_breaking=self.classifier.classify(
                        kind,
                        change_type,
                        ChangeAspect.DEFINITION
                        if change_type == ChangeType.MODIFIED
                        else None,
                    ),
                )
            )

        return changes

    # ------------------------------------------------------------------
    # Configurations
    # ------------------------------------------------------------------

    def _compare_configurations(
        self, before: list[ConfigurationManifest], after: list[ConfigurationManifest]
    ) -> list[ConfigurationChange]:
        changes = []
        kind = ElementKind.CONFIGURATION

        for name, old, new in _pairs(before, after, lambda c: c.entity_name):
            if new is None:
                changes.append(
                    ConfigurationChange(
                        change_type=ChangeType.REMOVED,
                        entity_name=name,
                        description=f"Configuration for '{name}' removed",
                        is_breaking=self.classifier.classify(kind, ChangeType.REMOVED),
                    )
                )
            elif old is None:
                changes.append(
                    ConfigurationChange(
                        change_type=ChangeType.ADDED,
                        entity_name=name,
                        description=f"Configuration for '{name}' added",
                        is_breaking=self.classifier.classify(kind, ChangeType.ADDED),
                    )
                )
            else:
                aspects = self._compare_aspects(
                    kind,
                    "Configuration for",
                    name,
                    [
                        (ChangeAspect.TYPE, old.entity_type_name, new.entity_type_name),
                        (ChangeAspect.TABLE_NAME, old.table_name, new.table_name),
                        (ChangeAspect.SCHEMA_NAME, old.schema_name, new.schema_name),
                        (
                            ChangeAspect.KEY_PROPERTIES,
                            sorted(old.key_properties),
                            sorted(new.key_properties),
                        ),
                        (ChangeAspect.METADATA, old.metadata, new.metadata),
                    ],
                )
                mappings = self._compare_mappings(
                    name, old.property_configurations, new.property_configurations
                )
                indexes = self._compare_indexes(name, old.indexes, new.indexes)
                relationships = self._compare_relationships(
                    name, old.relationships, new.relationships
                )
                nested = (*aspects, *mappings, *indexes, *relationships)

                if nested:
                    changes.append(
                        ConfigurationChange(
                            change_type=ChangeType.MODIFIED,
                            entity_name=name,
                            description=f"Configuration for '{name}' modified",
                            is_breaking=any(c.is_breaking for c in nested),
                            aspect_changes=tuple(aspects),
                            mapping_changes=tuple(mappings),
                            index_changes=tuple(indexes),
                            relationship_changes=tuple(relationships),
                        )
                    )

        return changes

    def _compare_mappings(
        self,
        entity_name: str,
        before: dict[str, PropertyConfigurationManifest],
        after: dict[str, PropertyConfigurationManifest],
    ) -> list[PropertyChange]:
        changes = []
        kind = ElementKind.PROPERTY_MAPPING

        for name in sorted(before.keys() | after.keys()):
            old, new = before.get(name), after.get(name)
            label = f"Column mapping for '{entity_name}.{name}'"
            aspect = None

            if new is None:
                change_type, description = ChangeType.REMOVED, f"{label} removed"
            elif old is None:
                change_type, description = ChangeType.ADDED, f"{label} added"
            else:
                differing = _differing_fields(old, new)
                if not differing:
                    continue
                change_type = ChangeType.MODIFIED
                aspect = ChangeAspect.MAPPING
                description = f"{label} changed ({', '.join(differing)})"

            changes.append(
                PropertyChange(
                    change_type=change_type,
                    owner_name=entity_name,
                    property_name=name,
                    aspect=aspect,
                    old_value=old.column_name if old else None,
                    new_value=new.column_name if new else None,
                    description=description,
                    is_breaking=self.classifier.classify(kind, change_type, aspect),
                )
            )

        return changes

    def _compare_indexes(
        self, entity_name: str, before: list[IndexManifest], after: list[IndexManifest]
    ) -> list[IndexChange]:
        changes = []
        kind = ElementKind.INDEX

        for identity, old, new in _pairs(before, after, lambda i: i.identity):
            label = f"Index '{identity}' on '{entity_name}'"

            if new is None or old is None:
                change_type = ChangeType.REMOVED if new is None else ChangeType.ADDED
                changes.append(
                    IndexChange(
                        change_type=change_type,
                        entity_name=entity_name,
                        index_name=identity,
                        description=f"{label} {change_type.value.lower()}",
                        is_breaking=self.classifier.classify(kind, change_type),
                    )
                )
                continue

            if old.is_unique != new.is_unique:
                uniqueness = "unique" if new.is_unique else "non-unique"
                changes.append(
                    IndexChange(
                        change_type=ChangeType.MODIFIED,
                        entity_name=entity_name,
                        index_name=identity,
                        aspect=ChangeAspect.UNIQUENESS,
                        description=f"{label} changed to {uniqueness}",
                        is_breaking=self.classifier.classify(
                            kind,
                            ChangeType.MODIFIED,
                            ChangeAspect.UNIQUENESS,
                            old.is_unique,
                            new.is_unique,
                        ),
                    )
                )

            differing = _differing_fields(replace(old, is_unique=new.is_unique), new)
            if differing:
                changes.append(
                    IndexChange(
                        change_type=ChangeType.MODIFIED,
                        entity_name=entity_name,
                        index_name=identity,
                        aspect=ChangeAspect.DEFINITION,
                        description=f"{label} redefined ({', '.join(differing)})",
                        is_breaking=self.classifier.classify(
                            kind, ChangeType.MODIFIED, ChangeAspect.DEFINITION
                        ),
                    )
                )

        return changes

    def _compare_relationships(
        self,
        entity_name: str,
        before: list[RelationshipManifest],
        after: list[RelationshipManifest],
    ) -> list[RelationshipChange]:
        changes = []
        kind = ElementKind.RELATIONSHIP

        for identity, old, new in _pairs(before, after, lambda r: r.identity):
            label = f"Relationship '{identity}' on '{entity_name}'"

            if new is None or old is None:
                change_type = ChangeType.REMOVED if new is None else ChangeType.ADDED
                changes.append(
                    RelationshipChange(
                        change_type=change_type,
                        entity_name=entity_name,
                        relationship=identity,
                        description=f"{label} {change_type.value.lower()}",
                        is_breaking=self.classifier.classify(kind, change_type),
                    )
                )
                continue

            if old.is_required != new.is_required:
                changes.append(
                    RelationshipChange(
                        change_type=ChangeType.MODIFIED,
                        entity_name=entity_name,
                        relationship=identity,
                        aspect=ChangeAspect.REQUIRED,
                        description=(
                            f"{label} changed from {_required_label(old.is_required)} "
                            f"to {_required_label(new.is_required)}"
                        ),
                        is_breaking=self.classifier.classify(
                            kind,
                            ChangeType.MODIFIED,
                            ChangeAspect.REQUIRED,
                            old.is_required,
                            new.is_required,
                        ),
                    )
                )

            differing = _differing_fields(replace(old, is_required=new.is_required), new)
            if differing:
                changes.append(
                    RelationshipChange(
                        change_type=ChangeType.MODIFIED,
                        entity_name=entity_name,
                        relationship=identity,
                        aspect=ChangeAspect.DEFINITION,
                        description=f"{label} redefined ({', '.join(differing)})",
                        is_breaking=self.classifier.classify(
                            kind, ChangeType.MODIFIED, ChangeAspect.DEFINITION
                        ),
                    )
                )

        return changes

    # ------------------------------------------------------------------
    # Shared
    # ------------------------------------------------------------------

    def _compare_aspects(
        self,
        kind: ElementKind,
        label: str,
        name: str,
        aspects: list[tuple[ChangeAspect, Any, Any]],
    ) -> list[AspectChange]:
        """Compare the scalar fields of an element present on both sides."""
        changes = []

        for aspect, old, new in aspects:
            if old == new:
                continue

            if aspect == ChangeAspect.METADATA:
                description = f"{label} '{name}' metadata changed"
            else:
                description = (
                    f"{label} '{name}' {ASPECT_LABELS[aspect]} changed "
                    f"from {_show(old)} to {_show(new)}"
                )

            changes.append(
                AspectChange(
                    change_type=ChangeType.MODIFIED,
                    element_name=name,
                    aspect=aspect,
                    old_value=_value(old),
                    new_value=_value(new),
                    description=description,
                    is_breaking=self.classifier.classify(
                        kind, ChangeType.MODIFIED, aspect, old, new
                    ),
                )
            )

        return changes
