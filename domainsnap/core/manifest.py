"""Core manifest data structures.

This module defines the data structures that describe a domain's structure:
entities, value objects, enums, rule sets and persistence configuration.
Manifests are produced by external tooling and consumed read-only by the
snapshot, diff and migration-planning components.
"""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from functools import total_ordering
from typing import Any

DEFAULT_ENUM_UNDERLYING_TYPE = "System.Int32"


@total_ordering
@dataclass(frozen=True)
class Version:
    """Semantic version of a domain manifest (major.minor.patch)."""

    major: int
    minor: int = 0
    patch: int = 0

    def __post_init__(self) -> None:
        for part in (self.major, self.minor, self.patch):
            if isinstance(part, bool) or not isinstance(part, int) or part < 0:
                raise ValueError(
                    f"Version components must be non-negative integers: "
                    f"{self.major}.{self.minor}.{self.patch}"
                )

    @classmethod
    def parse(cls, value: str) -> "Version":
        """Parse a ``"major.minor.patch"`` string.

        Two-part versions (``"1.2"``) are accepted and get a zero patch.

        Raises:
            ValueError: If the string is not a valid version
        """
        parts = str(value).strip().split(".")
        if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
            raise ValueError(f"Invalid semantic version: {value}")

        numbers = [int(p) for p in parts]
        if len(numbers) == 2:
            numbers.append(0)
        return cls(*numbers)

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.as_tuple() < other.as_tuple()

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class RuleSeverity(str, Enum):
    """Severity of a business rule violation."""

    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"
    CRITICAL = "Critical"


@dataclass
class PropertyManifest:
    """A single property of an entity or value object."""

    name: str
    type_name: str
    is_required: bool = False
    is_collection: bool = False
    max_length: int | None = None
    precision: int | None = None
    scale: int | None = None
    is_concurrency_token: bool = False
    is_computed: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class EntityManifest:
    """An entity: an identity-bearing type with properties and keys."""

    name: str
    type_name: str
    namespace: str | None = None
    properties: list[PropertyManifest] = field(default_factory=list)
    key_properties: list[str] = field(default_factory=list)
    table_name: str | None = None
    schema_name: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ValueObjectManifest:
    """A value object: an identity-less type composed of properties."""

    name: str
    type_name: str
    namespace: str | None = None
    properties: list[PropertyManifest] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class EnumManifest:
    """An enumeration with its member name to numeric code mapping."""

    name: str
    type_name: str
    namespace: str | None = None
    underlying_type: str = DEFAULT_ENUM_UNDERLYING_TYPE
    values: dict[str, int | str] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class RuleManifest:
    """A single business rule inside a rule set."""

    id: str
    category: str
    target_type: str
    message: str | None = None
    severity: RuleSeverity = RuleSeverity.ERROR
    tags: list[str] = field(default_factory=list)
    expression: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class RuleSetManifest:
    """A named group of rules for one target type."""

    name: str
    target_type: str
    rules: list[RuleManifest] = field(default_factory=list)
    includes: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class IndexManifest:
    """A database index declared by a configuration."""

    name: str | None = None
    properties: list[str] = field(default_factory=list)
    is_unique: bool = False
    filter: str | None = None
    included_properties: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def identity(self) -> str:
        """Name used to match indexes across manifests."""
        return self.name or ",".join(self.properties)


@dataclass
class RelationshipManifest:
    """A relationship between a principal and a dependent entity."""

    principal_entity: str
    dependent_entity: str
    relationship_type: str
    principal_navigation: str | None = None
    dependent_navigation: str | None = None
    foreign_key_properties: list[str] = field(default_factory=list)
    is_required: bool = False
    delete_behavior: str | None = None
    join_entity: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def identity(self) -> str:
        """Name used to match relationships across manifests."""
        navigation = self.principal_navigation or self.dependent_navigation or ""
        return (
            f"{self.principal_entity}->{self.dependent_entity}"
            f":{self.relationship_type}:{navigation}"
        )


@dataclass
class PropertyConfigurationManifest:
    """Column mapping for a single property."""

    property_name: str
    column_name: str | None = None
    column_type: str | None = None
    is_required: bool = False
    max_length: int | None = None
    precision: int | None = None
    scale: int | None = None
    is_concurrency_token: bool = False
    is_unicode: bool | None = None
    value_generated: str | None = None
    default_value: str | None = None
    default_value_sql: str | None = None
    computed_column_sql: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ConfigurationManifest:
    """Persistence configuration for one entity."""

    entity_name: str
    entity_type_name: str
    table_name: str | None = None
    schema_name: str | None = None
    key_properties: list[str] = field(default_factory=list)
    property_configurations: dict[str, PropertyConfigurationManifest] = field(
        default_factory=dict
    )
    indexes: list[IndexManifest] = field(default_factory=list)
    relationships: list[RelationshipManifest] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.entity_name


@dataclass
class SourceInfo:
    """Where a manifest (or part of it) came from."""

    type: str
    location: str
    timestamp: datetime | None = None
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass
class DomainManifest:
    """Complete, versioned description of a domain.

    Within every named collection, names are unique (case-sensitive).
    """

    name: str
    version: Version
    entities: list[EntityManifest] = field(default_factory=list)
    value_objects: list[ValueObjectManifest] = field(default_factory=list)
    enums: list[EnumManifest] = field(default_factory=list)
    rule_sets: list[RuleSetManifest] = field(default_factory=list)
    configurations: list[ConfigurationManifest] = field(default_factory=list)
    sources: list[SourceInfo] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    hash: str | None = None

    def validate(self) -> list[str]:
        """Check the manifest input contract.

        Returns:
            List of error messages; empty when the manifest is well-formed
        """
        errors: list[str] = []

        errors.extend(_duplicates("entity", (e.name for e in self.entities)))
        errors.extend(
            _duplicates("value object", (v.name for v in self.value_objects))
        )
        errors.extend(_duplicates("enum", (e.name for e in self.enums)))
        errors.extend(_duplicates("rule set", (r.name for r in self.rule_sets)))
        errors.extend(
            _duplicates(
                "configuration", (c.entity_name for c in self.configurations)
            )
        )

        for entity in self.entities:
            errors.extend(
                _duplicates(
                    f"property of entity '{entity.name}'",
                    (p.name for p in entity.properties),
                )
            )
        for value_object in self.value_objects:
            errors.extend(
                _duplicates(
                    f"property of value object '{value_object.name}'",
                    (p.name for p in value_object.properties),
                )
            )
        for rule_set in self.rule_sets:
            errors.extend(
                _duplicates(
                    f"rule of rule set '{rule_set.name}'",
                    (r.id for r in rule_set.rules),
                )
            )

        return errors


def _duplicates(kind: str, names: Iterable[str]) -> list[str]:
    counts = Counter(names)
    return [
        f"Duplicate {kind} name '{name}'"
        for name, count in sorted(counts.items())
        if count > 1
    ]
