"""Canonical snapshot serialization and content hashing.

The codec turns a DomainManifest into byte-stable canonical text plus an
xxHash64 content hash, and reads snapshot documents back. Canonical text is
independent of the order in which the producer supplied any named
collection, and of every timestamp, so two structurally identical manifests
always hash identically.
"""

from collections.abc import Callable, Iterable
from datetime import UTC, datetime
import json
from typing import Any, TypeVar

import xxhash

from ..core.exceptions import ManifestValidationError, SnapshotParseError
from ..core.logging import get_logger
from ..core.manifest import (
    DEFAULT_ENUM_UNDERLYING_TYPE,
    ConfigurationManifest,
    DomainManifest,
    EntityManifest,
    EnumManifest,
    IndexManifest,
    PropertyConfigurationManifest,
    PropertyManifest,
    RelationshipManifest,
    RuleManifest,
    RuleSetManifest,
    RuleSeverity,
    SourceInfo,
    ValueObjectManifest,
    Version,
)
from .models import SNAPSHOT_SCHEMA_URI, Snapshot

logger = get_logger(__name__)

T = TypeVar("T")

Document = dict[str, Any]


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with a ``Z`` suffix.

    Naive datetimes are taken to be UTC already.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: Any, path: str) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError as e:
            raise SnapshotParseError(f"Invalid timestamp '{value}'", path, e) from e
    else:
        raise SnapshotParseError("Expected an ISO-8601 timestamp string", path)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def compute_hash(canonical_text: str) -> str:
    """xxHash64 (seed 0) of the UTF-8 canonical text, 16 lowercase hex digits."""
    return xxhash.xxh64_hexdigest(canonical_text.encode("utf-8"), seed=0)


def _dump_canonical(document: Any) -> str:
    return json.dumps(
        document,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def _sorted_documents(
    items: Iterable[T],
    key: Callable[[T], Any],
    to_document: Callable[[T], Document],
) -> list[Document]:
    """Convert items to documents sorted by ``key``.

    Ties on the key are broken by the canonical text of the document itself,
    so the result never depends on the input order.
    """
    pairs = [(key(item), to_document(item)) for item in items]
    pairs.sort(key=lambda pair: (pair[0], _dump_canonical(pair[1])))
    return [document for _, document in pairs]


class SnapshotCodec:
    """Encodes manifests to canonical text and decodes snapshot documents."""

    def __init__(self, indented: bool = True, include_schema: bool = True):
        """Initialize the codec.

        Args:
            indented: Indent snapshot files for readability
            include_schema: Emit the ``$schema`` reference in snapshot files
        """
        self.indented = indented
        self.include_schema = include_schema

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def canonical_text(self, manifest: DomainManifest) -> str:
        """Byte-stable canonical text of a manifest, used for hashing.

        Excludes every timestamp and any manifest-level hash.
        """
        if manifest is None:
            raise ValueError("manifest is required")
        document = self.manifest_to_document(manifest, include_volatile=False)
        return _dump_canonical(document)

    def encode(self, manifest: DomainManifest) -> tuple[str, str]:
        """Encode a manifest.

        Returns:
            Tuple of (canonical text, content hash)
        """
        text = self.canonical_text(manifest)
        return text, compute_hash(text)

    def create_snapshot(self, manifest: DomainManifest) -> Snapshot:
        """Validate, hash and wrap a manifest into a Snapshot.

        Raises:
            ValueError: If the manifest is missing
            ManifestValidationError: If the manifest has duplicate names
        """
        if manifest is None:
            raise ValueError("manifest is required")

        errors = manifest.validate()
        if errors:
            raise ManifestValidationError(
                f"Manifest '{manifest.name}' is invalid: {'; '.join(errors)}", errors
            )

        _, content_hash = self.encode(manifest)
        logger.debug(
            "Snapshot created",
            domain=manifest.name,
            version=str(manifest.version),
            hash=content_hash,
        )
        return Snapshot.create(manifest, content_hash)

    def serialize(self, snapshot: Snapshot) -> str:
        """Render a snapshot as the JSON text stored in snapshot files."""
        if snapshot is None:
            raise ValueError("snapshot is required")

        document: Document = {}
        if self.include_schema:
            document["$schema"] = SNAPSHOT_SCHEMA_URI
        document["name"] = snapshot.name
        document["version"] = str(snapshot.version)
        document["hash"] = snapshot.hash
        document["createdAt"] = format_timestamp(snapshot.created_at)
        document["manifest"] = self.manifest_to_document(snapshot.manifest)

        return json.dumps(
            document,
            indent=2 if self.indented else None,
            ensure_ascii=False,
            default=str,
        )

    def verify(self, snapshot: Snapshot) -> bool:
        """Check that a snapshot's stored hash matches its manifest content."""
        _, content_hash = self.encode(snapshot.manifest)
        return content_hash == snapshot.hash

    def manifest_to_document(
        self, manifest: DomainManifest, include_volatile: bool = True
    ) -> Document:
        """Build the manifest document with every collection sorted.

        Args:
            manifest: Manifest to convert
            include_volatile: Include timestamps and manifest hash (stored
                files) or leave them out (hash input)
        """
        document: Document = {
            "name": manifest.name,
            "version": str(manifest.version),
        }
        if include_volatile:
            document["createdAt"] = format_timestamp(manifest.created_at)
            if manifest.hash:
                document["hash"] = manifest.hash

        if manifest.entities:
            document["entities"] = _sorted_documents(
                manifest.entities, lambda e: e.name, self._entity_document
            )
        if manifest.value_objects:
            document["valueObjects"] = _sorted_documents(
                manifest.value_objects, lambda v: v.name, self._value_object_document
            )
        if manifest.enums:
            document["enums"] = _sorted_documents(
                manifest.enums, lambda e: e.name, self._enum_document
            )
        if manifest.rule_sets:
            document["ruleSets"] = _sorted_documents(
                manifest.rule_sets,
                lambda r: (r.name, r.target_type),
                self._rule_set_document,
            )
        if manifest.configurations:
            document["configurations"] = _sorted_documents(
                manifest.configurations,
                lambda c: c.entity_name,
                self._configuration_document,
            )
        if manifest.sources:
            document["sources"] = _sorted_documents(
                manifest.sources,
                lambda s: (s.type, s.location),
                lambda s: self._source_document(s, include_volatile),
            )
        if manifest.metadata:
            document["metadata"] = _sorted_mapping(manifest.metadata)

        return document

    def _entity_document(self, entity: EntityManifest) -> Document:
        document: Document = {"name": entity.name, "typeName": entity.type_name}
        if entity.namespace is not None:
            document["namespace"] = entity.namespace
        if entity.properties:
            document["properties"] = _sorted_documents(
                entity.properties, lambda p: p.name, self._property_document
            )
        if entity.key_properties:
            document["keyProperties"] = sorted(entity.key_properties)
        if entity.table_name is not None:
            document["tableName"] = entity.table_name
        if entity.schema_name is not None:
            document["schemaName"] = entity.schema_name
        if entity.metadata:
            document["metadata"] = _sorted_mapping(entity.metadata)
        return document

    def _property_document(self, prop: PropertyManifest) -> Document:
        document: Document = {"name": prop.name, "typeName": prop.type_name}
        if prop.is_required:
            document["isRequired"] = True
        if prop.is_collection:
            document["isCollection"] = True
        if prop.max_length is not None:
            document["maxLength"] = prop.max_length
        if prop.precision is not None:
            document["precision"] = prop.precision
        if prop.scale is not None:
            document["scale"] = prop.scale
        if prop.is_concurrency_token:
            document["isConcurrencyToken"] = True
        if prop.is_computed:
            document["isComputed"] = True
        if prop.metadata:
            document["metadata"] = _sorted_mapping(prop.metadata)
        return document

    def _value_object_document(self, value_object: ValueObjectManifest) -> Document:
        document: Document = {
            "name": value_object.name,
            "typeName": value_object.type_name,
        }
        if value_object.namespace is not None:
            document["namespace"] = value_object.namespace
        if value_object.properties:
            document["properties"] = _sorted_documents(
                value_object.properties, lambda p: p.name, self._property_document
            )
        if value_object.metadata:
            document["metadata"] = _sorted_mapping(value_object.metadata)
        return document

    def _enum_document(self, enum: EnumManifest) -> Document:
        document: Document = {"name": enum.name, "typeName": enum.type_name}
        if enum.namespace is not None:
            document["namespace"] = enum.namespace
        if enum.underlying_type != DEFAULT_ENUM_UNDERLYING_TYPE:
            document["underlyingType"] = enum.underlying_type
        if enum.values:
            document["values"] = _sorted_mapping(enum.values)
        if enum.metadata:
            document["metadata"] = _sorted_mapping(enum.metadata)
        return document

    def _rule_set_document(self, rule_set: RuleSetManifest) -> Document:
        document: Document = {
            "name": rule_set.name,
            "targetType": rule_set.target_type,
        }
        if rule_set.rules:
            document["rules"] = _sorted_documents(
                rule_set.rules, lambda r: r.id, self._rule_document
            )
        if rule_set.includes:
            document["includes"] = sorted(rule_set.includes)
        if rule_set.metadata:
            document["metadata"] = _sorted_mapping(rule_set.metadata)
        return document

    def _rule_document(self, rule: RuleManifest) -> Document:
        document: Document = {
            "id": rule.id,
            "category": rule.category,
            "targetType": rule.target_type,
        }
        if rule.message is not None:
            document["message"] = rule.message
        if rule.severity != RuleSeverity.ERROR:
            document["severity"] = rule.severity.value
        if rule.tags:
            document["tags"] = sorted(rule.tags)
        if rule.expression is not None:
            document["expression"] = rule.expression
        if rule.metadata:
            document["metadata"] = _sorted_mapping(rule.metadata)
        return document

    def _configuration_document(self, config: ConfigurationManifest) -> Document:
        document: Document = {
            "entityName": config.entity_name,
            "entityTypeName": config.entity_type_name,
        }
        if config.table_name is not None:
            document["tableName"] = config.table_name
        if config.schema_name is not None:
            document["schemaName"] = config.schema_name
        if config.key_properties:
            document["keyProperties"] = sorted(config.key_properties)
        if config.property_configurations:
            document["propertyConfigurations"] = {
                key: self._property_configuration_document(value)
                for key, value in sorted(config.property_configurations.items())
            }
        if config.indexes:
            document["indexes"] = _sorted_documents(
                config.indexes, lambda i: i.identity, self._index_document
            )
        if config.relationships:
            document["relationships"] = _sorted_documents(
                config.relationships,
                lambda r: (r.principal_entity, r.dependent_entity),
                self._relationship_document,
            )
        if config.metadata:
            document["metadata"] = _sorted_mapping(config.metadata)
        return document

    def _property_configuration_document(
        self, prop_config: PropertyConfigurationManifest
    ) -> Document:
        document: Document = {"propertyName": prop_config.property_name}
        optional_text = {
            "columnName": prop_config.column_name,
            "columnType": prop_config.column_type,
        }
        document.update({k: v for k, v in optional_text.items() if v is not None})
        if prop_config.is_required:
            document["isRequired"] = True
        if prop_config.max_length is not None:
            document["maxLength"] = prop_config.max_length
        if prop_config.precision is not None:
            document["precision"] = prop_config.precision
        if prop_config.scale is not None:
            document["scale"] = prop_config.scale
        if prop_config.is_concurrency_token:
            document["isConcurrencyToken"] = True
        if prop_config.is_unicode is not None:
            document["isUnicode"] = prop_config.is_unicode
        trailing_text = {
            "valueGenerated": prop_config.value_generated,
            "defaultValue": prop_config.default_value,
            "defaultValueSql": prop_config.default_value_sql,
            "computedColumnSql": prop_config.computed_column_sql,
        }
        document.update({k: v for k, v in trailing_text.items() if v is not None})
        if prop_config.metadata:
            document["metadata"] = _sorted_mapping(prop_config.metadata)
        return document

    def _index_document(self, index: IndexManifest) -> Document:
        document: Document = {}
        if index.name is not None:
            document["name"] = index.name
        if index.properties:
            document["properties"] = list(index.properties)
        if index.is_unique:
            document["isUnique"] = True
        if index.filter is not None:
            document["filter"] = index.filter
        if index.included_properties:
            document["includedProperties"] = list(index.included_properties)
        if index.metadata:
            document["metadata"] = _sorted_mapping(index.metadata)
        return document

    def _relationship_document(self, rel: RelationshipManifest) -> Document:
        document: Document = {
            "principalEntity": rel.principal_entity,
            "dependentEntity": rel.dependent_entity,
            "relationshipType": rel.relationship_type,
        }
        if rel.principal_navigation is not None:
            document["principalNavigation"] = rel.principal_navigation
        if rel.dependent_navigation is not None:
            document["dependentNavigation"] = rel.dependent_navigation
        if rel.foreign_key_properties:
            document["foreignKeyProperties"] = list(rel.foreign_key_properties)
        if rel.is_required:
            document["isRequired"] = True
        if rel.delete_behavior is not None:
            document["deleteBehavior"] = rel.delete_behavior
        if rel.join_entity is not None:
            document["joinEntity"] = rel.join_entity
        if rel.metadata:
            document["metadata"] = _sorted_mapping(rel.metadata)
        return document

    def _source_document(self, source: SourceInfo, include_volatile: bool) -> Document:
        document: Document = {"type": source.type, "location": source.location}
        if include_volatile and source.timestamp is not None:
            document["timestamp"] = format_timestamp(source.timestamp)
        if source.metadata:
            document["metadata"] = _sorted_mapping(source.metadata)
        return document

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def decode(self, data: str | bytes) -> Snapshot:
        """Decode snapshot file content.

        Raises:
            SnapshotParseError: If the content is malformed or misses a
                required field
        """
        if data is None:
            raise ValueError("snapshot content is required")
        if isinstance(data, bytes):
            try:
                data = data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise SnapshotParseError("Snapshot is not valid UTF-8", "$", e) from e
        if not data.strip():
            raise SnapshotParseError("Snapshot content is empty", "$")

        try:
            document = json.loads(data)
        except json.JSONDecodeError as e:
            raise SnapshotParseError(f"Invalid snapshot JSON: {e}", "$", e) from e

        return self.snapshot_from_document(document)

    def snapshot_from_document(self, document: Any) -> Snapshot:
        root = _Reader(document, "$")
        manifest = self.manifest_from_document(root.require_dict("manifest"), "manifest")

        return Snapshot(
            name=root.require_str("name"),
            version=root.require_version("version"),
            hash=root.require_str("hash"),
            created_at=parse_timestamp(root.require("createdAt"), "createdAt"),
            manifest=manifest,
        )

    def manifest_from_document(self, document: Any, path: str = "$") -> DomainManifest:
        """Build a DomainManifest from its camelCase document form."""
        reader = _Reader(document, path)

        created_at = reader.optional("createdAt")
        manifest = DomainManifest(
            name=reader.require_str("name"),
            version=reader.require_version("version"),
            entities=reader.list_of("entities", self._read_entity),
            value_objects=reader.list_of("valueObjects", self._read_value_object),
            enums=reader.list_of("enums", self._read_enum),
            rule_sets=reader.list_of("ruleSets", self._read_rule_set),
            configurations=reader.list_of("configurations", self._read_configuration),
            sources=reader.list_of("sources", self._read_source),
            metadata=reader.mapping("metadata"),
            hash=reader.optional_str("hash"),
        )
        if created_at is not None:
            manifest.created_at = parse_timestamp(created_at, reader.child("createdAt"))
        return manifest

    def _read_entity(self, reader: "_Reader") -> EntityManifest:
        return EntityManifest(
            name=reader.require_str("name"),
            type_name=reader.require_str("typeName"),
            namespace=reader.optional_str("namespace"),
            properties=reader.list_of("properties", self._read_property),
            key_properties=reader.string_list("keyProperties"),
            table_name=reader.optional_str("tableName"),
            schema_name=reader.optional_str("schemaName"),
            metadata=reader.mapping("metadata"),
        )

    def _read_property(self, reader: "_Reader") -> PropertyManifest:
        return PropertyManifest(
            name=reader.require_str("name"),
            type_name=reader.require_str("typeName"),
            is_required=reader.flag("isRequired"),
            is_collection=reader.flag("isCollection"),
            max_length=reader.optional_int("maxLength"),
            precision=reader.optional_int("precision"),
            scale=reader.optional_int("scale"),
            is_concurrency_token=reader.flag("isConcurrencyToken"),
            is_computed=reader.flag("isComputed"),
            metadata=reader.mapping("metadata"),
        )

    def _read_value_object(self, reader: "_Reader") -> ValueObjectManifest:
        return ValueObjectManifest(
            name=reader.require_str("name"),
            type_name=reader.require_str("typeName"),
            namespace=reader.optional_str("namespace"),
            properties=reader.list_of("properties", self._read_property),
            metadata=reader.mapping("metadata"),
        )

    def _read_enum(self, reader: "_Reader") -> EnumManifest:
        underlying_type = reader.optional_str("underlyingType")
        values: dict[str, int | str] = {}
        for member, code in reader.mapping("values").items():
            if isinstance(code, bool) or not isinstance(code, int | str):
                raise SnapshotParseError(
                    "Enum value must be an integer or string",
                    reader.child(f"values.{member}"),
                )
            values[member] = code

        return EnumManifest(
            name=reader.require_str("name"),
            type_name=reader.require_str("typeName"),
            namespace=reader.optional_str("namespace"),
            underlying_type=(
                underlying_type
                if underlying_type is not None
                else DEFAULT_ENUM_UNDERLYING_TYPE
            ),
            values=values,
            metadata=reader.mapping("metadata"),
        )

    def _read_rule_set(self, reader: "_Reader") -> RuleSetManifest:
        return RuleSetManifest(
            name=reader.require_str("name"),
            target_type=reader.require_str("targetType"),
            rules=reader.list_of("rules", self._read_rule),
            includes=reader.string_list("includes"),
            metadata=reader.mapping("metadata"),
        )

    def _read_rule(self, reader: "_Reader") -> RuleManifest:
        severity_name = reader.optional_str("severity") or RuleSeverity.ERROR.value
        try:
            severity = RuleSeverity(severity_name)
        except ValueError as e:
            raise SnapshotParseError(
                f"Unknown rule severity '{severity_name}'",
                reader.child("severity"),
                e,
            ) from e

        return RuleManifest(
            id=reader.require_str("id"),
            category=reader.require_str("category"),
            target_type=reader.require_str("targetType"),
            message=reader.optional_str("message"),
            severity=severity,
            tags=reader.string_list("tags"),
            expression=reader.optional_str("expression"),
            metadata=reader.mapping("metadata"),
        )

    def _read_configuration(self, reader: "_Reader") -> ConfigurationManifest:
        prop_configs = {
            key: self._read_property_configuration(
                _Reader(value, reader.child(f"propertyConfigurations.{key}"))
            )
            for key, value in reader.mapping("propertyConfigurations").items()
        }

        return ConfigurationManifest(
            entity_name=reader.require_str("entityName"),
            entity_type_name=reader.require_str("entityTypeName"),
            table_name=reader.optional_str("tableName"),
            schema_name=reader.optional_str("schemaName"),
            key_properties=reader.string_list("keyProperties"),
            property_configurations=prop_configs,
            indexes=reader.list_of("indexes", self._read_index),
            relationships=reader.list_of("relationships", self._read_relationship),
            metadata=reader.mapping("metadata"),
        )

    def _read_property_configuration(
        self, reader: "_Reader"
    ) -> PropertyConfigurationManifest:
        is_unicode = reader.optional("isUnicode")
        if is_unicode is not None and not isinstance(is_unicode, bool):
            raise SnapshotParseError("Expected a boolean", reader.child("isUnicode"))

        return PropertyConfigurationManifest(
            property_name=reader.require_str("propertyName"),
            column_name=reader.optional_str("columnName"),
            column_type=reader.optional_str("columnType"),
            is_required=reader.flag("isRequired"),
            max_length=reader.optional_int("maxLength"),
            precision=reader.optional_int("precision"),
            scale=reader.optional_int("scale"),
            is_concurrency_token=reader.flag("isConcurrencyToken"),
            is_unicode=is_unicode,
            value_generated=reader.optional_str("valueGenerated"),
            default_value=reader.optional_str("defaultValue"),
            default_value_sql=reader.optional_str("defaultValueSql"),
            computed_column_sql=reader.optional_str("computedColumnSql"),
            metadata=reader.mapping("metadata"),
        )

    def _read_index(self, reader: "_Reader") -> IndexManifest:
        return IndexManifest(
            name=reader.optional_str("name"),
            properties=reader.string_list("properties"),
            is_unique=reader.flag("isUnique"),
            filter=reader.optional_str("filter"),
            included_properties=reader.string_list("includedProperties"),
            metadata=reader.mapping("metadata"),
        )

    def _read_relationship(self, reader: "_Reader") -> RelationshipManifest:
        return RelationshipManifest(
            principal_entity=reader.require_str("principalEntity"),
            dependent_entity=reader.require_str("dependentEntity"),
            relationship_type=reader.require_str("relationshipType"),
            principal_navigation=reader.optional_str("principalNavigation"),
            dependent_navigation=reader.optional_str("dependentNavigation"),
            foreign_key_properties=reader.string_list("foreignKeyProperties"),
            is_required=reader.flag("isRequired"),
            delete_behavior=reader.optional_str("deleteBehavior"),
            join_entity=reader.optional_str("joinEntity"),
            metadata=reader.mapping("metadata"),
        )

    def _read_source(self, reader: "_Reader") -> SourceInfo:
        timestamp = reader.optional("timestamp")
        metadata = reader.mapping("metadata")
        return SourceInfo(
            type=reader.require_str("type"),
            location=reader.require_str("location"),
            timestamp=(
                parse_timestamp(timestamp, reader.child("timestamp"))
                if timestamp is not None
                else None
            ),
            metadata={str(k): str(v) for k, v in metadata.items()},
        )


def _sorted_mapping(mapping: dict[str, Any]) -> dict[str, Any]:
    return {key: mapping[key] for key in sorted(mapping)}


def _check_keys(value: Any, path: str) -> None:
    """Reject mapping keys that are not strings, at any depth."""
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise SnapshotParseError(f"Expected a string key, got {key!r}", path)
            _check_keys(item, f"{path}.{key}")
    elif isinstance(value, list):
        for index, item in enumerate(value):
            _check_keys(item, f"{path}[{index}]")


class _Reader:
    """Typed field access over a decoded JSON object with path tracking."""

    def __init__(self, data: Any, path: str):
        if not isinstance(data, dict):
            raise SnapshotParseError("Expected an object", path)
        self.data = data
        self.path = path

    def child(self, key: str) -> str:
        return key if self.path == "$" else f"{self.path}.{key}"

    def optional(self, key: str) -> Any:
        return self.data.get(key)

    def require(self, key: str) -> Any:
        value = self.data.get(key)
        if value is None:
            raise SnapshotParseError(
                f"Missing required field '{key}'", self.child(key)
            )
        return value

    def require_str(self, key: str) -> str:
        value = self.require(key)
        if not isinstance(value, str) or not value:
            raise SnapshotParseError("Expected a non-empty string", self.child(key))
        return value

    def require_dict(self, key: str) -> dict[str, Any]:
        value = self.require(key)
        if not isinstance(value, dict):
            raise SnapshotParseError("Expected an object", self.child(key))
        return value

    def require_version(self, key: str) -> Version:
        value = self.require(key)
        if not isinstance(value, str):
            raise SnapshotParseError("Expected a version string", self.child(key))
        try:
            return Version.parse(value)
        except ValueError as e:
            raise SnapshotParseError(str(e), self.child(key), e) from e

    def optional_str(self, key: str) -> str | None:
        value = self.data.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise SnapshotParseError("Expected a string", self.child(key))
        return value

    def optional_int(self, key: str) -> int | None:
        value = self.data.get(key)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            raise SnapshotParseError("Expected an integer", self.child(key))
        return value

    def flag(self, key: str) -> bool:
        value = self.data.get(key, False)
        if not isinstance(value, bool):
            raise SnapshotParseError("Expected a boolean", self.child(key))
        return value

    def mapping(self, key: str) -> dict[str, Any]:
        value = self.data.get(key)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise SnapshotParseError("Expected an object", self.child(key))
        _check_keys(value, self.child(key))
        return dict(value)

    def string_list(self, key: str) -> list[str]:
        value = self.data.get(key)
        if value is None:
            return []
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise SnapshotParseError("Expected a list of strings", self.child(key))
        return list(value)

    def list_of(self, key: str, read: Callable[["_Reader"], T]) -> list[T]:
        value = self.data.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise SnapshotParseError("Expected a list", self.child(key))
        return [
            read(_Reader(item, f"{self.child(key)}[{index}]"))
            for index, item in enumerate(value)
        ]
