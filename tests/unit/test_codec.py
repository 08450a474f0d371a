"""Tests for canonical snapshot serialization and hashing."""

from copy import deepcopy
from datetime import UTC, datetime, timedelta, timezone
import json
import re

import pytest

from domainsnap.core import (
    EntityManifest,
    ManifestValidationError,
    PropertyManifest,
    SnapshotParseError,
)
from domainsnap.snapshot import (
    SNAPSHOT_SCHEMA_URI,
    SnapshotCodec,
    compute_hash,
    format_timestamp,
)


def _reversed_mapping(mapping):
    return dict(reversed(list(mapping.items())))


def _shuffled(manifest):
    """Copy of a manifest with every order-insensitive collection reversed."""
    shuffled = deepcopy(manifest)
    for collection in (
        shuffled.entities,
        shuffled.value_objects,
        shuffled.enums,
        shuffled.rule_sets,
        shuffled.configurations,
        shuffled.sources,
    ):
        collection.reverse()

    for entity in shuffled.entities:
        entity.properties.reverse()
        entity.key_properties.reverse()
        entity.metadata = _reversed_mapping(entity.metadata)
    for value_object in shuffled.value_objects:
        value_object.properties.reverse()
    for enum in shuffled.enums:
        enum.values = _reversed_mapping(enum.values)
    for rule_set in shuffled.rule_sets:
        rule_set.rules.reverse()
        rule_set.includes.reverse()
        for rule in rule_set.rules:
            rule.tags.reverse()
    for config in shuffled.configurations:
        config.property_configurations = _reversed_mapping(
            config.property_configurations
        )
        config.indexes.reverse()
        config.relationships.reverse()
    for source in shuffled.sources:
        source.metadata = _reversed_mapping(source.metadata)
    shuffled.metadata = _reversed_mapping(shuffled.metadata)
    return shuffled


class TestContentHash:
    """Test the content hash."""

    def test_hash_is_sixteen_lowercase_hex_digits(self, codec, sales_manifest):
        _, content_hash = codec.encode(sales_manifest)
        assert re.fullmatch(r"[0-9a-f]{16}", content_hash)

    def test_xxhash64_of_empty_text(self):
        assert compute_hash("") == "ef46db3751d8e999"

    def test_hash_matches_canonical_text(self, codec, sales_manifest):
        text, content_hash = codec.encode(sales_manifest)
        assert content_hash == compute_hash(text)

    def test_encoding_is_repeatable(self, codec, sales_manifest):
        assert codec.encode(sales_manifest) == codec.encode(sales_manifest)

    def test_collection_order_does_not_change_hash(self, codec, full_sales_manifest):
        """Producers may list named elements in any order."""
        shuffled = _shuffled(full_sales_manifest)
        original_config = full_sales_manifest.configurations[0]
        shuffled_config = shuffled.configurations[-1]
        assert shuffled.entities[0].name != full_sales_manifest.entities[0].name
        assert shuffled.value_objects[0].name != full_sales_manifest.value_objects[0].name
        assert shuffled.enums[0].name != full_sales_manifest.enums[0].name
        assert shuffled.rule_sets[0].name != full_sales_manifest.rule_sets[0].name
        assert shuffled.rule_sets[-1].includes != full_sales_manifest.rule_sets[0].includes
        assert shuffled.sources[0].location != full_sales_manifest.sources[0].location
        assert list(shuffled_config.property_configurations) != list(
            original_config.property_configurations
        )
        assert shuffled_config.indexes != original_config.indexes
        assert shuffled_config.relationships != original_config.relationships

        assert codec.canonical_text(shuffled) == codec.canonical_text(
            full_sales_manifest
        )
        assert codec.encode(shuffled)[1] == codec.encode(full_sales_manifest)[1]

    def test_relationship_order_with_shared_endpoints(self, codec, full_sales_manifest):
        customer_config = full_sales_manifest.configurations[1]
        assert {
            (r.principal_entity, r.dependent_entity)
            for r in customer_config.relationships
        } == {("Customer", "Order")}
        reordered = deepcopy(full_sales_manifest)
        reordered.configurations[1].relationships.reverse()

        assert codec.encode(reordered) == codec.encode(full_sales_manifest)

    def test_timestamps_do_not_change_hash(self, codec, sales_manifest):
        later = deepcopy(sales_manifest)
        later.created_at = sales_manifest.created_at + timedelta(days=30)
        later.sources[0].timestamp = datetime(2025, 6, 1, tzinfo=UTC)
        later.hash = "0123456789abcdef"

        assert codec.encode(later)[1] == codec.encode(sales_manifest)[1]

    def test_structural_change_changes_hash(self, codec, sales_manifest):
        changed = deepcopy(sales_manifest)
        changed.entities[0].properties.append(
            PropertyManifest(name="Notes", type_name="String")
        )
        assert codec.encode(changed)[1] != codec.encode(sales_manifest)[1]

    def test_format_options_do_not_change_hash(self, sales_manifest):
        compact = SnapshotCodec(indented=False, include_schema=False)
        assert compact.encode(sales_manifest) == SnapshotCodec().encode(sales_manifest)


class TestCanonicalText:
    """Test the canonical text layout."""

    def test_canonical_text_is_compact(self, codec, sales_manifest):
        text = codec.canonical_text(sales_manifest)
        assert "\n" not in text
        assert ": " not in text

    def test_absent_values_are_omitted(self, codec, sales_manifest):
        text = codec.canonical_text(sales_manifest)
        assert "null" not in text
        assert "false" not in text

    def test_default_flags_are_omitted(self, codec, sales_manifest):
        document = json.loads(codec.canonical_text(sales_manifest))
        customer = next(e for e in document["entities"] if e["name"] == "Customer")
        email = next(p for p in customer["properties"] if p["name"] == "Email")
        assert email == {"name": "Email", "typeName": "String", "maxLength": 256}
        assert "schemaName" not in customer

    def test_timestamps_are_excluded(self, codec, sales_manifest):
        text = codec.canonical_text(sales_manifest)
        assert "createdAt" not in text
        assert "timestamp" not in text

    def test_named_collections_are_sorted(self, codec, sales_manifest):
        document = json.loads(codec.canonical_text(sales_manifest))
        assert [e["name"] for e in document["entities"]] == ["Customer", "Order"]
        order = document["entities"][1]
        assert [p["name"] for p in order["properties"]] == [
            "Id",
            "Lines",
            "Reference",
            "Total",
        ]

    def test_non_ascii_text_is_kept(self, codec, sales_manifest):
        sales_manifest.metadata["label"] = "Ventes é"
        assert "Ventes é" in codec.canonical_text(sales_manifest)

    def test_missing_manifest_is_argument_error(self, codec):
        with pytest.raises(ValueError):
            codec.canonical_text(None)


class TestCreateSnapshot:
    """Test snapshot creation."""

    def test_snapshot_carries_manifest_identity(self, codec, sales_manifest):
        snapshot = codec.create_snapshot(sales_manifest)

        assert snapshot.name == "Sales"
        assert str(snapshot.version) == "1.0.0"
        assert snapshot.hash == codec.encode(sales_manifest)[1]
        assert snapshot.created_at == sales_manifest.created_at
        assert snapshot.manifest is sales_manifest

    def test_missing_manifest_is_argument_error(self, codec):
        with pytest.raises(ValueError):
            codec.create_snapshot(None)

    def test_snapshots_are_hashable(self, codec, sales_manifest):
        snapshot = codec.create_snapshot(sales_manifest)
        decoded = codec.decode(codec.serialize(snapshot))
        changed = deepcopy(sales_manifest)
        changed.metadata["owner"] = "billing-team"
        other = codec.create_snapshot(changed)

        assert decoded == snapshot
        assert hash(decoded) == hash(snapshot)
        assert other != snapshot
        assert {snapshot, decoded, other} == {snapshot, other}

    def test_duplicate_names_are_rejected(self, codec, sales_manifest):

        sales_manifest.entities.append(
            EntityManifest(name="Order", type_name="Other.Order")
        )

        with pytest.raises(ManifestValidationError) as exc_info:
            codec.create_snapshot(sales_manifest)

        assert exc_info.value.errors == ["Duplicate entity name 'Order'"]
        assert isinstance(exc_info.value, ValueError)


class TestSerializeAndDecode:
    """Test snapshot files."""

    def test_serialized_snapshot_fields(self, codec, sales_manifest):
        snapshot = codec.create_snapshot(sales_manifest)
        document = json.loads(codec.serialize(snapshot))

        assert list(document) == [
            "$schema",
            "name",
            "version",
            "hash",
            "createdAt",
            "manifest",
        ]
        assert document["$schema"] == SNAPSHOT_SCHEMA_URI
        assert document["createdAt"] == "2024-01-02T03:04:05Z"
        assert document["manifest"]["sources"][0]["timestamp"] == "2024-01-01T00:00:00Z"

    def test_schema_reference_is_optional(self, sales_manifest):
        codec = SnapshotCodec(include_schema=False)
        text = codec.serialize(codec.create_snapshot(sales_manifest))
        assert "$schema" not in json.loads(text)

    def test_indentation(self, sales_manifest):
        indented = SnapshotCodec(indented=True)
        compact = SnapshotCodec(indented=False)
        snapshot = indented.create_snapshot(sales_manifest)

        assert '\n  "name"' in indented.serialize(snapshot)
        assert "\n" not in compact.serialize(snapshot)

    def test_decode_restores_snapshot(self, codec, sales_manifest):
        snapshot = codec.create_snapshot(sales_manifest)
        decoded = codec.decode(codec.serialize(snapshot))

        assert decoded.name == snapshot.name
        assert decoded.version == snapshot.version
        assert decoded.hash == snapshot.hash
        assert decoded.created_at == snapshot.created_at
        assert decoded.manifest.sources[0].timestamp == datetime(2024, 1, 1, tzinfo=UTC)
        assert codec.canonical_text(decoded.manifest) == codec.canonical_text(
            sales_manifest
        )

    def test_decode_restores_every_collection(self, codec, full_sales_manifest):
        snapshot = codec.create_snapshot(_shuffled(full_sales_manifest))
        decoded = codec.decode(codec.serialize(snapshot)).manifest

        assert [v.name for v in decoded.value_objects] == ["Address", "Money"]
        assert [e.name for e in decoded.enums] == ["OrderStatus", "PaymentMethod"]
        assert decoded.enums[1].underlying_type == "byte"
        assert [s.location for s in decoded.sources] == [
            "Sales.Contracts.dll",
            "Sales.Domain.dll",
        ]
        assert decoded.sources[0].metadata == {
            "configuration": "Release",
            "framework": "net8.0",
        }

        rule_sets = {r.name: r for r in decoded.rule_sets}
        assert rule_sets["OrderRules"].includes == ["AuditRules", "CommonRules"]
        assert rule_sets["CustomerRules"].includes == ["CommonRules", "ContactRules"]
        assert rule_sets["CustomerRules"].rules[0].expression == "Email != null"

        for original in full_sales_manifest.configurations:
            restored = next(
                c
                for c in decoded.configurations
                if c.entity_name == original.entity_name
            )
            assert restored.property_configurations == original.property_configurations
            assert sorted(restored.indexes, key=lambda i: i.identity) == sorted(
                original.indexes, key=lambda i: i.identity
            )
            assert len(restored.relationships) == len(original.relationships)
            for relationship in original.relationships:
                assert relationship in restored.relationships

        order_config = next(c for c in decoded.configurations if c.entity_name == "Order")
        total_index = next(i for i in order_config.indexes if i.name == "IX_Order_Total")
        assert total_index.properties == ["Total", "Id"]
        assert total_index.included_properties == ["Reference", "Lines"]
        assert total_index.filter == "[Total] > 0"
        assert total_index.is_unique is True
        lines = next(
            r for r in order_config.relationships if r.dependent_entity == "OrderLine"
        )
        assert lines.foreign_key_properties == ["OrderId", "OrderVersion"]
        assert lines.delete_behavior == "Cascade"
        assert lines.is_required is True

    def test_decode_accepts_bytes(self, codec, sales_manifest):
        snapshot = codec.create_snapshot(sales_manifest)
        decoded = codec.decode(codec.serialize(snapshot).encode("utf-8"))
        assert decoded.hash == snapshot.hash

    def test_verify_detects_tampering(self, codec, sales_manifest):
        snapshot = codec.create_snapshot(sales_manifest)
        document = json.loads(codec.serialize(snapshot))
        assert codec.verify(codec.decode(json.dumps(document)))

        document["manifest"]["entities"][0]["tableName"] = "Tampered"
        assert not codec.verify(codec.decode(json.dumps(document)))


class TestDecodeErrors:
    """Test parse errors and their field paths."""

    @pytest.fixture
    def document(self, codec, sales_manifest):
        return json.loads(codec.serialize(codec.create_snapshot(sales_manifest)))

    def test_missing_content_is_argument_error(self, codec):
        with pytest.raises(ValueError):
            codec.decode(None)

    @pytest.mark.parametrize("content", ["", "   ", "{not json"])
    def test_unparseable_content(self, codec, content):
        with pytest.raises(SnapshotParseError) as exc_info:
            codec.decode(content)
        assert exc_info.value.field_path == "$"

    def test_top_level_must_be_an_object(self, codec):
        with pytest.raises(SnapshotParseError) as exc_info:
            codec.decode("[1, 2]")
        assert exc_info.value.field_path == "$"

    def test_missing_manifest(self, codec, document):
        del document["manifest"]
        with pytest.raises(SnapshotParseError) as exc_info:
            codec.decode(json.dumps(document))
        assert exc_info.value.field_path == "manifest"

    def test_missing_nested_field_reports_path(self, codec, document):
        del document["manifest"]["entities"][1]["properties"][0]["typeName"]
        with pytest.raises(SnapshotParseError) as exc_info:
            codec.decode(json.dumps(document))

        assert exc_info.value.field_path == "manifest.entities[1].properties[0].typeName"
        assert "manifest.entities[1].properties[0].typeName" in str(exc_info.value)

    def test_invalid_version(self, codec, document):
        document["version"] = "one"
        with pytest.raises(SnapshotParseError) as exc_info:
            codec.decode(json.dumps(document))
        assert exc_info.value.field_path == "version"

    def test_numeric_version_is_rejected(self, codec, document):
        document["version"] = 2
        with pytest.raises(SnapshotParseError) as exc_info:
            codec.decode(json.dumps(document))
        assert exc_info.value.field_path == "version"

    def test_non_string_enum_member_is_rejected(self, codec):
        document = {
            "name": "Sales",
            "version": "1.0.0",
            "enums": [{"name": "Level", "typeName": "Sales.Level", "values": {1: 1}}],
        }
        with pytest.raises(SnapshotParseError) as exc_info:
            codec.manifest_from_document(document)
        assert exc_info.value.field_path == "enums[0].values"

    def test_invalid_timestamp(self, codec, document):

        document["createdAt"] = "yesterday"
        with pytest.raises(SnapshotParseError) as exc_info:
            codec.decode(json.dumps(document))
        assert exc_info.value.field_path == "createdAt"

    def test_unknown_rule_severity(self, codec, document):
        document["manifest"]["ruleSets"][0]["rules"][0]["severity"] = "Fatal"
        with pytest.raises(SnapshotParseError) as exc_info:
            codec.decode(json.dumps(document))
        assert exc_info.value.field_path == "manifest.ruleSets[0].rules[0].severity"

    def test_wrong_flag_type(self, codec, document):
        document["manifest"]["entities"][0]["properties"][0]["isRequired"] = "yes"
        with pytest.raises(SnapshotParseError) as exc_info:
            codec.decode(json.dumps(document))
        assert exc_info.value.field_path == "manifest.entities[0].properties[0].isRequired"


class TestTimestamps:
    """Test timestamp rendering."""

    def test_naive_timestamps_are_utc(self):
        assert format_timestamp(datetime(2024, 5, 6, 7, 8, 9)) == "2024-05-06T07:08:09Z"

    def test_offsets_are_normalized_to_utc(self):
        value = datetime(2024, 5, 6, 9, 8, 9, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(value) == "2024-05-06T07:08:09Z"

    def test_document_timestamp_may_be_a_datetime(self, codec):
        created_at = datetime(2024, 5, 6, 9, 8, 9, tzinfo=timezone(timedelta(hours=2)))
        manifest = codec.manifest_from_document(
            {"name": "Sales", "version": "1.0.0", "createdAt": created_at}
        )
        assert manifest.created_at == datetime(2024, 5, 6, 7, 8, 9, tzinfo=UTC)


class TestEmptyText:
    """Test that empty text is kept apart from absent text."""

    def _set_empty_text(self, manifest):
        order = next(e for e in manifest.entities if e.name == "Order")
        order.table_name = ""
        manifest.rule_sets[0].rules[0].expression = ""
        config = manifest.configurations[0]
        config.indexes[0].filter = ""
        config.relationships[0].delete_behavior = ""
        config.property_configurations["Reference"].default_value = ""
        manifest.enums[0].underlying_type = ""

    def test_empty_text_survives_decoding(self, codec, engine, sales_manifest):
        self._set_empty_text(sales_manifest)
        snapshot = codec.create_snapshot(sales_manifest)
        decoded = codec.decode(codec.serialize(snapshot))

        order = next(e for e in decoded.manifest.entities if e.name == "Order")
        assert order.table_name == ""
        assert decoded.manifest.enums[0].underlying_type == ""
        config = decoded.manifest.configurations[0]
        assert config.indexes[0].filter == ""
        assert config.property_configurations["Reference"].default_value == ""
        assert codec.verify(decoded)
        assert not engine.compare(snapshot, decoded).has_changes

    def test_empty_and_absent_text_differ(self, codec, engine, sales_manifest):
        before = codec.create_snapshot(sales_manifest)
        changed = deepcopy(sales_manifest)
        customer = next(e for e in changed.entities if e.name == "Customer")
        customer.schema_name = ""
        after = codec.create_snapshot(changed)

        assert after.hash != before.hash
        assert engine.compare(before, after).has_changes
