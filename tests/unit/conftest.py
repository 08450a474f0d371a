"""Shared fixtures for the domainsnap unit tests."""

from datetime import UTC, datetime

import pytest

from domainsnap.core import (
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
from domainsnap.diff import DiffEngine
from domainsnap.snapshot import SnapshotCodec


@pytest.fixture
def sales_manifest():
    """Sales domain version 1.0.0 touching every manifest collection."""
    return DomainManifest(
        name="Sales",
        version=Version(1, 0, 0),
        entities=[
            EntityManifest(
                name="Order",
                type_name="Sales.Domain.Order",
                namespace="Sales.Domain",
                properties=[
                    PropertyManifest(name="Id", type_name="Guid", is_required=True),
                    PropertyManifest(name="Reference", type_name="String", max_length=50),
                    PropertyManifest(
                        name="Total",
                        type_name="Decimal",
                        is_required=True,
                        precision=18,
                        scale=2,
                    ),
                    PropertyManifest(name="Lines", type_name="OrderLine", is_collection=True),
                ],
                key_properties=["Id"],
                table_name="Orders",
                schema_name="sales",
            ),
            EntityManifest(
                name="Customer",
                type_name="Sales.Domain.Customer",
                namespace="Sales.Domain",
                properties=[
                    PropertyManifest(name="Id", type_name="Guid", is_required=True),
                    PropertyManifest(name="Email", type_name="String", max_length=256),
                ],
                key_properties=["Id"],
                table_name="Customers",
            ),
        ],
        value_objects=[
            ValueObjectManifest(
                name="Money",
                type_name="Sales.Domain.Money",
                properties=[
                    PropertyManifest(name="Amount", type_name="Decimal", is_required=True),
                    PropertyManifest(name="Currency", type_name="String", max_length=3),
                ],
            )
        ],
        enums=[
            EnumManifest(
                name="OrderStatus",
                type_name="Sales.Domain.OrderStatus",
                values={"Pending": 0, "Shipped": 1, "Cancelled": 2},
            )
        ],
        rule_sets=[
            RuleSetManifest(
                name="OrderRules",
                target_type="Order",
                rules=[
                    RuleManifest(
                        id="TotalPositive",
                        category="Invariant",
                        target_type="Order",
                        message="Total must be positive",
                        tags=["money", "core"],
                    ),
                    RuleManifest(
                        id="ReferenceFormat",
                        category="Validation",
                        target_type="Order",
                        severity=RuleSeverity.WARNING,
                    ),
                ],
            )
        ],
        configurations=[
            ConfigurationManifest(
                entity_name="Order",
                entity_type_name="Sales.Domain.Order",
                table_name="Orders",
                schema_name="sales",
                key_properties=["Id"],
                property_configurations={
                    "Reference": PropertyConfigurationManifest(
                        property_name="Reference",
                        column_name="reference",
                        max_length=50,
                    ),
                },
                indexes=[IndexManifest(name="IX_Order_Reference", properties=["Reference"])],
                relationships=[
                    RelationshipManifest(
                        principal_entity="Customer",
                        dependent_entity="Order",
                        relationship_type="OneToMany",
                        principal_navigation="Orders",
                        foreign_key_properties=["CustomerId"],
                    )
                ],
            )
        ],
        sources=[
            SourceInfo(
                type="assembly",
                location="Sales.Domain.dll",
                timestamp=datetime(2024, 1, 1, tzinfo=UTC),
            )
        ],
        metadata={"owner": "sales-team"},
        created_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC),
    )


@pytest.fixture
def codec():
    return SnapshotCodec()


@pytest.fixture
def engine():
    return DiffEngine()


@pytest.fixture
def snapshot_of(codec):
    """Create a snapshot from a manifest, optionally at another version."""

    def _snapshot_of(manifest, version=None):
        if version is not None:
            manifest.version = Version.parse(version)
        return codec.create_snapshot(manifest)

    return _snapshot_of


@pytest.fixture
def full_sales_manifest(sales_manifest):
    """Sales manifest with at least two members in every named collection."""
    manifest = sales_manifest
    manifest.entities[0].metadata = {"aggregate": "root", "audited": True}
    manifest.value_objects.append(
        ValueObjectManifest(
            name="Address",
            type_name="Sales.Domain.Address",
            properties=[
                PropertyManifest(name="Street", type_name="String", max_length=200),
                PropertyManifest(name="City", type_name="String", is_required=True),
            ],
        )
    )
    manifest.enums.append(
        EnumManifest(
            name="PaymentMethod",
            type_name="Sales.Domain.PaymentMethod",
            underlying_type="byte",
            values={"Card": 1, "Invoice": 2},
        )
    )
    manifest.rule_sets[0].includes = ["CommonRules", "AuditRules"]
    manifest.rule_sets.append(
        RuleSetManifest(
            name="CustomerRules",
            target_type="Customer",
            rules=[
                RuleManifest(
                    id="EmailRequired",
                    category="Validation",
                    target_type="Customer",
                    expression="Email != null",
                ),
                RuleManifest(
                    id="EmailUnique",
                    category="Invariant",
                    target_type="Customer",
                    tags=["identity", "core"],
                ),
            ],
            includes=["CommonRules", "ContactRules"],
        )
    )

    order_config = manifest.configurations[0]
    order_config.property_configurations["Total"] = PropertyConfigurationManifest(
        property_name="Total",
        column_type="decimal(18,2)",
        is_required=True,
        precision=18,
        scale=2,
    )
    order_config.indexes.append(
        IndexManifest(
            name="IX_Order_Total",
            properties=["Total", "Id"],
            is_unique=True,
            filter="[Total] > 0",
            included_properties=["Reference", "Lines"],
        )
    )
    order_config.relationships.append(
        RelationshipManifest(
            principal_entity="Order",
            dependent_entity="OrderLine",
            relationship_type="OneToMany",
            principal_navigation="Lines",
            foreign_key_properties=["OrderId", "OrderVersion"],
            is_required=True,
            delete_behavior="Cascade",
        )
    )
    manifest.configurations.append(
        ConfigurationManifest(
            entity_name="Customer",
            entity_type_name="Sales.Domain.Customer",
            table_name="Customers",
            key_properties=["Id"],
            property_configurations={
                "Email": PropertyConfigurationManifest(
                    property_name="Email", column_name="email", is_unicode=False
                ),
                "Id": PropertyConfigurationManifest(
                    property_name="Id", value_generated="OnAdd"
                ),
            },
            indexes=[
                IndexManifest(name="IX_Customer_Email", properties=["Email"], is_unique=True),
                IndexManifest(properties=["Id", "Email"]),
            ],
            relationships=[
                RelationshipManifest(
                    principal_entity="Customer",
                    dependent_entity="Order",
                    relationship_type="OneToMany",
                    principal_navigation="Orders",
                    dependent_navigation="Customer",
                    foreign_key_properties=["CustomerId"],
                ),
                RelationshipManifest(
                    principal_entity="Customer",
                    dependent_entity="Order",
                    relationship_type="OneToMany",
                    principal_navigation="ArchivedOrders",
                    foreign_key_properties=["ArchivedCustomerId"],
                    delete_behavior="SetNull",
                ),
            ],
        )
    )
    manifest.sources.append(
        SourceInfo(
            type="assembly",
            location="Sales.Contracts.dll",
            timestamp=datetime(2024, 1, 1, 12, tzinfo=UTC),
            metadata={"framework": "net8.0", "configuration": "Release"},
        )
    )
    manifest.metadata["team"] = "checkout"
    return manifest
