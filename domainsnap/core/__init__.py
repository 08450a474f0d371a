"""Core manifest model, exceptions and logging."""

from .exceptions import (
    DomainSnapshotError,
    ManifestNotFoundError,
    ManifestValidationError,
    SnapshotNotFoundError,
    SnapshotParseError,
)
from .logging import (
    SnapshotOperationLogger,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)
from .manifest import (
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

__all__ = [
    # Manifest model
    "DEFAULT_ENUM_UNDERLYING_TYPE",
    "ConfigurationManifest",
    "DomainManifest",
    "EntityManifest",
    "EnumManifest",
    "IndexManifest",
    "PropertyConfigurationManifest",
    "PropertyManifest",
    "RelationshipManifest",
    "RuleManifest",
    "RuleSetManifest",
    "RuleSeverity",
    "SourceInfo",
    "ValueObjectManifest",
    "Version",
    # Exceptions
    "DomainSnapshotError",
    "ManifestNotFoundError",
    "ManifestValidationError",
    "SnapshotNotFoundError",
    "SnapshotParseError",
    # Logging
    "SnapshotOperationLogger",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
]
