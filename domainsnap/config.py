"""Configuration management for domainsnap.

Settings are read from environment variables prefixed with ``DOMAINSNAP_``
(for example ``DOMAINSNAP_SNAPSHOT_DIR``) using Pydantic Settings.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .snapshot.store import SnapshotStoreOptions


class DomainSnapSettings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(env_prefix="DOMAINSNAP_", case_sensitive=False)

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Enable JSON formatted logs")

    # Snapshot storage
    snapshot_dir: Path = Field(
        default=Path("domain-snapshots"),
        description="Base directory for snapshot files",
    )
    organize_by_domain_name: bool = Field(
        default=True, description="Store each domain in its own subdirectory"
    )
    file_name_pattern: str = Field(
        default="v{version}.json", description="Snapshot file name pattern"
    )
    indented_json: bool = Field(default=True, description="Indent snapshot JSON")
    include_schema: bool = Field(
        default=True, description="Write the $schema reference into snapshot files"
    )

    def store_options(self, output_directory: Path | None = None) -> SnapshotStoreOptions:
        """Create snapshot store options from these settings.

        Args:
            output_directory: Overrides ``snapshot_dir`` when given
        """
        return SnapshotStoreOptions(
            output_directory=output_directory or self.snapshot_dir,
            organize_by_domain_name=self.organize_by_domain_name,
            file_name_pattern=self.file_name_pattern,
            indented_json=self.indented_json,
            include_schema=self.include_schema,
        )
