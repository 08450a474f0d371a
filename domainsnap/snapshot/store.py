"""File-based snapshot storage.

Snapshots are stored as JSON files, optionally organized in one
subdirectory per domain name. The store performs file I/O and delegates all
encoding and decoding to the SnapshotCodec.

The store provides no file locking: callers must not save the same
(domain name, version) concurrently.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.exceptions import DomainSnapshotError, SnapshotNotFoundError
from ..core.logging import SnapshotOperationLogger, get_logger
from ..core.manifest import DomainManifest, Version
from .codec import SnapshotCodec
from .models import Snapshot

logger = get_logger(__name__)


class SnapshotStoreOptions(BaseModel):
    """Snapshot file layout configuration."""

    model_config = ConfigDict(frozen=True)

    output_directory: Path = Field(
        default=Path("domain-snapshots"),
        description="Base directory for snapshot files",
    )
    organize_by_domain_name: bool = Field(
        default=True, description="Store each domain in its own subdirectory"
    )
    file_name_pattern: str = Field(
        default="v{version}.json",
        description="File name pattern; supports {name}, {version}, "
        "{major}, {minor} and {patch}",
    )
    indented_json: bool = Field(default=True, description="Indent snapshot JSON")
    include_schema: bool = Field(
        default=True, description="Write the $schema reference into snapshot files"
    )

    @field_validator("file_name_pattern")
    @classmethod
    def _pattern_identifies_version(cls, value: str) -> str:
        if "{version}" not in value and not all(
            p in value for p in ("{major}", "{minor}", "{patch}")
        ):
            raise ValueError(
                "file_name_pattern must contain {version} or all of "
                "{major}, {minor} and {patch}"
            )
        return value

    def format_file_name(self, name: str, version: Version) -> str:
        """Format the file name for a snapshot."""
        return (
            self.file_name_pattern.replace("{name}", name)
            .replace("{version}", str(version))
            .replace("{major}", str(version.major))
            .replace("{minor}", str(version.minor))
            .replace("{patch}", str(version.patch))
        )

    def domain_directory(self, name: str) -> Path:
        """Directory holding the snapshots of a domain."""
        if self.organize_by_domain_name:
            return self.output_directory / name
        return self.output_directory

    def file_path(self, name: str, version: Version) -> Path:
        """Full path of a snapshot file."""
        return self.domain_directory(name) / self.format_file_name(name, version)


class SnapshotStore:
    """Persists and loads snapshots as files."""

    def __init__(
        self,
        options: SnapshotStoreOptions | None = None,
        codec: SnapshotCodec | None = None,
    ):
        self.options = options or SnapshotStoreOptions()
        self.codec = codec or SnapshotCodec(
            indented=self.options.indented_json,
            include_schema=self.options.include_schema,
        )

    def save(self, manifest: DomainManifest) -> Snapshot:
        """Snapshot a manifest and write it to its file.

        Returns:
            The created snapshot
        """
        if manifest is None:
            raise ValueError("manifest is required")

        snapshot = self.codec.create_snapshot(manifest)
        self.save_snapshot(snapshot)
        return snapshot

    def save_snapshot(self, snapshot: Snapshot) -> Path:
        """Write an existing snapshot to its file.

        Returns:
            Path of the written file
        """
        if snapshot is None:
            raise ValueError("snapshot is required")

        file_path = self.options.file_path(snapshot.name, snapshot.version)
        with SnapshotOperationLogger(
            logger,
            "save",
            domain=snapshot.name,
            version=str(snapshot.version),
            path=str(file_path),
        ):
            content = self.codec.serialize(snapshot)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content + "\n", encoding="utf-8")

        return file_path

    def load(self, path: str | Path) -> Snapshot:
        """Load a snapshot file.

        Raises:
            SnapshotNotFoundError: If the file does not exist
            SnapshotParseError: If the file is malformed
        """
        if path is None or str(path) == "":
            raise ValueError("path cannot be empty")

        file_path = Path(path)
        if not file_path.is_file():
            raise SnapshotNotFoundError(str(file_path))

        with SnapshotOperationLogger(logger, "load", path=str(file_path)):
            return self.codec.decode(file_path.read_bytes())

    def load_version(self, name: str, version: Version | str) -> Snapshot:
        """Load the stored snapshot of a domain version."""
        return self.load(self.options.file_path(name, _as_version(version)))

    def exists(self, name: str, version: Version | str) -> bool:
        return self.options.file_path(name, _as_version(version)).is_file()

    def list_versions(self, name: str) -> list[Version]:
        """List stored versions of a domain in ascending order.

        Files that cannot be read or belong to another domain are skipped.
        """
        return sorted(self._scan(name))

    def get_latest(self, name: str) -> Snapshot | None:
        """Load the highest stored version of a domain, if any."""
        stored = self._scan(name)
        if not stored:
            return None
        return self.load(stored[max(stored)])

    def delete(self, name: str, version: Version | str) -> bool:
        """Delete a stored snapshot.

        Returns:
            True if a file was deleted, False if none existed
        """
        file_path = self.options.file_path(name, _as_version(version))
        if not file_path.is_file():
            return False

        with SnapshotOperationLogger(
            logger, "delete", domain=name, path=str(file_path)
        ):
            file_path.unlink()
        return True

    def _scan(self, name: str) -> dict[Version, Path]:
        directory = self.options.domain_directory(name)
        if not directory.is_dir():
            return {}

        stored: dict[Version, Path] = {}
        for file_path in sorted(directory.glob("*.json")):
            try:
                snapshot = self.codec.decode(file_path.read_bytes())
            except (OSError, DomainSnapshotError) as e:
                logger.warning(
                    "Skipping unreadable snapshot file",
                    path=str(file_path),
                    error=str(e),
                )
                continue

            if snapshot.name == name:
                stored.setdefault(snapshot.version, file_path)

        return stored


def _as_version(version: Version | str) -> Version:
    return version if isinstance(version, Version) else Version.parse(version)
