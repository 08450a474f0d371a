"""Snapshot data structures."""

from dataclasses import dataclass, field
from datetime import datetime

from ..core.manifest import DomainManifest, Version

SNAPSHOT_SCHEMA_URI = "https://domainsnap.dev/schemas/snapshot-v1.json"


@dataclass(frozen=True)
class Snapshot:
    """Immutable, hashed capture of a domain manifest.

    The hash is a pure function of the manifest's canonical content. A new
    manifest state always requires a new Snapshot. Equality and hashing use
    the identity fields and the content hash, never the mutable manifest.
    """

    name: str
    version: Version
    hash: str
    created_at: datetime
    manifest: DomainManifest = field(compare=False)

    @classmethod
    def create(cls, manifest: DomainManifest, content_hash: str) -> "Snapshot":
        """Wrap a manifest and its precomputed content hash.

        Raises:
            ValueError: If the manifest is missing or the hash is empty
        """
        if manifest is None:
            raise ValueError("manifest is required")
        if not content_hash:
            raise ValueError("hash cannot be empty")

        return cls(
            name=manifest.name,
            version=manifest.version,
            hash=content_hash,
            created_at=manifest.created_at,
            manifest=manifest,
        )
