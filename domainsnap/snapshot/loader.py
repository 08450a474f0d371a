"""Manifest loading from JSON and YAML files.

Manifest files use the same camelCase shape as the ``manifest`` object of a
stored snapshot, so a manifest exported by an external producer and the
manifest embedded in a snapshot are read by the same parser.
"""

import json
from pathlib import Path
import re
from typing import Any

import yaml

from ..core.exceptions import ManifestNotFoundError, SnapshotParseError
from ..core.logging import get_logger
from ..core.manifest import DomainManifest
from .codec import SnapshotCodec

logger = get_logger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}

_UNTYPED_TAGS = {
    "tag:yaml.org,2002:bool",
    "tag:yaml.org,2002:float",
    "tag:yaml.org,2002:timestamp",
}


class ManifestLoader(yaml.SafeLoader):
    """SafeLoader with YAML 1.2 style scalars.

    Only ``true`` and ``false`` resolve to booleans, so enum members such as
    ``Yes`` or ``Off`` stay strings. Floats and timestamps are not resolved:
    ``version: 1.10`` stays ``"1.10"`` and ``createdAt`` keeps its text for
    the timestamp parser.
    """


ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _UNTYPED_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ManifestLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def read_document(path: Path) -> dict[str, Any]:
    """Read a JSON or YAML document into a dictionary.

    Args:
        path: File to read; the suffix selects the parser

    Returns:
        Parsed top-level mapping

    Raises:
        SnapshotParseError: If the file cannot be parsed or is not a mapping
    """
    text = path.read_text(encoding="utf-8")

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.load(text, Loader=ManifestLoader)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SnapshotParseError(f"Failed to parse '{path}': {e}", cause=e) from e

    if not isinstance(data, dict):
        raise SnapshotParseError(
            f"Expected a mapping at the top level of '{path}'", field_path="$"
        )

    return data


def load_manifest(path: str | Path) -> DomainManifest:
    """Load a domain manifest from a ``.json``, ``.yaml`` or ``.yml`` file.

    Args:
        path: Path to the manifest file

    Returns:
        Parsed DomainManifest

    Raises:
        ManifestNotFoundError: If the file does not exist
        SnapshotParseError: If the file is malformed or misses required fields
    """
    manifest_path = Path(path)
    if not manifest_path.is_file():
        raise ManifestNotFoundError(str(manifest_path))

    data = read_document(manifest_path)
    manifest = SnapshotCodec().manifest_from_document(data)

    logger.debug(
        "Manifest loaded",
        path=str(manifest_path),
        domain=manifest.name,
        version=str(manifest.version),
        entities=len(manifest.entities),
    )
    return manifest
