"""domainsnap - Versioned domain manifests, snapshots and breaking-change diffs."""

__version__ = "0.1.0"

# CLI components are imported on demand

__all__ = [
    "__version__",
]
