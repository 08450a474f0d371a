"""Semantic version checks for domain changes.

Breaking changes call for a major version increment, other changes for a
minor increment.
"""

from enum import Enum

from ..core.manifest import Version
from .models import DomainDiff


class VersionBump(str, Enum):
    """Smallest version increment a set of changes calls for."""

    MAJOR = "major"
    MINOR = "minor"
    NONE = "none"


class SchemaVersionManager:
    """Manages domain version increments."""

    def required_bump(self, diff: DomainDiff) -> VersionBump:
        """Determine the version increment a diff calls for.

        Args:
            diff: Diff between two snapshots

        Returns:
            MAJOR for breaking changes, MINOR for other changes, NONE otherwise
        """
        if diff.has_breaking_changes:
            return VersionBump.MAJOR
        if diff.has_changes:
            return VersionBump.MINOR
        return VersionBump.NONE

    def suggest_version(self, current: Version | str, bump: VersionBump) -> Version:
        """Next version after applying an increment."""
        version = self._parse_version(current)

        if bump == VersionBump.MAJOR:
            return Version(version.major + 1, 0, 0)
        if bump == VersionBump.MINOR:
            return Version(version.major, version.minor + 1, 0)
        return version

    def is_valid_version_increment(
        self, old_version: Version | str, new_version: Version | str, additive_only: bool
    ) -> bool:
        """Check if version increment is valid for the type of changes.

        A major increment is always valid. Within the same major version only
        non-breaking changes are allowed, with a minor or patch increment.

        Args:
            old_version: Previous version (e.g., "1.0.0")
            new_version: New version (e.g., "1.1.0")
            additive_only: True if no breaking changes were made

        Returns:
            True if version increment is appropriate
        """
        old = self._parse_version(old_version)
        new = self._parse_version(new_version)

        if new.major > old.major:
            return True

        # Same major version only holds non-breaking changes
        if new.major == old.major and additive_only:
            return new.minor > old.minor or (
                new.minor == old.minor and new.patch > old.patch
            )

        return False

    def check_diff(self, diff: DomainDiff) -> str | None:
        """Describe a version mismatch between a diff and its snapshots.

        Returns:
            A warning message, or None if the after-version reflects the changes
        """
        bump = self.required_bump(diff)
        if bump == VersionBump.NONE:
            return None

        before, after = diff.before.version, diff.after.version
        if self.is_valid_version_increment(
            before, after, additive_only=bump != VersionBump.MAJOR
        ):
            return None

        suggested = self.suggest_version(before, bump)
        return (
            f"Version {after} does not reflect {bump.value} changes since "
            f"{before}; expected at least {suggested}"
        )

    def _parse_version(self, version: Version | str) -> Version:
        if isinstance(version, Version):
            return version
        return Version.parse(version)
