"""Migration plan generation.

Turns a DomainDiff into ordered Markdown guidance for moving consumers and
stored data from the before version to the after version. The plan is
derived purely from the diff, so the same diff always yields the same text.
"""

from ..core.logging import get_logger
from .models import (
    AspectChange,
    ChangeRecord,
    DomainDiff,
    EntityChange,
    EnumChange,
    EnumValueChange,
    PropertyChange,
    RelationshipChange,
    ValueObjectChange,
)
from .types import ChangeAspect, ChangeType
from .versioning import SchemaVersionManager, VersionBump

logger = get_logger(__name__)

NO_CHANGES_MESSAGE = "No changes detected. No migration is necessary."

WARNING = "⚠️"

BACKFILL_HINT = (
    "Backfill a default value for existing records before enforcing the "
    "required constraint."
)
ALIAS_HINT = (
    "Rename with a dual-read/alias period so that both the old and new name "
    "resolve until every consumer has moved."
)

RENAME_ASPECTS = {
    ChangeAspect.TYPE,
    ChangeAspect.NAMESPACE,
    ChangeAspect.TABLE_NAME,
    ChangeAspect.SCHEMA_NAME,
}

ASPECT_HINTS = {
    ChangeAspect.KEY_PROPERTIES: (
        "Rebuild the primary key and every foreign key referencing it; "
        "verify existing rows are unique under the new key."
    ),
    ChangeAspect.UNDERLYING_TYPE: (
        "Convert stored enum values to the new underlying type."
    ),
    ChangeAspect.REQUIRED: BACKFILL_HINT,
    ChangeAspect.COLLECTION: (
        "Reshape stored values between single-value and collection form."
    ),
    ChangeAspect.MAX_LENGTH: (
        "Find and fix values that exceed the new limit before applying it."
    ),
    ChangeAspect.PRECISION: (
        "Find and fix values that exceed the new precision before applying it."
    ),
    ChangeAspect.SCALE: (
        "Round or fix values that exceed the new scale before applying it."
    ),
    ChangeAspect.MAPPING: (
        "Migrate the column definition; keep the old column readable during "
        "rollout if it is renamed."
    ),
    ChangeAspect.UNIQUENESS: (
        "Remove duplicate rows before adding the unique constraint."
    ),
    ChangeAspect.VALUE_CODE: (
        "Rewrite stored values from the old code to the new code."
    ),
    ChangeAspect.DEFINITION: (
        "Recreate the relationship and verify referential integrity of "
        "existing rows."
    ),
}

DEFAULT_HINT = "Review the change and update dependent code and data."


def remediation_hint(change: ChangeRecord) -> str:
    """Suggest how to make a breaking change safely."""
    if change.change_type == ChangeType.REMOVED:
        if isinstance(change, EntityChange):
            return "Archive the entity's data before dropping its table."
        if isinstance(change, PropertyChange):
            return (
                "Archive the column's data before dropping it and remove all "
                "code references."
            )
        if isinstance(change, EnumValueChange):
            return "Remap stored values that use the removed member."
        if isinstance(change, ValueObjectChange | EnumChange):
            return "Archive persisted values first and remove all code references."
        if isinstance(change, RelationshipChange):
            return "Migrate dependent rows before dropping the foreign key."

    if change.change_type == ChangeType.ADDED and isinstance(change, PropertyChange):
        return BACKFILL_HINT

    if isinstance(change, PropertyChange) and change.aspect == ChangeAspect.TYPE:
        return (
            "Convert existing values to the new type and verify no data is "
            "lost in the conversion."
        )

    aspect = getattr(change, "aspect", None)
    if isinstance(change, AspectChange) and aspect in RENAME_ASPECTS:
        return ALIAS_HINT
    if aspect in ASPECT_HINTS:
        return ASPECT_HINTS[aspect]
    if isinstance(change, EnumValueChange):
        return ASPECT_HINTS[ChangeAspect.VALUE_CODE]

    return DEFAULT_HINT


class MigrationPlanGenerator:
    """Generates migration plans from domain diffs."""

    def __init__(self, version_manager: SchemaVersionManager | None = None):
        self.version_manager = version_manager or SchemaVersionManager()

    def generate(self, diff: DomainDiff) -> str:
        """Generate a Markdown migration plan.

        Args:
            diff: The diff to generate a plan from

        Returns:
            Markdown migration plan, or a one-line message if nothing changed
        """
        if diff is None:
            raise ValueError("diff is required")

        if not diff.has_changes:
            return NO_CHANGES_MESSAGE

        breaking = diff.breaking_changes()
        non_breaking = diff.non_breaking_changes()

        lines = [
            f"# Migration Plan: {diff.domain} "
            f"{diff.before.version} → {diff.after.version}",
            "",
        ]
        lines.extend(self._summary(diff, len(breaking), len(non_breaking)))

        if breaking:
            lines.extend(["## Breaking Changes", ""])
            lines.append(
                "The following changes may require data migration or code updates:"
            )
            lines.append("")
            for change in breaking:
                lines.append(f"- {WARNING} {change.description}")
                lines.append(f"  - Remediation: {remediation_hint(change)}")
            lines.append("")

        if non_breaking:
            lines.extend(["## Non-Breaking Changes", ""])
            lines.extend(f"- {change.description}" for change in non_breaking)
            lines.append("")

        lines.extend(["## Recommended Actions", ""])
        for index, step in enumerate(self._actions(diff), start=1):
            lines.append(f"{index}. {step[0]}")
            lines.extend(f"   - {item}" for item in step[1])
            lines.append("")

        logger.debug(
            "Migration plan generated",
            domain=diff.domain,
            breaking=len(breaking),
            non_breaking=len(non_breaking),
        )
        return "\n".join(lines).rstrip("\n") + "\n"

    def _summary(self, diff: DomainDiff, breaking: int, non_breaking: int) -> list[str]:
        bump = self.version_manager.required_bump(diff)
        lines = [
            "## Summary",
            "",
            f"- **Total Changes**: {diff.total_changes}",
            f"- **Breaking Changes**: {breaking}",
            f"- **Non-Breaking Changes**: {non_breaking}",
            f"- **Suggested Version Bump**: {bump.value}",
        ]

        warning = self.version_manager.check_diff(diff)
        if warning:
            lines.append(f"- {WARNING} {warning}")

        lines.append("")
        return lines

    def _actions(self, diff: DomainDiff) -> list[tuple[str, list[str]]]:
        """Build the numbered recommended actions as (title, items) pairs."""
        actions = []
        breaking = diff.breaking_changes()

        removals = [c for c in breaking if c.change_type == ChangeType.REMOVED]
        if removals:
            actions.append(
                (
                    "**Back Up Data**: archive data affected by removals",
                    [c.description for c in removals],
                )
            )

        schema_items = self._schema_items(diff)
        if schema_items:
            actions.append(
                ("**Database Schema Migration**: update the storage schema", schema_items)
            )

        backfills = [
            c for c in breaking if remediation_hint(c) == BACKFILL_HINT
        ]
        if backfills:
            actions.append(
                (
                    "**Data Migration**: backfill values before enforcing constraints",
                    [c.description for c in backfills],
                )
            )

        renames = [c for c in breaking if remediation_hint(c) == ALIAS_HINT]
        if renames:
            actions.append(
                (
                    "**Alias Period**: keep old and new names readable during rollout",
                    [c.description for c in renames],
                )
            )

        if breaking:
            actions.append(
                (
                    "**Code Updates**: update consumers for the breaking changes",
                    [f"{c.description}: {remediation_hint(c)}" for c in breaking],
                )
            )

        if diff.rule_set_changes:
            actions.append(
                (
                    "**Validation Rules**: redeploy the changed rule sets",
                    [c.description for c in diff.rule_set_changes],
                )
            )

        bump = self.version_manager.required_bump(diff)
        if bump != VersionBump.NONE:
            suggested = self.version_manager.suggest_version(diff.before.version, bump)
            actions.append(
                (
                    f"**Versioning**: release as version {diff.after.version}",
                    [f"A {bump.value} increment is required (at least {suggested})"],
                )
            )

        actions.append(
            (
                "**Testing**: re-run the full test suite against both manifest "
                f"versions ({diff.before.version} and {diff.after.version})",
                [],
            )
        )
        return actions

    def _schema_items(self, diff: DomainDiff) -> list[str]:
        items = []

        for entity in diff.entity_changes:
            name = entity.entity_name
            if entity.change_type == ChangeType.ADDED:
                items.append(f"Create table for `{name}`")
            elif entity.change_type == ChangeType.REMOVED:
                items.append(f"Drop table for `{name}`")
            for prop in entity.property_changes:
                if prop.change_type == ChangeType.ADDED:
                    items.append(f"Add column `{prop.property_name}` to `{name}`")
                elif prop.change_type == ChangeType.REMOVED:
                    items.append(f"Drop column `{prop.property_name}` from `{name}`")
                elif prop.is_breaking:
                    items.append(f"Alter column `{prop.property_name}` in `{name}`")

        for configuration in diff.configuration_changes:
            items.extend(index.description for index in configuration.index_changes)
            for aspect in configuration.aspect_changes:
                if aspect.is_breaking:
                    items.append(aspect.description)

        return items
