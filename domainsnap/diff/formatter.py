"""Markdown and JSON rendering of a DomainDiff."""

from dataclasses import fields
from enum import Enum
import json
from typing import Any

from .models import ChangeRecord, DomainDiff
from .types import ChangeType

CHANGE_ICONS = {
    ChangeType.ADDED: "✅",
    ChangeType.REMOVED: "❌",
    ChangeType.MODIFIED: "📝",
}
BREAKING_ICON = "⚠️"

CATEGORY_TITLES = (
    ("entity_changes", "Entity Changes"),
    ("value_object_changes", "Value Object Changes"),
    ("enum_changes", "Enum Changes"),
    ("rule_set_changes", "Rule Set Changes"),
    ("configuration_changes", "Configuration Changes"),
)


def change_icon(change: ChangeRecord) -> str:
    if change.is_breaking:
        return BREAKING_ICON
    return CHANGE_ICONS.get(change.change_type, "•")


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def change_to_document(change: ChangeRecord) -> dict[str, Any]:
    """Convert a change record (and its nested records) to a JSON document.

    Fields without a value are omitted.
    """
    document: dict[str, Any] = {}

    for f in fields(change):
        value = getattr(change, f.name)
        if value is None:
            continue
        if isinstance(value, tuple):
            value = [change_to_document(nested) for nested in value]
        elif isinstance(value, Enum):
            value = value.value
        document[_camel_case(f.name)] = value

    return document


class DiffFormatter:
    """Formats diff results as Markdown or JSON."""

    def format_as_markdown(self, diff: DomainDiff) -> str:
        """Format a diff as Markdown.

        Args:
            diff: The diff to format

        Returns:
            Markdown text
        """
        if diff is None:
            raise ValueError("diff is required")

        lines = [
            f"# Domain Diff: {diff.domain}",
            "",
            f"Version: {diff.before.version} → {diff.after.version}",
            f"Total Changes: {diff.total_changes}",
            f"Breaking Changes: {'Yes' if diff.has_breaking_changes else 'No'}",
            "",
        ]

        if diff.has_breaking_changes:
            lines.extend(["## Breaking Changes", ""])
            lines.extend(
                f"- {BREAKING_ICON} {d}" for d in diff.breaking_change_descriptions
            )
            lines.append("")

        for attribute, title in CATEGORY_TITLES:
            changes = getattr(diff, attribute)
            if not changes:
                continue

            lines.extend([f"## {title}", ""])
            for change in changes:
                lines.append(f"- {change_icon(change)} {change.description}")
                for nested in change.nested_changes:
                    lines.append(f"  - {change_icon(nested)} {nested.description}")
            lines.append("")

        if not diff.has_changes:
            lines.append("No changes detected.")

        return "\n".join(lines).rstrip("\n") + "\n"

    def format_as_json(self, diff: DomainDiff, indented: bool = True) -> str:
        """Format a diff as JSON.

        Args:
            diff: The diff to format
            indented: Whether to indent the JSON

        Returns:
            JSON text
        """
        if diff is None:
            raise ValueError("diff is required")

        document = {
            "domain": diff.domain,
            "beforeVersion": str(diff.before.version),
            "afterVersion": str(diff.after.version),
            "beforeHash": diff.before.hash,
            "afterHash": diff.after.hash,
            "totalChanges": diff.total_changes,
            "hasBreakingChanges": diff.has_breaking_changes,
            "breakingChangeDescriptions": diff.breaking_change_descriptions,
        }
        for attribute, _title in CATEGORY_TITLES:
            document[_camel_case(attribute)] = [
                change_to_document(change) for change in getattr(diff, attribute)
            ]

        return json.dumps(
            document, indent=2 if indented else None, ensure_ascii=False
        )
