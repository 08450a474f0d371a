"""Breaking-change classification policy.

The classifier is a pure, total function from (element kind, change type,
aspect) to a breaking verdict. Combinations missing from the policy table
are classified as breaking.
"""

from collections.abc import Callable
from typing import Any

from ..core.logging import get_logger
from .types import ChangeAspect, ChangeType, ElementKind

logger = get_logger(__name__)

Verdict = bool | Callable[[Any, Any], bool]

ANY_ASPECT = "*"

ADDED = ChangeType.ADDED
REMOVED = ChangeType.REMOVED
MODIFIED = ChangeType.MODIFIED


def _tightened(old: Any, new: Any) -> bool:
    """A flag went from off to on (optional -> required, non-unique -> unique)."""
    return not old and bool(new)


def _narrowed(old: Any, new: Any) -> bool:
    """A size limit was introduced or lowered."""
    if new is None:
        return False
    return old is None or int(new) < int(old)


BREAKING_POLICY: dict[tuple[ElementKind, ChangeType, Any], Verdict] = {
    # Entities
    (ElementKind.ENTITY, ADDED, None): False,
    (ElementKind.ENTITY, REMOVED, None): True,
    (ElementKind.ENTITY, MODIFIED, ChangeAspect.KEY_PROPERTIES): True,
    (ElementKind.ENTITY, MODIFIED, ChangeAspect.TABLE_NAME): True,
    (ElementKind.ENTITY, MODIFIED, ChangeAspect.SCHEMA_NAME): True,
    (ElementKind.ENTITY, MODIFIED, ChangeAspect.TYPE): True,
    (ElementKind.ENTITY, MODIFIED, ChangeAspect.NAMESPACE): True,
    (ElementKind.ENTITY, MODIFIED, ChangeAspect.METADATA): False,
    # Value objects
    (ElementKind.VALUE_OBJECT, ADDED, None): False,
    (ElementKind.VALUE_OBJECT, REMOVED, None): True,
    (ElementKind.VALUE_OBJECT, MODIFIED, ChangeAspect.TYPE): True,
    (ElementKind.VALUE_OBJECT, MODIFIED, ChangeAspect.NAMESPACE): True,
    (ElementKind.VALUE_OBJECT, MODIFIED, ChangeAspect.METADATA): False,
    # Enums and their members
    (ElementKind.ENUM, ADDED, None): False,
    (ElementKind.ENUM, REMOVED, None): True,
    (ElementKind.ENUM, MODIFIED, ChangeAspect.UNDERLYING_TYPE): True,
    (ElementKind.ENUM, MODIFIED, ChangeAspect.TYPE): True,
    (ElementKind.ENUM, MODIFIED, ChangeAspect.NAMESPACE): True,
    (ElementKind.ENUM, MODIFIED, ChangeAspect.METADATA): False,
    (ElementKind.ENUM_VALUE, ADDED, None): False,
    (ElementKind.ENUM_VALUE, REMOVED, None): True,
    (ElementKind.ENUM_VALUE, MODIFIED, ChangeAspect.VALUE_CODE): True,
    # Properties
    (ElementKind.PROPERTY, ADDED, None): lambda _old, is_required: bool(is_required),
    (ElementKind.PROPERTY, REMOVED, None): True,
    (ElementKind.PROPERTY, MODIFIED, ChangeAspect.TYPE): True,
    (ElementKind.PROPERTY, MODIFIED, ChangeAspect.REQUIRED): _tightened,
    (ElementKind.PROPERTY, MODIFIED, ChangeAspect.COLLECTION): True,
    (ElementKind.PROPERTY, MODIFIED, ChangeAspect.MAX_LENGTH): _narrowed,
    (ElementKind.PROPERTY, MODIFIED, ChangeAspect.PRECISION): _narrowed,
    (ElementKind.PROPERTY, MODIFIED, ChangeAspect.SCALE): _narrowed,
    (ElementKind.PROPERTY, MODIFIED, ChangeAspect.CONCURRENCY_TOKEN): False,
    (ElementKind.PROPERTY, MODIFIED, ChangeAspect.COMPUTED): False,
    (ElementKind.PROPERTY, MODIFIED, ChangeAspect.METADATA): False,
    # Rules never break structure
    (ElementKind.RULE_SET, ADDED, None): False,
    (ElementKind.RULE_SET, REMOVED, None): False,
    (ElementKind.RULE_SET, MODIFIED, ANY_ASPECT): False,
    (ElementKind.RULE, ADDED, None): False,
    (ElementKind.RULE, REMOVED, None): False,
    (ElementKind.RULE, MODIFIED, ANY_ASPECT): False,
    # Persistence configuration
    (ElementKind.CONFIGURATION, ADDED, None): False,
    (ElementKind.CONFIGURATION, REMOVED, None): False,
    (ElementKind.CONFIGURATION, MODIFIED, ChangeAspect.TABLE_NAME): True,
    (ElementKind.CONFIGURATION, MODIFIED, ChangeAspect.SCHEMA_NAME): True,
    (ElementKind.CONFIGURATION, MODIFIED, ChangeAspect.KEY_PROPERTIES): True,
    (ElementKind.CONFIGURATION, MODIFIED, ChangeAspect.TYPE): True,
    (ElementKind.CONFIGURATION, MODIFIED, ChangeAspect.METADATA): False,
    (ElementKind.PROPERTY_MAPPING, ADDED, None): False,
    (ElementKind.PROPERTY_MAPPING, REMOVED, None): False,
    (ElementKind.PROPERTY_MAPPING, MODIFIED, ChangeAspect.MAPPING): True,
    (ElementKind.INDEX, ADDED, None): False,
    (ElementKind.INDEX, REMOVED, None): False,
    (ElementKind.INDEX, MODIFIED, ChangeAspect.UNIQUENESS): _tightened,
    (ElementKind.INDEX, MODIFIED, ChangeAspect.DEFINITION): False,
    (ElementKind.RELATIONSHIP, ADDED, None): False,
    (ElementKind.RELATIONSHIP, REMOVED, None): True,
    (ElementKind.RELATIONSHIP, MODIFIED, ChangeAspect.REQUIRED): _tightened,
    (ElementKind.RELATIONSHIP, MODIFIED, ChangeAspect.DEFINITION): True,
}


class BreakingChangeClassifier:
    """Decides whether a structural change is breaking.

    Relaxing a constraint (required -> optional, wider max length) cannot
    invalidate existing data or callers; tightening it can.
    """

    def __init__(
        self, policy: dict[tuple[ElementKind, ChangeType, Any], Verdict] | None = None
    ):
        self.policy = BREAKING_POLICY if policy is None else policy

    def classify(
        self,
        kind: ElementKind,
        change_type: ChangeType,
        aspect: ChangeAspect | None = None,
        old: Any = None,
        new: Any = None,
    ) -> bool:
        """Classify a change.

        Args:
            kind: Kind of element that changed
            change_type: Added, Removed or Modified
            aspect: Field that changed, for modifications
            old: Previous value of the field (or flag relevant to the verdict)
            new: New value of the field (or flag relevant to the verdict)

        Returns:
            True if the change is breaking; unknown combinations are breaking
        """
        verdict = self.policy.get((kind, change_type, aspect))
        if verdict is None:
            verdict = self.policy.get((kind, change_type, ANY_ASPECT))

        if verdict is None:
            logger.debug(
                "Unclassified change treated as breaking",
                kind=kind.value,
                change_type=change_type.value,
                aspect=aspect.value if aspect else None,
            )
            return True

        if callable(verdict):
            return bool(verdict(old, new))
        return verdict

    def is_entity_removal_breaking(self) -> bool:
        return self.classify(ElementKind.ENTITY, REMOVED)

    def is_property_addition_breaking(self, is_required: bool) -> bool:
        return self.classify(ElementKind.PROPERTY, ADDED, new=is_required)

    def is_required_change_breaking(self, was_required: bool, is_required: bool) -> bool:
        return self.classify(
            ElementKind.PROPERTY,
            MODIFIED,
            ChangeAspect.REQUIRED,
            old=was_required,
            new=is_required,
        )
