"""Type definitions for the diff system."""

from enum import Enum


class ChangeType(str, Enum):
    """Kinds of structural change between two manifests."""

    ADDED = "Added"
    REMOVED = "Removed"
    MODIFIED = "Modified"


class ElementKind(str, Enum):
    """Kinds of manifest elements a change can apply to."""

    ENTITY = "entity"
    VALUE_OBJECT = "value_object"
    ENUM = "enum"
    ENUM_VALUE = "enum_value"
    PROPERTY = "property"
    RULE_SET = "rule_set"
    RULE = "rule"
    CONFIGURATION = "configuration"
    PROPERTY_MAPPING = "property_mapping"
    INDEX = "index"
    RELATIONSHIP = "relationship"


class ChangeAspect(str, Enum):
    """The field of an element that a modification touches."""

    TYPE = "type"
    NAMESPACE = "namespace"
    METADATA = "metadata"
    REQUIRED = "required"
    COLLECTION = "collection"
    MAX_LENGTH = "max_length"
    PRECISION = "precision"
    SCALE = "scale"
    CONCURRENCY_TOKEN = "concurrency_token"
    COMPUTED = "computed"
    KEY_PROPERTIES = "key_properties"
    TABLE_NAME = "table_name"
    SCHEMA_NAME = "schema_name"
    UNDERLYING_TYPE = "underlying_type"
    VALUE_CODE = "value_code"
    TARGET_TYPE = "target_type"
    INCLUDES = "includes"
    DEFINITION = "definition"
    UNIQUENESS = "uniqueness"
    MAPPING = "mapping"
