"""Field type metadata and alias normalization."""

from enum import Enum


class FieldType(str, Enum):
    """Field types an entity type definition may declare."""

    TEXT = "text"
    TEXTAREA = "textarea"
    RICHTEXT = "richtext"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECT = "select"
    MULTI_SELECT = "multi-select"
    TAGS = "tags"
    ENTITY_REF = "entity-ref"
    ENTITY_REFS = "entity-refs"
    DATE = "date"
    URL = "url"
    IMAGE = "image"
    COMPUTED = "computed"


# Human-readable labels, categories, and descriptions for UI and documentation
FIELD_TYPE_METADATA: dict[FieldType, dict[str, str]] = {
    FieldType.TEXT: {
        "label": "Text",
        "category": "Basic",
        "description": "Single line text input for short text values",
    },
    FieldType.TEXTAREA: {
        "label": "Text Area",
        "category": "Text",
        "description": "Multi-line text input for longer text values",
    },
    FieldType.RICHTEXT: {
        "label": "Rich Text",
        "category": "Text",
        "description": "Markdown-enabled rich text editor for formatted content",
    },
    FieldType.NUMBER: {
        "label": "Number",
        "category": "Basic",
        "description": "Numeric input for integer or decimal values",
    },
    FieldType.BOOLEAN: {
        "label": "Boolean",
        "category": "Basic",
        "description": "Checkbox for true/false values",
    },
    FieldType.SELECT: {
        "label": "Select",
        "category": "Selection",
        "description": "Dropdown menu for selecting a single option from a list",
    },
    FieldType.MULTI_SELECT: {
        "label": "Multi-Select",
        "category": "Selection",
        "description": "Multiple selection from a list of options",
    },
    FieldType.TAGS: {
        "label": "Tags",
        "category": "Selection",
        "description": "Tag input for creating and selecting multiple tags",
    },
    FieldType.ENTITY_REF: {
        "label": "Entity Reference",
        "category": "Reference",
        "description": "Reference to a single entity in the database",
    },
    FieldType.ENTITY_REFS: {
        "label": "Entity References",
        "category": "Reference",
        "description": "References to multiple entities in the database",
    },
    FieldType.DATE: {
        "label": "Date",
        "category": "Special",
        "description": "Date picker for selecting dates",
    },
    FieldType.URL: {
        "label": "URL",
        "category": "Special",
        "description": "URL input with validation and link preview",
    },
    FieldType.IMAGE: {
        "label": "Image",
        "category": "Special",
        "description": "Image upload and display",
    },
    FieldType.COMPUTED: {
        "label": "Computed",
        "category": "Advanced",
        "description": "Calculated field based on formula and other field values",
    },
}

_ALIASES = {
    "short-text": FieldType.TEXT.value,
    "long-text": FieldType.TEXTAREA.value,
}


def normalize_field_type(field_type: str) -> str:
    """
    Convert a field type alias to its canonical type.

    ``short-text`` becomes ``text`` and ``long-text`` becomes ``textarea``,
    in any letter case. Anything else, including custom types, is returned
    unchanged.

    Args:
        field_type: Field type name, possibly an alias

    Returns:
        The canonical field type name
    """
    return _ALIASES.get(field_type.lower(), field_type)
