"""Field type handlers and metadata for campaign-fields.

Only computed fields carry behavior here; the other field types are plain
values owned by the entity layer and are described by FIELD_TYPE_METADATA.
"""

from campaign_fields.fields.base import BaseFieldTypeHandler
from campaign_fields.fields.metadata import FIELD_TYPE_METADATA, FieldType, normalize_field_type
from campaign_fields.fields.types.computed import ComputedFieldHandler

# Registry of field type handlers
FIELD_HANDLERS: dict[str, type[BaseFieldTypeHandler]] = {
    ComputedFieldHandler.field_type: ComputedFieldHandler,
}


def get_field_handler(field_type: str) -> type[BaseFieldTypeHandler] | None:
    """
    Get the handler class for a field type, resolving aliases.

    Args:
        field_type: Field type name or alias

    Returns:
        Handler class, or None for types without behavior of their own
    """
    return FIELD_HANDLERS.get(normalize_field_type(field_type))


__all__ = [
    "BaseFieldTypeHandler",
    "ComputedFieldHandler",
    "FIELD_HANDLERS",
    "FIELD_TYPE_METADATA",
    "FieldType",
    "get_field_handler",
    "normalize_field_type",
]
