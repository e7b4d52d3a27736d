"""Base class for field type handlers."""

from abc import ABC, abstractmethod
from typing import Any


class BaseFieldTypeHandler(ABC):
    """
    Base class for field type handlers.

    A handler owns one field type of an entity type definition: how its
    configuration or value is stored, loaded and checked. Handlers are
    stateless; every method is a classmethod.
    """

    field_type: str

    @classmethod
    @abstractmethod
    def serialize(cls, value: Any) -> Any:
        """
        Convert Python value to a storable format.

        Args:
            value: Python value to serialize

        Returns:
            Storable value (JSON-serializable)
        """
        pass

    @classmethod
    @abstractmethod
    def deserialize(cls, value: Any) -> Any:
        """
        Convert a stored value to Python format.

        Args:
            value: Stored value to deserialize

        Returns:
            Python value
        """
        pass

    @classmethod
    @abstractmethod
    def validate(cls, value: Any, options: dict[str, Any] | None = None) -> bool:
        """
        Validate value against field type requirements.

        Args:
            value: Value to validate
            options: Field type-specific options

        Returns:
            True if valid

        Raises:
            CampaignFieldsException: If validation fails
        """
        pass

    @classmethod
    @abstractmethod
    def default(cls) -> Any:
        """
        Get default value for field type.

        Returns:
            Default value (JSON-serializable)
        """
        pass

    @classmethod
    def is_computed(cls) -> bool:
        """Whether values of this type are derived rather than entered."""
        return False

    @classmethod
    def is_read_only(cls) -> bool:
        """Whether users may edit values of this type directly."""
        return False
