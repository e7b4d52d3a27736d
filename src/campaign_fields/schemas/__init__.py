"""Pydantic schemas for campaign-fields."""

from campaign_fields.schemas.computed_field import ComputedFieldConfig

__all__ = ["ComputedFieldConfig"]
