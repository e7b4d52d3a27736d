"""Core configuration and utilities for campaign-fields."""

from campaign_fields.core.config import settings
from campaign_fields.core.logging import setup_logging

__all__ = ["settings", "setup_logging"]
