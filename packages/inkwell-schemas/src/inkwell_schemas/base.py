"""Base schema configuration for inkwell Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with validation defaults.

    Note: text fields are never whitespace-stripped. Scene content and codex
    details must round-trip byte for byte through the durable store.
    """

    model_config = ConfigDict(
        extra="ignore",  # Drop unknown keys from older saves
        validate_assignment=True,
        validate_default=True,
        use_enum_values=True,
    )
