from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class OverrideRecord(BaseModel):
    """One variant choice for a section, either the engine's pick or a user override."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    site_id: str
    section_type: str
    variant_number: int = Field(ge=1, le=5)
    is_override: bool
    selected_at: datetime


class OverrideStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_overrides: int = 0
    overrides_by_section: dict[str, int] = Field(default_factory=dict)
    overrides_by_variant: dict[int, int] = Field(default_factory=dict)
    most_overridden_section: str | None = None


__all__ = ["OverrideRecord", "OverrideStats"]
