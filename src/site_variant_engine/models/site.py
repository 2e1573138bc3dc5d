from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class SectionType(str, Enum):
    hero = "hero"
    services = "services"
    menu = "menu"
    about = "about"
    process = "process"
    portfolio = "portfolio"
    testimonials = "testimonials"
    location = "location"
    gallery = "gallery"
    contact = "contact"


IndustryType = Literal["service", "local"]

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class BrandColors(BaseModel):
    primary: str = Field(pattern=HEX_COLOR_PATTERN)
    secondary: str = Field(pattern=HEX_COLOR_PATTERN)
    accent: str = Field(pattern=HEX_COLOR_PATTERN)


class ContactDetails(BaseModel):
    email: EmailStr | None = None
    phone: str | None = None
    address: str | None = None


class BusinessProfile(BaseModel):
    """Business information extracted from the builder conversation.

    Only ``industry`` and ``brand_personality`` drive variant selection; the
    remaining fields are filled in progressively and may be missing.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str | None = Field(default=None, max_length=100)
    industry: IndustryType = "service"
    business_type: str | None = None
    tagline: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    brand_personality: list[str] = Field(default_factory=list)
    colors: BrandColors | None = None
    contact: ContactDetails | None = None


class SiteSection(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    type: SectionType
    order: int = Field(ge=0)
    variant: int = Field(default=1, ge=1, le=5)
    content: dict[str, Any] = Field(default_factory=dict)
    is_visible: bool = True


class SiteDraft(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    session_id: str
    business_profile: BusinessProfile = Field(default_factory=BusinessProfile)
    sections: list[SiteSection] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


__all__ = [
    "BrandColors",
    "BusinessProfile",
    "ContactDetails",
    "IndustryType",
    "SectionType",
    "SiteDraft",
    "SiteSection",
]
