from __future__ import annotations

from typing import Any, Literal, Mapping

import pydantic
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from ..errors import UnknownSectionType, ValidationError
from .site import SectionType


class ContentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HeroCta(ContentModel):
    primary: str = Field(min_length=1)
    primary_action: str = Field(min_length=1)
    secondary: str | None = None
    secondary_action: str | None = None


class HeroContent(ContentModel):
    headline: str = Field(min_length=1, max_length=100)
    subheadline: str = Field(min_length=1, max_length=200)
    cta: HeroCta
    background_style: Literal["image", "gradient", "solid"]
    background_image: str | None = None


class ServiceItem(ContentModel):
    id: str
    title: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1, max_length=200)
    icon: str | None = None
    features: list[str] | None = None


class ServicesContent(ContentModel):
    section_title: str = Field(min_length=1)
    section_subtitle: str | None = None
    section_description: str | None = None
    services: list[ServiceItem] = Field(min_length=1, max_length=12)


class MenuItem(ContentModel):
    id: str
    name: str = Field(min_length=1)
    description: str | None = None
    price: str | None = None
    tags: list[str] | None = None


class MenuCategory(ContentModel):
    id: str
    name: str = Field(min_length=1)
    items: list[MenuItem]


class MenuContent(ContentModel):
    section_title: str = Field(min_length=1)
    categories: list[MenuCategory]


class Highlight(ContentModel):
    title: str
    value: str


class Stat(ContentModel):
    value: str
    label: str


class AboutContent(ContentModel):
    section_title: str = Field(min_length=1)
    title: str | None = None
    headline: str = Field(min_length=1)
    story: str = Field(min_length=1, max_length=1000)
    mission: str | None = None
    highlights: list[Highlight] | None = None
    values: list[str] | None = None
    stats: list[Stat] | None = None
    image: str | None = None
    founder_name: str | None = None
    founder_role: str | None = None
    founder_image: str | None = None


class ProcessStep(ContentModel):
    id: str
    number: int = Field(gt=0)
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    duration: str | None = None


class ProcessContent(ContentModel):
    section_title: str = Field(min_length=1)
    section_subtitle: str | None = None
    section_description: str | None = None
    steps: list[ProcessStep] = Field(min_length=3, max_length=6)


class Project(ContentModel):
    id: str
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    category: str | None = None
    image: str | None = None
    link: str | None = None
    results: list[str] | None = None


class PortfolioContent(ContentModel):
    section_title: str = Field(min_length=1)
    section_description: str | None = None
    projects: list[Project] = Field(min_length=1, max_length=12)


class Testimonial(ContentModel):
    id: str
    quote: str = Field(min_length=1, max_length=500)
    author: str = Field(min_length=1)
    name: str | None = None
    role: str | None = None
    company: str | None = None
    avatar: str | None = None
    image: str | None = None
    rating: int | None = Field(default=None, ge=1, le=5)


class TestimonialsContent(ContentModel):
    section_title: str = Field(min_length=1)
    section_description: str | None = None
    testimonials: list[Testimonial] = Field(min_length=1, max_length=10)


class Address(ContentModel):
    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip: str = Field(min_length=1)
    country: str | None = None


class OpeningHours(ContentModel):
    days: str
    hours: str


class LocationContent(ContentModel):
    section_title: str = Field(min_length=1)
    address: Address
    phone: str | None = None
    email: EmailStr | None = None
    hours: list[OpeningHours]
    map_embed: str | None = None


class GalleryImage(ContentModel):
    id: str
    url: str
    alt: str
    caption: str | None = None


class GalleryContent(ContentModel):
    section_title: str = Field(min_length=1)
    section_subtitle: str | None = None
    images: list[GalleryImage] = Field(min_length=3, max_length=20)


class ContactInfo(ContentModel):
    email: EmailStr | None = None
    phone: str | None = None
    address: str | None = None


class SocialLink(ContentModel):
    platform: str
    url: str


class ContactContent(ContentModel):
    section_title: str = Field(min_length=1)
    heading: str | None = None
    subheading: str | None = None
    headline: str | None = None
    subtext: str | None = None
    show_form: bool
    form_fields: list[Literal["name", "email", "phone", "message", "subject"]] | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    hours: str | None = None
    cta: str | None = None
    contact_info: ContactInfo | None = None
    social_links: list[SocialLink] | None = None


SectionContent = (
    HeroContent
    | ServicesContent
    | MenuContent
    | AboutContent
    | ProcessContent
    | PortfolioContent
    | TestimonialsContent
    | LocationContent
    | GalleryContent
    | ContactContent
)

CONTENT_MODELS: Mapping[SectionType, type[ContentModel]] = {
    SectionType.hero: HeroContent,
    SectionType.services: ServicesContent,
    SectionType.menu: MenuContent,
    SectionType.about: AboutContent,
    SectionType.process: ProcessContent,
    SectionType.portfolio: PortfolioContent,
    SectionType.testimonials: TestimonialsContent,
    SectionType.location: LocationContent,
    SectionType.gallery: GalleryContent,
    SectionType.contact: ContactContent,
}


def validate_section_content(section_type: SectionType | str, raw_content: Mapping[str, Any]) -> SectionContent:
    """Validate raw section content against the model for its section type.

    Raises:
        UnknownSectionType: ``section_type`` is not a known section type.
        ValidationError: the content does not match the section's structure.
    """
    try:
        section = SectionType(section_type)
    except ValueError:
        raise UnknownSectionType(str(section_type)) from None

    model = CONTENT_MODELS[section]
    try:
        return model.model_validate(raw_content)
    except pydantic.ValidationError as exc:
        errors = [
            {"loc": ".".join(str(part) for part in error["loc"]), "msg": error["msg"]}
            for error in exc.errors()
        ]
        raise ValidationError(
            f"Invalid content for section type '{section.value}'",
            {"errors": errors},
        ) from exc


__all__ = [
    "CONTENT_MODELS",
    "AboutContent",
    "ContactContent",
    "GalleryContent",
    "HeroContent",
    "LocationContent",
    "MenuContent",
    "PortfolioContent",
    "ProcessContent",
    "SectionContent",
    "ServicesContent",
    "TestimonialsContent",
    "validate_section_content",
]
