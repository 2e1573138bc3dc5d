from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from .models.site import IndustryType, SectionType


@dataclass(frozen=True)
class IndustryConfig:
    id: IndustryType
    name: str
    description: str
    required_sections: Sequence[SectionType]
    optional_sections: Sequence[SectionType]
    conversation_flow: Sequence[SectionType]
    examples: Sequence[str]

    @property
    def sections(self) -> list[SectionType]:
        return [*self.required_sections, *self.optional_sections]


INDUSTRY_CONFIGS: Mapping[IndustryType, IndustryConfig] = {
    "service": IndustryConfig(
        id="service",
        name="Service Business",
        description="Professional services and B2B companies",
        required_sections=(SectionType.hero, SectionType.services, SectionType.about, SectionType.contact),
        optional_sections=(SectionType.process, SectionType.portfolio, SectionType.testimonials),
        conversation_flow=(
            SectionType.hero,
            SectionType.services,
            SectionType.about,
            SectionType.process,
            SectionType.testimonials,
            SectionType.portfolio,
            SectionType.contact,
        ),
        examples=("Consulting firms", "Marketing agencies", "Law firms", "Design studios", "IT services"),
    ),
    "local": IndustryConfig(
        id="local",
        name="Local Business",
        description="Restaurants, retail, and location-based businesses",
        required_sections=(SectionType.hero, SectionType.menu, SectionType.location, SectionType.contact),
        optional_sections=(SectionType.about, SectionType.gallery, SectionType.testimonials),
        conversation_flow=(
            SectionType.hero,
            SectionType.menu,
            SectionType.about,
            SectionType.testimonials,
            SectionType.location,
            SectionType.gallery,
            SectionType.contact,
        ),
        examples=("Restaurants", "Cafes", "Salons", "Retail stores", "Gyms"),
    ),
}

# Batch recommendations fall back to these when the caller names no sections.
DEFAULT_SECTION_TYPES: Sequence[SectionType] = INDUSTRY_CONFIGS["service"].conversation_flow


def get_industry_config(industry: IndustryType) -> IndustryConfig:
    return INDUSTRY_CONFIGS[industry]


def is_section_valid_for_industry(section_type: SectionType, industry: IndustryType) -> bool:
    return section_type in get_industry_config(industry).sections


__all__ = [
    "DEFAULT_SECTION_TYPES",
    "INDUSTRY_CONFIGS",
    "IndustryConfig",
    "get_industry_config",
    "is_section_valid_for_industry",
]
