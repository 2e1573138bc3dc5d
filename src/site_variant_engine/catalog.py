from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from .models.site import SectionType
from .models.variant import VariantDescriptor, VariantPersonalityTag


@dataclass(frozen=True)
class VariantPersonality:
    variant: int
    tag: VariantPersonalityTag
    traits: Sequence[str]
    description: str
    best_for: Sequence[str]


# Variant numbers map 1:1 onto personality archetypes for every section type;
# site-wide consistency relies on this.
VARIANT_PERSONALITIES: Sequence[VariantPersonality] = (
    VariantPersonality(
        variant=1,
        tag="professional",
        traits=("professional", "corporate", "trustworthy", "traditional", "formal"),
        description="Clean, professional design with strong credibility signals",
        best_for=("consulting", "legal", "financial", "b2b services", "professional services"),
    ),
    VariantPersonality(
        variant=2,
        tag="modern",
        traits=("modern", "minimal", "clean", "tech", "sleek", "contemporary"),
        description="Minimalist design with modern aesthetics and whitespace",
        best_for=("tech companies", "startups", "design agencies", "digital services"),
    ),
    VariantPersonality(
        variant=3,
        tag="bold",
        traits=("bold", "creative", "artistic", "unique", "expressive", "vibrant"),
        description="Eye-catching design with creative flair and strong visual impact",
        best_for=("creative agencies", "artists", "entertainment", "fashion", "events"),
    ),
    VariantPersonality(
        variant=4,
        tag="elegant",
        traits=("elegant", "luxury", "sophisticated", "premium", "refined", "upscale"),
        description="High-end design with elegant typography and premium feel",
        best_for=("luxury brands", "high-end services", "boutiques", "premium products"),
    ),
    VariantPersonality(
        variant=5,
        tag="friendly",
        traits=("friendly", "approachable", "casual", "warm", "welcoming", "personal"),
        description="Warm, inviting design that feels personal and accessible",
        best_for=("local businesses", "restaurants", "retail", "family services", "community"),
    ),
)


# Section types with their own wording. Traits stay shared so scores agree
# across sections.
SECTION_DESCRIPTIONS: Mapping[SectionType, Mapping[int, str]] = {
    SectionType.hero: {
        1: "Split hero with headline, trust badges and a clear primary call to action",
        2: "Full-width minimalist hero with generous whitespace and a single focal line",
        3: "Oversized typography hero with layered shapes and high-contrast color",
        4: "Cinematic hero with refined serif headline over a muted full-bleed image",
        5: "Inviting hero with rounded imagery, friendly copy and a welcoming CTA",
    },
    SectionType.menu: {
        1: "Structured menu list with clear categories and aligned prices",
        2: "Minimal menu grid with clean dividers and compact item cards",
        3: "Expressive menu board with bold category headers and playful layout",
        4: "Fine-dining menu with elegant typography and restrained ornamentation",
        5: "Casual menu cards with photos, tags and warm colors",
    },
    SectionType.location: {
        1: "Business-card style location block with address, hours and map",
        2: "Map-first layout with a slim floating details panel",
        3: "Split location section with a bold colored panel and large map",
        4: "Understated location section with refined hours table and framed map",
        5: "Neighborly location section with directions, parking tips and a friendly map",
    },
    SectionType.gallery: {
        1: "Even grid gallery with consistent framing and captions",
        2: "Masonry gallery with thin gutters and hover captions",
        3: "Mosaic gallery mixing oversized tiles with vivid overlays",
        4: "Curated gallery with wide margins and slow crossfades",
        5: "Scrapbook gallery with polaroid-style cards and handwritten captions",
    },
}


def _build_catalog(section_type: SectionType) -> tuple[VariantDescriptor, ...]:
    descriptions = SECTION_DESCRIPTIONS.get(section_type, {})
    return tuple(
        VariantDescriptor(
            section_type=section_type,
            variant_number=personality.variant,
            personality_tag=personality.tag,
            traits=tuple(personality.traits),
            description=descriptions.get(personality.variant, personality.description),
            best_for_industries=tuple(personality.best_for),
        )
        for personality in VARIANT_PERSONALITIES
    )


VARIANT_CATALOG: Mapping[SectionType, Sequence[VariantDescriptor]] = {
    section_type: _build_catalog(section_type) for section_type in SectionType
}


def catalog_for(section_type: SectionType) -> list[VariantDescriptor]:
    """Return the five variant descriptors for a section type, ordered by variant number."""
    return list(VARIANT_CATALOG[SectionType(section_type)])


def get_variant_descriptor(section_type: SectionType | str, variant_number: int) -> VariantDescriptor | None:
    try:
        catalog = VARIANT_CATALOG[SectionType(section_type)]
    except ValueError:
        return None
    if not 1 <= variant_number <= len(catalog):
        return None
    return catalog[variant_number - 1]


def get_variant_personality(variant_number: int) -> VariantPersonality | None:
    for personality in VARIANT_PERSONALITIES:
        if personality.variant == variant_number:
            return personality
    return None


__all__ = [
    "SECTION_DESCRIPTIONS",
    "VARIANT_CATALOG",
    "VARIANT_PERSONALITIES",
    "VariantPersonality",
    "catalog_for",
    "get_variant_descriptor",
    "get_variant_personality",
]
