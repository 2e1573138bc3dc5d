from __future__ import annotations

from typing import Iterable

from .catalog import get_variant_descriptor
from .models.site import SectionType
from .models.variant import MatchResult, VariantDescriptor


def normalize_trait(trait: str) -> str:
    return trait.strip().lower()


def normalize_traits(traits: Iterable[str]) -> list[str]:
    """Lowercase and strip traits, dropping blanks and duplicates while keeping order."""
    normalized: list[str] = []
    for trait in traits:
        value = normalize_trait(trait)
        if value and value not in normalized:
            normalized.append(value)
    return normalized


def trait_matches(trait: str, variant_trait: str) -> bool:
    # Containment either way lets compound tags such as "professional-looking"
    # land on "professional".
    return trait == variant_trait or trait in variant_trait or variant_trait in trait


def score(brand_traits: Iterable[str], variant: VariantDescriptor | None) -> MatchResult:
    """Score how well a set of brand traits matches one variant.

    The score is the share of the business's traits that match any of the
    variant's traits, so it always lies in [0, 1]. A missing variant is a
    "no match" result rather than an error.
    """
    if variant is None:
        return MatchResult(score=0.0, matched_traits=[], variant=None)

    traits = normalize_traits(brand_traits)
    if not traits:
        return MatchResult(score=0.0, matched_traits=[], variant=variant)

    variant_traits = normalize_traits(variant.traits)
    matched = [
        trait for trait in traits if any(trait_matches(trait, variant_trait) for variant_trait in variant_traits)
    ]
    value = len(matched) / max(1, len(traits))
    return MatchResult(score=min(1.0, max(0.0, value)), matched_traits=matched, variant=variant)


def get_match_score(brand_traits: Iterable[str], section_type: SectionType | str, variant_number: int) -> MatchResult:
    return score(brand_traits, get_variant_descriptor(section_type, variant_number))


__all__ = ["get_match_score", "normalize_trait", "normalize_traits", "score", "trait_matches"]
