from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Sequence

from .catalog import catalog_for, get_variant_personality
from .errors import UnknownSectionType
from .models.site import BusinessProfile, IndustryType, SectionType
from .models.variant import (
    ScoredVariant,
    SiteSelection,
    VariantAlternative,
    VariantDescriptor,
    VariantSelection,
)
from .scorer import normalize_traits, score

# A section scoring below this is a weak match and may follow the site's
# leading variant instead of its own top pick.
STRONG_MATCH_THRESHOLD = 0.5

DEFAULT_VARIANT = 1


@dataclass(frozen=True)
class RankedVariant:
    variant: int
    score: float
    matched_traits: tuple[str, ...]
    personality: VariantDescriptor


def resolve_section_type(section_type: SectionType | str) -> SectionType:
    try:
        return SectionType(section_type)
    except ValueError:
        raise UnknownSectionType(str(section_type)) from None


def percentage(value: float) -> int:
    """Whole percent for display, rounding halves up (0.125 is 13)."""
    return int(math.floor(value * 100 + 0.5))


class VariantSelector:
    def __init__(
        self,
        *,
        catalog: Callable[[SectionType], Sequence[VariantDescriptor]] = catalog_for,
        strong_match_threshold: float = STRONG_MATCH_THRESHOLD,
    ) -> None:
        self._catalog = catalog
        self._strong_match_threshold = strong_match_threshold

    def rank_variants(self, section_type: SectionType | str, brand_traits: Sequence[str]) -> list[RankedVariant]:
        """Score every catalog entry; highest score first, lower variant number wins ties."""
        section = resolve_section_type(section_type)
        ranked = []
        for descriptor in self._catalog(section):
            result = score(brand_traits, descriptor)
            ranked.append(
                RankedVariant(
                    variant=descriptor.variant_number,
                    score=result.score,
                    matched_traits=tuple(result.matched_traits),
                    personality=descriptor,
                )
            )
        ranked.sort(key=lambda item: (-item.score, item.variant))
        return ranked

    def select_variant(
        self,
        section_type: SectionType | str,
        industry: IndustryType,
        business_profile: BusinessProfile,
        *,
        max_alternatives: int | None = None,
    ) -> VariantSelection:
        section = resolve_section_type(section_type)
        brand_traits = normalize_traits(business_profile.brand_personality)
        ranked = self.rank_variants(section, brand_traits)
        if not brand_traits:
            best = next(item for item in ranked if item.variant == DEFAULT_VARIANT)
        else:
            best = ranked[0]
        return self._build_selection(section, brand_traits, ranked, best, max_alternatives=max_alternatives)

    def select_variants_for_site(
        self,
        section_types: Sequence[SectionType | str],
        industry: IndustryType,
        business_profile: BusinessProfile,
    ) -> SiteSelection:
        brand_traits = normalize_traits(business_profile.brand_personality)
        sections = [resolve_section_type(section_type) for section_type in section_types]

        selections: list[VariantSelection] = []
        chosen: Counter[int] = Counter()
        for section in sections:
            selection = self.select_variant(section, industry, business_profile)
            leader = self._leading_variant(chosen)
            if brand_traits and leader is not None and leader != selection.selected_variant:
                ranked = self.rank_variants(section, brand_traits)
                if self._should_follow_leader(ranked, leader):
                    best = next(item for item in ranked if item.variant == leader)
                    selection = self._build_selection(section, brand_traits, ranked, best)
            chosen[selection.selected_variant] += 1
            selections.append(selection)

        return SiteSelection(
            selections=selections,
            overall_reasoning=self._overall_reasoning(brand_traits, selections),
        )

    def get_all_variants_with_scores(
        self,
        section_type: SectionType | str,
        industry: IndustryType,
        business_profile: BusinessProfile,
    ) -> list[ScoredVariant]:
        section = resolve_section_type(section_type)
        recommended = self.select_variant(section, industry, business_profile).selected_variant
        ranked = self.rank_variants(section, business_profile.brand_personality)
        return [
            ScoredVariant(
                variant=item.variant,
                score=item.score,
                personality=item.personality,
                is_recommended=item.variant == recommended,
            )
            for item in ranked
        ]

    def get_variant_recommendation(
        self,
        section_type: SectionType | str,
        industry: IndustryType,
        business_profile: BusinessProfile,
    ) -> dict[str, object]:
        selection = self.select_variant(section_type, industry, business_profile)
        return {
            "recommended": selection.selected_variant,
            "alternatives": [
                {
                    "variant": alt.variant,
                    "match": f"{percentage(alt.score)}% match - {alt.personality.description}",
                }
                for alt in selection.alternatives
            ],
            "explanation": selection.reasoning,
        }

    def _should_follow_leader(self, ranked: Sequence[RankedVariant], leader: int) -> bool:
        top = ranked[0]
        leader_score = next(item.score for item in ranked if item.variant == leader)
        if leader_score == top.score:
            return True
        return top.score < self._strong_match_threshold and leader_score > 0

    def _leading_variant(self, chosen: Counter[int]) -> int | None:
        if not chosen:
            return None
        # most_common keeps first-chosen order among equal counts
        return chosen.most_common(1)[0][0]

    def _build_selection(
        self,
        section: SectionType,
        brand_traits: Sequence[str],
        ranked: Sequence[RankedVariant],
        best: RankedVariant,
        *,
        max_alternatives: int | None = None,
    ) -> VariantSelection:
        alternatives = [
            VariantAlternative(variant=item.variant, score=item.score, personality=item.personality)
            for item in ranked
            if item.variant != best.variant
        ]
        if max_alternatives is not None:
            alternatives = alternatives[: max(0, max_alternatives)]
        return VariantSelection(
            section_type=section,
            selected_variant=best.variant,
            score=best.score,
            reasoning=self._reasoning(brand_traits, best),
            alternatives=alternatives,
        )

    def _reasoning(self, brand_traits: Sequence[str], best: RankedVariant) -> str:
        personality = best.personality
        style = " and ".join(personality.traits[:2])
        if not brand_traits:
            return f"Selected variant {best.variant} ({personality.description}) as the default style."
        if not best.matched_traits:
            return f"Selected variant {best.variant} for its {style} aesthetic, which complements your brand."
        return (
            f"Selected variant {best.variant} ({percentage(best.score)}% match) because your "
            f"\"{', '.join(best.matched_traits)}\" brand personality aligns with its {style} design style."
        )

    def _overall_reasoning(self, brand_traits: Sequence[str], selections: Sequence[VariantSelection]) -> str:
        if not selections:
            return "No sections requested."
        if not brand_traits:
            return "Default variants selected. Add brand personality traits to get personalized recommendations."

        average = sum(selection.score for selection in selections) / len(selections)
        traits = ", ".join(brand_traits)
        dominant = dominant_variant(selections)
        if dominant is not None:
            personality = get_variant_personality(dominant)
            style = personality.description.lower() if personality else "selected"
            return (
                f"{percentage(average)}% overall match. Your \"{traits}\" brand aligns best with the "
                f"{style} design approach used across most sections."
            )
        return (
            f"{percentage(average)}% overall match. Variants were selected to best represent your "
            f"\"{traits}\" brand personality across all sections."
        )


def dominant_variant(selections: Sequence[VariantSelection]) -> int | None:
    """Return the variant chosen by a strict majority of sections, if any."""
    if not selections:
        return None
    variant, count = Counter(selection.selected_variant for selection in selections).most_common(1)[0]
    return variant if count > len(selections) / 2 else None


__all__ = [
    "DEFAULT_VARIANT",
    "RankedVariant",
    "STRONG_MATCH_THRESHOLD",
    "VariantSelector",
    "dominant_variant",
    "percentage",
    "resolve_section_type",
]
