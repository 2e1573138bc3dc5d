from __future__ import annotations

from typing import Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .site import SectionType

VariantPersonalityTag = Literal["professional", "modern", "bold", "elegant", "friendly"]


class VariantDescriptor(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    section_type: SectionType
    variant_number: int = Field(ge=1, le=5)
    personality_tag: VariantPersonalityTag
    traits: tuple[str, ...]
    description: str
    best_for_industries: tuple[str, ...] = ()


class MatchResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    score: float = Field(ge=0.0, le=1.0)
    matched_traits: list[str] = Field(default_factory=list)
    variant: VariantDescriptor | None = None


class VariantAlternative(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    variant: int
    score: float
    personality: VariantDescriptor


class VariantSelection(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    section_type: SectionType
    selected_variant: int = Field(ge=1, le=5)
    score: float
    reasoning: str
    alternatives: Sequence[VariantAlternative] = Field(default_factory=list)


class SiteSelection(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    selections: Sequence[VariantSelection] = Field(default_factory=list)
    overall_reasoning: str


class ScoredVariant(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    variant: int
    score: float
    personality: VariantDescriptor
    is_recommended: bool = False


__all__ = [
    "MatchResult",
    "ScoredVariant",
    "SiteSelection",
    "VariantAlternative",
    "VariantDescriptor",
    "VariantPersonalityTag",
    "VariantSelection",
]
