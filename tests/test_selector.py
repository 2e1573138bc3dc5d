import pytest

from site_variant_engine.errors import UnknownSectionType
from site_variant_engine.models.site import BusinessProfile, SectionType
from site_variant_engine.selector import VariantSelector, percentage


def make_profile(*traits: str, industry: str = "service") -> BusinessProfile:
    return BusinessProfile(
        name="Test Business",
        industry=industry,
        business_type="consulting",
        brand_personality=list(traits),
    )


@pytest.mark.parametrize(
    ("traits", "expected_variant"),
    [
        (("professional", "corporate", "trustworthy"), 1),
        (("modern", "minimal", "tech"), 2),
        (("bold", "creative", "artistic"), 3),
        (("elegant", "luxury", "sophisticated"), 4),
        (("friendly", "warm", "approachable"), 5),
    ],
)
def test_traits_map_to_personality_archetype(traits, expected_variant):
    selection = VariantSelector().select_variant(SectionType.hero, "service", make_profile(*traits))

    assert selection.selected_variant == expected_variant
    assert selection.score > 0.5


def test_luxury_hero_scenario():
    selection = VariantSelector().select_variant("hero", "service", make_profile("elegant", "luxury", "sophisticated"))

    assert selection.section_type == SectionType.hero
    assert selection.selected_variant == 4
    assert selection.score > 0.5
    assert selection.alternatives[0].personality.personality_tag != "elegant"


def test_empty_personality_takes_default_path():
    selection = VariantSelector().select_variant(SectionType.contact, "local", make_profile())

    assert selection.selected_variant == 1
    assert selection.score == 0
    assert "as the default style" in selection.reasoning


def test_traits_are_case_insensitive():
    selection = VariantSelector().select_variant(SectionType.hero, "service", make_profile("PROFESSIONAL", "Modern", "ELEGANT"))

    # three archetypes tie; the lowest variant number wins
    assert selection.selected_variant == 1
    assert selection.score > 0


def test_alternatives_exclude_selection_and_are_sorted():
    selection = VariantSelector().select_variant(
        SectionType.services, "service", make_profile("modern", "minimal", "warm", "bold")
    )

    variants = [alt.variant for alt in selection.alternatives]
    scores = [alt.score for alt in selection.alternatives]
    assert selection.selected_variant == 2
    assert selection.selected_variant not in variants
    assert len(variants) == 4
    assert scores == sorted(scores, reverse=True)
    # equal scores keep ascending variant order
    assert variants[:2] == [3, 5]


def test_alternatives_can_be_truncated():
    selection = VariantSelector().select_variant(
        SectionType.hero, "service", make_profile("bold"), max_alternatives=2
    )

    assert len(selection.alternatives) == 2
    assert selection.selected_variant == 3


def test_reasoning_names_matched_traits_and_style():
    selection = VariantSelector().select_variant(SectionType.hero, "service", make_profile("Professional", "trustworthy"))

    assert selection.reasoning == (
        'Selected variant 1 (100% match) because your "professional, trustworthy" brand personality '
        "aligns with its professional and corporate design style."
    )


def test_reasoning_without_any_match():
    selection = VariantSelector().select_variant(SectionType.hero, "service", make_profile("spicy"))

    assert selection.selected_variant == 1
    assert selection.reasoning == (
        "Selected variant 1 for its professional and corporate aesthetic, which complements your brand."
    )


def test_selection_is_deterministic():
    selector = VariantSelector()
    profile = make_profile("warm", "modern", "elegant", "creative")

    first = selector.select_variant(SectionType.portfolio, "service", profile)
    second = selector.select_variant(SectionType.portfolio, "service", profile)

    assert first.model_dump_json() == second.model_dump_json()


def test_unknown_section_type_is_rejected():
    with pytest.raises(UnknownSectionType):
        VariantSelector().select_variant("footer", "service", make_profile("bold"))


@pytest.mark.parametrize("section_type", list(SectionType))
def test_all_variants_with_scores_marks_one_recommendation(section_type):
    selector = VariantSelector()
    profile = make_profile("friendly", "modern")

    variants = selector.get_all_variants_with_scores(section_type, "service", profile)
    selection = selector.select_variant(section_type, "service", profile)

    scores = [item.score for item in variants]
    recommended = [item.variant for item in variants if item.is_recommended]
    assert len(variants) == 5
    assert scores == sorted(scores, reverse=True)
    assert recommended == [selection.selected_variant]
    assert {item.variant for item in variants} == {1, 2, 3, 4, 5}


def test_all_variants_recommend_default_without_traits():
    variants = VariantSelector().get_all_variants_with_scores(SectionType.menu, "local", make_profile())

    assert [item.variant for item in variants if item.is_recommended] == [1]
    assert variants[0].variant == 1


def test_variant_recommendation_summary():
    summary = VariantSelector().get_variant_recommendation(
        SectionType.hero, "service", make_profile("elegant", "luxury")
    )

    assert summary["recommended"] == 4
    assert len(summary["alternatives"]) == 4
    assert summary["alternatives"][0]["match"].startswith("0% match - ")
    assert "100% match" in summary["explanation"]


@pytest.mark.parametrize(("value", "expected"), [(0.125, 13), (0.625, 63), (0.005, 1), (0.4, 40), (2 / 3, 67), (1.0, 100)])
def test_percentage_rounds_halves_up(value, expected):
    assert percentage(value) == expected


def test_reasoning_percentage_rounds_half_up():
    traits = ["bold", "t1", "t2", "t3", "t4", "t5", "t6", "t7"]
    selection = VariantSelector().select_variant(SectionType.hero, "service", make_profile(*traits))

    assert selection.selected_variant == 3
    assert selection.score == 0.125
    assert "(13% match)" in selection.reasoning
