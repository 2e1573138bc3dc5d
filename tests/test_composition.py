import pytest

from site_variant_engine.composition import (
    apply_site_selection,
    find_section,
    insert_section,
    move_section,
    remove_section,
    replace_section,
)
from site_variant_engine.errors import SectionNotFoundError
from site_variant_engine.models.site import SectionType, SiteSection
from site_variant_engine.models.variant import SiteSelection, VariantSelection


def make_sections(*types: str) -> list[SiteSection]:
    return [SiteSection(id=f"s-{section_type}", type=section_type, order=index) for index, section_type in enumerate(types)]


def orders(sections):
    return [(section.id, section.order) for section in sections]


def test_insert_appends_by_default_and_clamps_order():
    sections = make_sections("hero", "about")
    contact = SiteSection(id="s-contact", type="contact", order=0)

    appended = insert_section(sections, contact)
    clamped = insert_section(sections, contact, order=99)
    first = insert_section(sections, contact, order=-3)

    assert orders(appended) == [("s-hero", 0), ("s-about", 1), ("s-contact", 2)]
    assert orders(clamped) == orders(appended)
    assert orders(first) == [("s-contact", 0), ("s-hero", 1), ("s-about", 2)]
    assert orders(sections) == [("s-hero", 0), ("s-about", 1)]


def test_move_section_keeps_orders_contiguous():
    sections = make_sections("hero", "about", "process", "contact")

    moved = move_section(sections, "s-contact", 1)

    assert orders(moved) == [("s-hero", 0), ("s-contact", 1), ("s-about", 2), ("s-process", 3)]


def test_remove_section_renumbers():
    remaining = remove_section(make_sections("hero", "about", "contact"), "s-about")

    assert orders(remaining) == [("s-hero", 0), ("s-contact", 1)]


def test_missing_section_raises():
    sections = make_sections("hero")
    stray = SiteSection(id="nope", type="hero", order=0)

    with pytest.raises(SectionNotFoundError):
        remove_section(sections, "nope")
    with pytest.raises(SectionNotFoundError):
        move_section(sections, "nope", 0)
    with pytest.raises(SectionNotFoundError):
        replace_section(sections, stray)


def test_find_section_prefers_id_then_type():
    sections = make_sections("hero", "about")

    assert find_section(sections, section_id="s-about", section_type="hero").id == "s-about"
    assert find_section(sections, section_id="unknown", section_type=SectionType.hero).id == "s-hero"
    assert find_section(sections, section_type="contact") is None


def test_apply_site_selection_updates_matching_types_only():
    sections = make_sections("hero", "gallery")
    selection = SiteSelection(
        selections=[
            VariantSelection(section_type="hero", selected_variant=4, score=1.0, reasoning="", alternatives=[]),
            VariantSelection(section_type="contact", selected_variant=2, score=0.5, reasoning="", alternatives=[]),
        ],
        overall_reasoning="",
    )

    updated = apply_site_selection(sections, selection)

    assert [(section.type, section.variant) for section in updated] == [
        (SectionType.hero, 4),
        (SectionType.gallery, 1),
    ]
