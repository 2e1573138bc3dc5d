"""Pure operations on a site's section list.

Every function takes the current sections and returns a new list; orders in
the result are always contiguous from 0.
"""

from __future__ import annotations

from typing import Sequence

from .errors import SectionNotFoundError
from .models.site import SectionType, SiteSection
from .models.variant import SiteSelection


def sorted_sections(sections: Sequence[SiteSection]) -> list[SiteSection]:
    return sorted(sections, key=lambda section: section.order)


def renumber(sections: Sequence[SiteSection]) -> list[SiteSection]:
    return [
        section if section.order == index else section.model_copy(update={"order": index})
        for index, section in enumerate(sections)
    ]


def find_section(
    sections: Sequence[SiteSection],
    *,
    section_id: str | None = None,
    section_type: SectionType | str | None = None,
) -> SiteSection | None:
    """Find a section by id, or failing that by type."""
    for section in sections:
        if section_id is not None and section.id == section_id:
            return section
    if section_type is not None:
        for section in sections:
            if section.type == section_type:
                return section
    return None


def insert_section(sections: Sequence[SiteSection], new_section: SiteSection, order: int | None = None) -> list[SiteSection]:
    ordered = sorted_sections(sections)
    position = len(ordered) if order is None else min(max(order, 0), len(ordered))
    ordered.insert(position, new_section)
    return renumber(ordered)


def move_section(sections: Sequence[SiteSection], section_id: str, order: int) -> list[SiteSection]:
    ordered = sorted_sections(sections)
    index = next((i for i, section in enumerate(ordered) if section.id == section_id), None)
    if index is None:
        raise SectionNotFoundError(section_id=section_id)
    section = ordered.pop(index)
    ordered.insert(min(max(order, 0), len(ordered)), section)
    return renumber(ordered)


def replace_section(sections: Sequence[SiteSection], updated: SiteSection) -> list[SiteSection]:
    if not any(section.id == updated.id for section in sections):
        raise SectionNotFoundError(section_id=updated.id)
    return [updated if section.id == updated.id else section for section in sorted_sections(sections)]


def remove_section(sections: Sequence[SiteSection], section_id: str) -> list[SiteSection]:
    remaining = [section for section in sorted_sections(sections) if section.id != section_id]
    if len(remaining) == len(sections):
        raise SectionNotFoundError(section_id=section_id)
    return renumber(remaining)


def apply_site_selection(sections: Sequence[SiteSection], site_selection: SiteSelection) -> list[SiteSection]:
    """Return the sections with each variant replaced by the selection for its type."""
    variants = {selection.section_type: selection.selected_variant for selection in site_selection.selections}
    return [
        section.model_copy(update={"variant": variants[section.type]}) if section.type in variants else section
        for section in sorted_sections(sections)
    ]


__all__ = [
    "apply_site_selection",
    "find_section",
    "insert_section",
    "move_section",
    "remove_section",
    "renumber",
    "replace_section",
    "sorted_sections",
]
