from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping, Sequence

from .models.site import IndustryType, SectionType

ComponentScope = Literal["service", "local", "shared"]

COMPONENT_SECTIONS: Mapping[ComponentScope, Sequence[SectionType]] = {
    "service": (SectionType.hero, SectionType.services, SectionType.process, SectionType.portfolio),
    "local": (SectionType.hero, SectionType.menu, SectionType.location, SectionType.gallery),
    "shared": (SectionType.about, SectionType.testimonials, SectionType.contact),
}

VARIANTS_PER_SECTION = 5


@dataclass(frozen=True)
class ComponentEntry:
    scope: ComponentScope
    section: SectionType
    variant: int
    component_name: str
    component_path: str


def component_name(scope: ComponentScope, section: SectionType, variant: int) -> str:
    return f"{scope}-{section.value}-{variant}"


def component_path(scope: ComponentScope, section: SectionType, variant: int) -> str:
    return f"components/sections/{section.value}/{component_name(scope, section, variant)}"


class ComponentRegistry:
    """Maps (industry, section type, variant) to the rendering component key.

    The selection engine only emits the key; loading the component is the
    renderer's job.
    """

    def __init__(self, *, sections: Mapping[ComponentScope, Sequence[SectionType]] = COMPONENT_SECTIONS) -> None:
        self._entries: dict[tuple[ComponentScope, SectionType, int], ComponentEntry] = {}
        for scope, section_types in sections.items():
            for section in section_types:
                for variant in range(1, VARIANTS_PER_SECTION + 1):
                    self._entries[(scope, section, variant)] = ComponentEntry(
                        scope=scope,
                        section=section,
                        variant=variant,
                        component_name=component_name(scope, section, variant),
                        component_path=component_path(scope, section, variant),
                    )

    def get_entry(self, industry: IndustryType, section: SectionType, variant: int) -> ComponentEntry | None:
        entry = self._entries.get((industry, section, variant))
        if entry is None:
            entry = self._entries.get(("shared", section, variant))
        return entry

    def exists(self, industry: IndustryType, section: SectionType, variant: int) -> bool:
        return self.get_entry(industry, section, variant) is not None

    def available_variants(self, industry: IndustryType, section: SectionType) -> list[int]:
        variants = {
            variant
            for (scope, entry_section, variant) in self._entries
            if entry_section == section and scope in (industry, "shared")
        }
        return sorted(variants)

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["COMPONENT_SECTIONS", "ComponentEntry", "ComponentRegistry", "component_name", "component_path"]
