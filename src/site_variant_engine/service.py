from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, Mapping, Sequence

from .component_registry import ComponentEntry, ComponentRegistry
from .composition import (
    apply_site_selection,
    find_section,
    insert_section,
    move_section,
    remove_section,
    renumber,
    replace_section,
    sorted_sections,
)
from .errors import (
    ComponentNotFoundError,
    SectionConflictError,
    SectionNotFoundError,
    SiteNotFoundError,
    ValidationError,
)
from .industries import DEFAULT_SECTION_TYPES, is_section_valid_for_industry
from .models.content import validate_section_content
from .models.override import OverrideRecord, OverrideStats
from .models.site import BusinessProfile, SectionType, SiteDraft, SiteSection
from .models.variant import ScoredVariant, SiteSelection, VariantSelection
from .override_tracker import OverrideTracker
from .pubsub_client import PubSubClient
from .selector import VariantSelector, resolve_section_type
from .site_store import SiteStore

logger = logging.getLogger(__name__)

MIN_VARIANT = 1
MAX_VARIANT = 5

# Fixed pool of locks shared by all sites; a site id always maps to the same lock.
SITE_LOCK_STRIPES = 64


@dataclass
class SectionRecommendation:
    selection: VariantSelection
    all_variants: list[ScoredVariant]


@dataclass
class VariantOptions:
    section_type: SectionType
    current_variant: int
    variants: list[ScoredVariant]


@dataclass
class SwitchResult:
    section: SiteSection
    previous_variant: int
    new_variant: int
    is_override: bool
    variant_info: ScoredVariant | None
    updated_at: datetime
    override_record: OverrideRecord | None = None


@dataclass
class ApplyResult:
    site_selection: SiteSelection
    sections: list[SiteSection]
    updated_at: datetime


class VariantService:
    """Request-level operations on a site's sections and variants."""

    def __init__(
        self,
        *,
        site_store: SiteStore,
        tracker: OverrideTracker,
        selector: VariantSelector | None = None,
        registry: ComponentRegistry | None = None,
        publisher: PubSubClient | None = None,
    ) -> None:
        self._site_store = site_store
        self._tracker = tracker
        self._selector = selector or VariantSelector()
        self._registry = registry or ComponentRegistry()
        self._publisher = publisher
        self._site_locks = tuple(threading.Lock() for _ in range(SITE_LOCK_STRIPES))

    # Sites

    def create_site(
        self,
        *,
        session_id: str,
        business_profile: BusinessProfile,
        sections: Sequence[SiteSection] = (),
    ) -> SiteDraft:
        site = self._site_store.create_site(
            session_id=session_id,
            business_profile=business_profile,
            sections=renumber(sorted_sections(sections)),
        )
        logger.info("Created site draft", extra={"site_id": site.id, "session_id": session_id})
        return site

    def get_site(self, site_id: str) -> SiteDraft:
        if not site_id:
            raise ValidationError("Site ID is required")
        site = self._site_store.get_site(site_id)
        if site is None:
            raise SiteNotFoundError(site_id)
        return site

    # Recommendations

    def recommend_section(self, site_id: str, section_type: SectionType | str) -> SectionRecommendation:
        section = resolve_section_type(section_type)
        site = self.get_site(site_id)
        profile = site.business_profile
        selection = self._selector.select_variant(section, profile.industry, profile)
        all_variants = self._selector.get_all_variants_with_scores(section, profile.industry, profile)
        logger.debug(
            "Computed section recommendation",
            extra={"site_id": site_id, "section_type": section.value, "selected_variant": selection.selected_variant},
        )
        return SectionRecommendation(selection=selection, all_variants=all_variants)

    def recommend_sections(
        self,
        site_id: str,
        section_types: Sequence[SectionType | str] | None = None,
    ) -> SiteSelection:
        sections = [resolve_section_type(section_type) for section_type in (section_types or DEFAULT_SECTION_TYPES)]
        site = self.get_site(site_id)
        profile = site.business_profile
        return self._selector.select_variants_for_site(sections, profile.industry, profile)

    def variant_options(self, site_id: str, section_type: SectionType | str) -> VariantOptions:
        section = resolve_section_type(section_type)
        site = self.get_site(site_id)
        profile = site.business_profile
        variants = self._selector.get_all_variants_with_scores(section, profile.industry, profile)
        current = find_section(site.sections, section_type=section)
        if current is not None:
            current_variant = current.variant
        else:
            current_variant = next(item.variant for item in variants if item.is_recommended)
        return VariantOptions(section_type=section, current_variant=current_variant, variants=variants)

    def apply_recommendations(self, site_id: str) -> ApplyResult:
        """Run the site-wide selector over the site's sections and persist the picks."""
        with self._site_lock(site_id):
            site = self.get_site(site_id)
            profile = site.business_profile
            ordered = sorted_sections(site.sections)
            site_selection = self._selector.select_variants_for_site(
                [section.type for section in ordered], profile.industry, profile
            )
            updated_sections = apply_site_selection(ordered, site_selection)
            saved = self._site_store.save_site(site.model_copy(update={"sections": updated_sections}))

        for selection in site_selection.selections:
            self._record(site_id, selection.section_type.value, selection.selected_variant, is_override=False)

        logger.info(
            "Applied site-wide variant selection",
            extra={
                "site_id": site_id,
                "variants": {s.section_type.value: s.selected_variant for s in site_selection.selections},
            },
        )
        return ApplyResult(site_selection=site_selection, sections=saved.sections, updated_at=saved.updated_at)

    # Variant switching

    def switch_variant(
        self,
        site_id: str,
        *,
        section_id: str,
        section_type: SectionType | str,
        new_variant: int,
        is_override: bool = True,
    ) -> SwitchResult:
        if not MIN_VARIANT <= new_variant <= MAX_VARIANT:
            raise ValidationError(
                f"Variant must be between {MIN_VARIANT} and {MAX_VARIANT}",
                {"newVariant": new_variant},
            )
        requested_type = resolve_section_type(section_type)

        with self._site_lock(site_id):
            site = self.get_site(site_id)
            section = find_section(site.sections, section_id=section_id, section_type=requested_type)
            if section is None:
                raise SectionNotFoundError(section_id=section_id, section_type=requested_type.value)

            previous_variant = section.variant
            updated = section.model_copy(update={"variant": new_variant})
            saved = self._site_store.save_site(
                site.model_copy(update={"sections": replace_section(site.sections, updated)})
            )

        record = None
        if is_override:
            record = self._record(site_id, updated.type.value, new_variant, is_override=True)

        profile = saved.business_profile
        variant_info = next(
            (
                item
                for item in self._selector.get_all_variants_with_scores(updated.type, profile.industry, profile)
                if item.variant == new_variant
            ),
            None,
        )
        logger.info(
            "Switched section variant",
            extra={
                "site_id": site_id,
                "section_id": updated.id,
                "previous_variant": previous_variant,
                "new_variant": new_variant,
                "is_override": is_override,
            },
        )
        return SwitchResult(
            section=updated,
            previous_variant=previous_variant,
            new_variant=new_variant,
            is_override=is_override,
            variant_info=variant_info,
            updated_at=saved.updated_at,
            override_record=record,
        )

    # Sections

    def list_sections(self, site_id: str) -> list[SiteSection]:
        return sorted_sections(self.get_site(site_id).sections)

    def get_section(self, site_id: str, section_id: str) -> SiteSection:
        section = find_section(self.get_site(site_id).sections, section_id=section_id)
        if section is None:
            raise SectionNotFoundError(section_id=section_id)
        return section

    def add_section(
        self,
        site_id: str,
        *,
        section_type: SectionType | str,
        content: Mapping[str, Any],
        variant: int | None = None,
        order: int | None = None,
        is_visible: bool = True,
        validate_content: bool = False,
    ) -> tuple[SiteSection, int]:
        """Add a section, letting the engine pick its variant when none is given.

        Returns the new section and the total number of sections on the site.
        """
        section_kind = resolve_section_type(section_type)
        content = self._checked_content(section_kind, content, validate_content)

        with self._site_lock(site_id):
            site = self.get_site(site_id)
            industry = site.business_profile.industry
            if not is_section_valid_for_industry(section_kind, industry):
                raise ValidationError(
                    f"Section type '{section_kind.value}' is not available for {industry} sites",
                    {"sectionType": section_kind.value, "industry": industry},
                )
            existing = find_section(site.sections, section_type=section_kind)
            if existing is not None:
                raise SectionConflictError(section_kind.value, existing.id)

            ai_selected = variant is None
            if ai_selected:
                profile = site.business_profile
                variant = self._selector.select_variant(section_kind, profile.industry, profile).selected_variant

            new_section = SiteSection(
                id=f"section-{section_kind.value}-{uuid.uuid4().hex[:8]}",
                type=section_kind,
                order=0,
                variant=variant,
                content=content,
                is_visible=is_visible,
            )
            sections = insert_section(site.sections, new_section, order)
            self._site_store.save_site(site.model_copy(update={"sections": sections}))

        if ai_selected:
            self._record(site_id, section_kind.value, variant, is_override=False)

        created = next(section for section in sections if section.id == new_section.id)
        logger.info(
            "Added section",
            extra={"site_id": site_id, "section_id": created.id, "variant": created.variant, "order": created.order},
        )
        return created, len(sections)

    def update_section(
        self,
        site_id: str,
        section_id: str,
        *,
        order: int | None = None,
        variant: int | None = None,
        content: Mapping[str, Any] | None = None,
        is_visible: bool | None = None,
        validate_content: bool = False,
    ) -> SiteSection:
        if variant is not None and not MIN_VARIANT <= variant <= MAX_VARIANT:
            raise ValidationError(
                f"Variant must be between {MIN_VARIANT} and {MAX_VARIANT}",
                {"variant": variant},
            )

        with self._site_lock(site_id):
            site = self.get_site(site_id)
            section = find_section(site.sections, section_id=section_id)
            if section is None:
                raise SectionNotFoundError(section_id=section_id)

            changes: dict[str, Any] = {}
            if variant is not None:
                changes["variant"] = variant
            if content is not None:
                changes["content"] = self._checked_content(section.type, content, validate_content)
            if is_visible is not None:
                changes["is_visible"] = is_visible

            sections = replace_section(site.sections, section.model_copy(update=changes))
            if order is not None:
                sections = move_section(sections, section_id, order)
            self._site_store.save_site(site.model_copy(update={"sections": sections}))

        return next(item for item in sections if item.id == section_id)

    def delete_section(self, site_id: str, section_id: str) -> tuple[SiteSection, int]:
        """Delete a section and renumber the rest; returns it and the remaining count."""
        with self._site_lock(site_id):
            site = self.get_site(site_id)
            section = find_section(site.sections, section_id=section_id)
            if section is None:
                raise SectionNotFoundError(section_id=section_id)
            sections = remove_section(site.sections, section_id)
            self._site_store.save_site(site.model_copy(update={"sections": sections}))

        logger.info("Deleted section", extra={"site_id": site_id, "section_id": section_id})
        return section, len(sections)

    def resolve_component(self, site_id: str, section_id: str) -> ComponentEntry:
        site = self.get_site(site_id)
        section = find_section(site.sections, section_id=section_id)
        if section is None:
            raise SectionNotFoundError(section_id=section_id)
        entry = self._registry.get_entry(site.business_profile.industry, section.type, section.variant)
        if entry is None:
            raise ComponentNotFoundError(site.business_profile.industry, section.type.value, section.variant)
        return entry

    # Analytics

    def override_stats(self, site_id: str | None = None) -> OverrideStats:
        return self._tracker.stats(site_id=site_id)

    def _record(self, site_id: str, section_type: str, variant: int, *, is_override: bool) -> OverrideRecord:
        record = self._tracker.record_selection(site_id, section_type, variant, is_override)
        if self._publisher is not None:
            try:
                self._publisher.publish_variant_override(record)
            except Exception as exc:
                logger.warning(
                    "Publishing variant event failed (non-fatal)",
                    exc_info=True,
                    extra={"site_id": site_id, "record_id": record.id, "error": str(exc)},
                )
        return record

    def _checked_content(
        self,
        section_type: SectionType,
        content: Mapping[str, Any],
        validate_content: bool,
    ) -> dict[str, Any]:
        if not validate_content:
            return dict(content)
        validated = validate_section_content(section_type, content)
        return validated.model_dump(by_alias=True, exclude_none=True)

    @contextmanager
    def _site_lock(self, site_id: str) -> Iterator[None]:
        with self._site_locks[hash(site_id) % len(self._site_locks)]:
            yield


__all__ = [
    "ApplyResult",
    "SectionRecommendation",
    "SwitchResult",
    "VariantOptions",
    "VariantService",
]
