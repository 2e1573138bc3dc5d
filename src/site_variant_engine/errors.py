"""Exception classes raised by the variant engine and its service layer."""

from __future__ import annotations

from typing import Any


class VariantEngineError(Exception):
    """Base exception for all engine errors."""

    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(VariantEngineError):
    """Malformed or out-of-range input."""

    status_code = 400


class UnknownSectionType(ValidationError, ValueError):
    """Section type is not part of the variant catalog."""

    def __init__(self, section_type: str) -> None:
        super().__init__(f"Unknown section type: {section_type}", {"sectionType": section_type})
        self.section_type = section_type


class NotFoundError(VariantEngineError):
    status_code = 404


class SiteNotFoundError(NotFoundError):
    def __init__(self, site_id: str) -> None:
        super().__init__("Site not found", {"siteId": site_id})


class SectionNotFoundError(NotFoundError):
    def __init__(self, section_id: str | None = None, section_type: str | None = None) -> None:
        details = {key: value for key, value in (("sectionId", section_id), ("sectionType", section_type)) if value}
        super().__init__("Section not found", details)


class ComponentNotFoundError(NotFoundError):
    """No rendering component is registered for a section's type and variant."""

    def __init__(self, industry: str, section_type: str, variant: int) -> None:
        super().__init__(
            f"No component for section type '{section_type}' on {industry} sites",
            {"industry": industry, "sectionType": section_type, "variant": variant},
        )


class SectionConflictError(VariantEngineError):
    """A section of the same type already exists on the site."""

    status_code = 409

    def __init__(self, section_type: str, existing_section_id: str) -> None:
        super().__init__(
            f"Section of type '{section_type}' already exists",
            {"existingSectionId": existing_section_id},
        )


class PersistenceFailure(VariantEngineError):
    """The persistence collaborator failed to write.

    The in-memory computation already succeeded; callers may retry the write
    without recomputing the recommendation.
    """

    status_code = 500


__all__ = [
    "ComponentNotFoundError",
    "NotFoundError",
    "PersistenceFailure",
    "SectionConflictError",
    "SectionNotFoundError",
    "SiteNotFoundError",
    "UnknownSectionType",
    "ValidationError",
    "VariantEngineError",
]
