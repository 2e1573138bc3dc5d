from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Sequence

from google.api_core.exceptions import GoogleAPICallError
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from .errors import PersistenceFailure
from .models.override import OverrideRecord
from .models.site import BusinessProfile, SiteDraft, SiteSection

logger = logging.getLogger(__name__)


class FirestoreSiteStore:
    """Firestore-backed site draft store for production use."""

    COLLECTION_NAME = "sites"

    def __init__(self, project_id: str | None = None, *, collection_name: str | None = None, client=None) -> None:
        self._db = client or firestore.Client(project=project_id)
        self._collection = self._db.collection(collection_name or self.COLLECTION_NAME)

    def create_site(
        self,
        *,
        session_id: str,
        business_profile: BusinessProfile,
        sections: Sequence[SiteSection] = (),
    ) -> SiteDraft:
        """Create a new site draft document."""
        now = datetime.utcnow()
        doc_ref = self._collection.document()
        site = SiteDraft(
            id=f"site_{doc_ref.id}",
            session_id=session_id,
            business_profile=business_profile,
            sections=list(sections),
            created_at=now,
            updated_at=now,
        )
        try:
            self._collection.document(site.id).set(self._to_firestore_dict(site))
        except GoogleAPICallError as exc:
            logger.error("Failed to create site", exc_info=True, extra={"session_id": session_id})
            raise PersistenceFailure("Failed to create site", {"error": str(exc)}) from exc

        logger.info("Created site", extra={"site_id": site.id, "session_id": session_id})
        return site

    def get_site(self, site_id: str) -> SiteDraft | None:
        """Retrieve a site draft by ID."""
        try:
            doc = self._collection.document(site_id).get()
        except GoogleAPICallError as exc:
            logger.error("Failed to read site", exc_info=True, extra={"site_id": site_id})
            raise PersistenceFailure("Failed to read site", {"siteId": site_id, "error": str(exc)}) from exc
        if not doc.exists:
            return None
        return self._from_firestore_dict(doc.id, doc.to_dict())

    def save_site(self, site: SiteDraft) -> SiteDraft:
        """Write the full site draft, stamping ``updated_at``."""
        saved = site.model_copy(update={"updated_at": datetime.utcnow()})
        try:
            self._collection.document(site.id).set(self._to_firestore_dict(saved))
        except GoogleAPICallError as exc:
            logger.error("Failed to save site", exc_info=True, extra={"site_id": site.id})
            raise PersistenceFailure("Failed to save site", {"siteId": site.id, "error": str(exc)}) from exc

        logger.info(
            "Saved site",
            extra={"site_id": site.id, "sections_count": len(saved.sections)},
        )
        return saved

    def _to_firestore_dict(self, site: SiteDraft) -> dict[str, Any]:
        return {
            "session_id": site.session_id,
            "business_profile": site.business_profile.model_dump(mode="json"),
            "sections": [section.model_dump(mode="json") for section in site.sections],
            "created_at": site.created_at,
            "updated_at": site.updated_at,
        }

    def _from_firestore_dict(self, site_id: str, data: dict[str, Any]) -> SiteDraft:
        return SiteDraft(
            id=site_id,
            session_id=data["session_id"],
            business_profile=BusinessProfile.model_validate(data.get("business_profile") or {}),
            sections=[SiteSection.model_validate(section) for section in data.get("sections", [])],
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )


class FirestoreOverrideLog:
    """Append-only override log stored in Firestore."""

    COLLECTION_NAME = "component_usage"

    def __init__(self, project_id: str | None = None, *, collection_name: str | None = None, client=None) -> None:
        self._db = client or firestore.Client(project=project_id)
        self._collection = self._db.collection(collection_name or self.COLLECTION_NAME)

    def append(self, record: OverrideRecord) -> OverrideRecord:
        try:
            self._collection.document(record.id).set(
                {
                    "site_id": record.site_id,
                    "section_type": record.section_type,
                    "variant_number": record.variant_number,
                    "is_override": record.is_override,
                    "selected_at": record.selected_at,
                }
            )
        except GoogleAPICallError as exc:
            logger.error("Failed to append override record", exc_info=True, extra={"site_id": record.site_id})
            raise PersistenceFailure("Failed to record variant selection", {"error": str(exc)}) from exc
        return record

    def list_records(self, *, site_id: str | None = None, limit: int = 1000) -> list[OverrideRecord]:
        query = self._collection
        if site_id is not None:
            query = query.where(filter=FieldFilter("site_id", "==", site_id))
        query = query.order_by("selected_at").limit(limit)

        try:
            docs = list(query.stream())
        except GoogleAPICallError as exc:
            logger.error("Failed to list override records", exc_info=True, extra={"site_id": site_id})
            raise PersistenceFailure("Failed to read variant selections", {"error": str(exc)}) from exc

        return [
            OverrideRecord(
                id=doc.id,
                site_id=data["site_id"],
                section_type=data["section_type"],
                variant_number=data["variant_number"],
                is_override=data.get("is_override", False),
                selected_at=data["selected_at"],
            )
            for doc in docs
            if (data := doc.to_dict()) is not None
        ]


__all__ = ["FirestoreOverrideLog", "FirestoreSiteStore"]
