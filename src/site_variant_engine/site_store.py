from __future__ import annotations

import threading
import uuid
from datetime import datetime
from typing import Dict, Protocol, Sequence

from .models.site import BusinessProfile, SiteDraft, SiteSection


class SiteStore(Protocol):
    """Persistence collaborator for site drafts.

    A get followed by a save is not atomic; callers serialize writes to the
    same site.
    """

    def create_site(
        self,
        *,
        session_id: str,
        business_profile: BusinessProfile,
        sections: Sequence[SiteSection] = (),
    ) -> SiteDraft:
        ...

    def get_site(self, site_id: str) -> SiteDraft | None:
        ...

    def save_site(self, site: SiteDraft) -> SiteDraft:
        ...


class InMemorySiteStore:
    def __init__(self) -> None:
        self._sites: Dict[str, SiteDraft] = {}
        self._lock = threading.Lock()

    def create_site(
        self,
        *,
        session_id: str,
        business_profile: BusinessProfile,
        sections: Sequence[SiteSection] = (),
    ) -> SiteDraft:
        with self._lock:
            now = datetime.utcnow()
            site = SiteDraft(
                id=self._generate_id(),
                session_id=session_id,
                business_profile=business_profile,
                sections=list(sections),
                created_at=now,
                updated_at=now,
            )
            self._sites[site.id] = site
            return site.model_copy(deep=True)

    def get_site(self, site_id: str) -> SiteDraft | None:
        with self._lock:
            site = self._sites.get(site_id)
            return site.model_copy(deep=True) if site else None

    def save_site(self, site: SiteDraft) -> SiteDraft:
        with self._lock:
            saved = site.model_copy(deep=True, update={"updated_at": datetime.utcnow()})
            self._sites[saved.id] = saved
            return saved.model_copy(deep=True)

    def _generate_id(self) -> str:
        ts = datetime.utcnow().strftime("%Y%m%d%H%M%S")
        return f"site_{ts}_{uuid.uuid4().hex[:6]}"


__all__ = ["InMemorySiteStore", "SiteStore"]
