from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime
from typing import Callable, Iterable, Protocol

from .models.override import OverrideRecord, OverrideStats

logger = logging.getLogger(__name__)


class OverrideLog(Protocol):
    def append(self, record: OverrideRecord) -> OverrideRecord:
        ...

    def list_records(self, *, site_id: str | None = None) -> list[OverrideRecord]:
        ...


class InMemoryOverrideLog:
    def __init__(self) -> None:
        self._records: list[OverrideRecord] = []
        self._lock = threading.Lock()

    def append(self, record: OverrideRecord) -> OverrideRecord:
        with self._lock:
            self._records.append(record)
            return record

    def list_records(self, *, site_id: str | None = None) -> list[OverrideRecord]:
        with self._lock:
            return [record for record in self._records if site_id is None or record.site_id == site_id]


class OverrideTracker:
    """Records whether a section's active variant came from the engine or the user."""

    def __init__(self, log: OverrideLog, *, clock: Callable[[], datetime] = datetime.utcnow) -> None:
        self._log = log
        self._clock = clock

    def record_selection(
        self,
        site_id: str,
        section_type: str,
        variant_number: int,
        is_override: bool,
    ) -> OverrideRecord:
        selected_at = self._clock()
        record = OverrideRecord(
            id=self._generate_id(selected_at),
            site_id=site_id,
            section_type=str(getattr(section_type, "value", section_type)),
            variant_number=variant_number,
            is_override=is_override,
            selected_at=selected_at,
        )
        self._log.append(record)
        logger.info(
            "Recorded variant selection",
            extra={
                "site_id": site_id,
                "section_type": record.section_type,
                "variant_number": variant_number,
                "is_override": is_override,
            },
        )
        return record

    def records_for_site(self, site_id: str) -> list[OverrideRecord]:
        return self._log.list_records(site_id=site_id)

    def stats(self, *, site_id: str | None = None) -> OverrideStats:
        return aggregate_stats(self._log.list_records(site_id=site_id))

    def _generate_id(self, selected_at: datetime) -> str:
        ts = selected_at.strftime("%Y%m%d%H%M%S")
        return f"usage_{ts}_{uuid.uuid4().hex[:6]}"


def aggregate_stats(records: Iterable[OverrideRecord]) -> OverrideStats:
    """Count user overrides per section and per variant.

    Engine picks (``is_override`` false) are ignored. Ties for the most
    overridden section go to the section seen first.
    """
    stats = OverrideStats()
    for record in records:
        if not record.is_override:
            continue
        stats.total_overrides += 1
        stats.overrides_by_section[record.section_type] = stats.overrides_by_section.get(record.section_type, 0) + 1
        stats.overrides_by_variant[record.variant_number] = (
            stats.overrides_by_variant.get(record.variant_number, 0) + 1
        )

    max_overrides = 0
    for section_type, count in stats.overrides_by_section.items():
        if count > max_overrides:
            max_overrides = count
            stats.most_overridden_section = section_type
    return stats


__all__ = ["InMemoryOverrideLog", "OverrideLog", "OverrideTracker", "aggregate_stats"]
