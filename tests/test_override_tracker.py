from datetime import datetime

from site_variant_engine.models.override import OverrideRecord
from site_variant_engine.models.site import SectionType
from site_variant_engine.override_tracker import InMemoryOverrideLog, OverrideTracker, aggregate_stats

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 0)


def make_tracker() -> tuple[OverrideTracker, InMemoryOverrideLog]:
    log = InMemoryOverrideLog()
    return OverrideTracker(log, clock=lambda: FIXED_NOW), log


def make_record(section_type: str, variant: int, is_override: bool = True, site_id: str = "site_1") -> OverrideRecord:
    return OverrideRecord(
        id=f"usage_{section_type}_{variant}",
        site_id=site_id,
        section_type=section_type,
        variant_number=variant,
        is_override=is_override,
        selected_at=FIXED_NOW,
    )


def test_record_selection_appends_one_record():
    tracker, log = make_tracker()

    record = tracker.record_selection("site_1", SectionType.hero, 4, True)

    assert log.list_records() == [record]
    assert record.section_type == "hero"
    assert record.selected_at == FIXED_NOW
    assert record.id.startswith("usage_20240501123000_")


def test_records_are_filtered_by_site():
    tracker, _ = make_tracker()
    tracker.record_selection("site_1", "hero", 2, True)
    tracker.record_selection("site_2", "about", 3, False)

    assert [record.site_id for record in tracker.records_for_site("site_2")] == ["site_2"]
    assert tracker.records_for_site("missing") == []


def test_aggregate_stats_counts_only_overrides():
    stats = aggregate_stats(
        [
            make_record("hero", 2),
            make_record("hero", 4),
            make_record("about", 2),
            make_record("contact", 1, is_override=False),
        ]
    )

    assert stats.total_overrides == 3
    assert stats.overrides_by_section == {"hero": 2, "about": 1}
    assert stats.overrides_by_variant == {2: 2, 4: 1}
    assert stats.most_overridden_section == "hero"


def test_most_overridden_tie_goes_to_first_seen_section():
    stats = aggregate_stats([make_record("about", 1), make_record("hero", 3)])

    assert stats.most_overridden_section == "about"


def test_empty_stats():
    stats = aggregate_stats([])

    assert stats.total_overrides == 0
    assert stats.overrides_by_section == {}
    assert stats.overrides_by_variant == {}
    assert stats.most_overridden_section is None


def test_tracker_stats_scope_to_site():
    tracker, _ = make_tracker()
    tracker.record_selection("site_1", "hero", 2, True)
    tracker.record_selection("site_2", "hero", 5, True)
    tracker.record_selection("site_2", "gallery", 5, True)

    assert tracker.stats().total_overrides == 3
    assert tracker.stats(site_id="site_2").overrides_by_variant == {5: 2}
