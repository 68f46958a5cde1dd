"""Tests for the brand intelligence store."""

from uuid import uuid4

import pytest
from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from continuum.config import Settings
from continuum.db.models import BrandIntelligenceModel
from continuum.domain.enums import PatternType
from continuum.services.intelligence import BrandIntelligenceStore, clamp_confidence


@pytest.fixture
def store(db_session) -> BrandIntelligenceStore:
    return BrandIntelligenceStore(db_session)


def _row_count(session) -> int:
    return session.execute(select(func.count()).select_from(BrandIntelligenceModel)).scalar_one()


class TestClamp:
    @pytest.mark.parametrize(
        ("value", "expected"), [(-1.0, 0.1), (0.05, 0.1), (0.5, 0.5), (1.2, 1.0)]
    )
    def test_clamp(self, value: float, expected: float) -> None:
        assert clamp_confidence(value, 0.1, 1.0) == expected


class TestReinforce:
    def test_creates_at_initial_confidence(self, store, brand) -> None:
        record = store.reinforce(brand.id, PatternType.FPS_PREFERENCE, "24", initial_confidence=0.6)

        assert record.confidence == pytest.approx(0.6)
        assert record.occurrences == 1
        assert record.last_seen is not None

    def test_repeat_adds_step(self, store, brand, db_session) -> None:
        store.reinforce(brand.id, PatternType.CAMERA_PREFERENCE, "tracking")
        record = store.reinforce(brand.id, PatternType.CAMERA_PREFERENCE, "tracking")

        assert record.confidence == pytest.approx(0.55)
        assert record.occurrences == 2
        assert _row_count(db_session) == 1

    def test_never_exceeds_ceiling(self, store, brand) -> None:
        for _ in range(30):
            record = store.reinforce(brand.id, PatternType.PLATFORM_PREFERENCE, "veo3")

        assert record.confidence == pytest.approx(1.0)
        assert record.confidence <= 1.0
        assert record.occurrences == 30


class TestAdjust:
    def test_positive_creates_above_initial(self, store, brand) -> None:
        record = store.adjust(brand.id, PatternType.LIGHTING, "golden hour", 0.10)

        assert record.confidence == pytest.approx(0.6)
        assert record.occurrences == 1

    def test_negative_creates_below_initial(self, store, brand) -> None:
        record = store.adjust(brand.id, PatternType.PLATFORM_PREFERENCE, "sora", -0.15)

        assert record.confidence == pytest.approx(0.35)

    def test_five_positive_adjustments_strictly_increase(self, store, brand) -> None:
        confidences = [
            store.adjust(brand.id, PatternType.PLATFORM_PREFERENCE, "kling", 0.10).confidence
            for _ in range(5)
        ]

        assert all(b > a for a, b in zip(confidences, confidences[1:]))
        assert max(confidences) <= 1.0

    def test_never_drops_below_floor(self, store, brand) -> None:
        for _ in range(10):
            record = store.adjust(brand.id, PatternType.PLATFORM_PREFERENCE, "sora", -0.15)

        assert record.confidence == pytest.approx(0.1)
        assert record.occurrences == 10

    def test_custom_floor(self, db_session, brand) -> None:
        store = BrandIntelligenceStore(db_session, floor=0.25)
        for _ in range(5):
            record = store.adjust(brand.id, PatternType.PLATFORM_PREFERENCE, "runway", -0.15)

        assert record.confidence == pytest.approx(0.25)


class TestRecordNegative:
    def test_issue_starts_low_and_repeats_only_count(self, store, brand) -> None:
        first = store.record_negative(brand.id, "kling", "motion")
        second = store.record_negative(brand.id, "kling", "motion")

        assert first.pattern_type == "platform_issue_kling"
        assert first.confidence == pytest.approx(0.3)
        assert second.confidence == pytest.approx(0.3)
        assert second.occurrences == 2

    def test_platform_issues_are_scoped(self, store, brand) -> None:
        store.record_negative(brand.id, "kling", "motion")
        store.record_negative(brand.id, "kling", "lighting")
        store.record_negative(brand.id, "sora", "physics")

        issues = store.platform_issues(brand.id, "kling")

        assert {i.pattern_value for i in issues} == {"motion", "lighting"}


class TestListForTenant:
    def test_ordering_and_threshold(self, store, brand) -> None:
        store.reinforce(brand.id, PatternType.LIGHTING, "night", initial_confidence=0.4)
        store.reinforce(brand.id, PatternType.LIGHTING, "sunset", initial_confidence=0.7)
        store.reinforce(brand.id, PatternType.MOTION_STYLE, "slow", initial_confidence=0.8)
        store.reinforce(brand.id, PatternType.MOTION_STYLE, "steady", initial_confidence=0.6)
        store.reinforce(brand.id, PatternType.MOTION_STYLE, "steady", step=0.05)

        records = store.list_for_tenant(brand.id, min_confidence=0.5)

        assert [r.pattern_value for r in records] == ["slow", "sunset", "steady"]
        assert records[1].occurrences == 1
        assert records[2].occurrences == 2

    def test_occurrences_break_ties(self, store, brand) -> None:
        store.reinforce(brand.id, PatternType.LIGHTING, "night", initial_confidence=0.6, step=0)
        store.reinforce(brand.id, PatternType.LIGHTING, "sunset", initial_confidence=0.6, step=0)
        store.reinforce(brand.id, PatternType.LIGHTING, "sunset", initial_confidence=0.6, step=0)

        records = store.list_for_tenant(brand.id)

        assert [r.pattern_value for r in records] == ["sunset", "night"]

    def test_limit(self, store, brand) -> None:
        for value in ("a", "b", "c", "d"):
            store.reinforce(brand.id, PatternType.LIGHTING, value)

        assert len(store.list_for_tenant(brand.id, limit=2)) == 2

    def test_tenants_are_isolated(self, store, brand, other_brand) -> None:
        store.reinforce(brand.id, PatternType.LIGHTING, "golden hour")
        store.reinforce(other_brand.id, PatternType.LIGHTING, "night")

        assert [r.pattern_value for r in store.list_for_tenant(brand.id)] == ["golden hour"]
        assert store.list_for_tenant(uuid4()) == []

    def test_get_missing(self, store, brand) -> None:
        assert store.get(brand.id, PatternType.LIGHTING, "aurora") is None


class TestConfidenceBounds:
    def test_floor_below_default_is_storable(self, db_session, brand) -> None:
        store = BrandIntelligenceStore(db_session, floor=0.05)
        for _ in range(10):
            record = store.adjust(brand.id, PatternType.PLATFORM_PREFERENCE, "sora", -0.15)
        db_session.commit()

        assert record.confidence == pytest.approx(0.05)

    def test_table_rejects_out_of_range_confidence(self, db_session, brand) -> None:
        db_session.add(
            BrandIntelligenceModel(
                tenant_id=brand.id,
                pattern_type=PatternType.LIGHTING.value,
                pattern_value="night",
                confidence=1.5,
            )
        )

        with pytest.raises(IntegrityError):
            db_session.flush()
        db_session.rollback()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"intelligence_confidence_floor": 0.0},
            {"intelligence_confidence_floor": 1.2},
            {"intelligence_confidence_ceiling": 1.5},
        ],
    )
    def test_settings_reject_bounds_outside_the_table_check(self, overrides) -> None:
        with pytest.raises(ValidationError):
            Settings(**overrides)
