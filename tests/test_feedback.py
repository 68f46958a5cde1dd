"""Tests for feedback learning."""

from unittest.mock import patch
from uuid import uuid4

import pytest

from continuum.domain.enums import IssueTag, PatternType, Rating
from continuum.services.feedback import (
    DEFAULT_VOCABULARY,
    FeedbackLearner,
    InvalidRatingError,
    PromptAlreadyRatedError,
    VocabularyTerm,
    extract_patterns,
    normalize_issues,
)
from continuum.services.intelligence import BrandIntelligenceStore
from continuum.services.tenant_store import PromptNotFoundError


class TestExtractPatterns:
    def test_default_vocabulary(self) -> None:
        found = extract_patterns(
            "Steady lateral tracking at golden hour, moving left to right"
        )

        assert ("camera_type", "lateral tracking") in found
        assert ("lighting", "golden hour") in found
        assert ("motion_style", "steady") in found
        assert ("screen_direction", "left-to-right") in found

    def test_duplicate_values_collapse(self) -> None:
        found = extract_patterns("left to right, then left-to-right again")

        assert found.count(("screen_direction", "left-to-right")) == 1

    def test_injected_vocabulary(self) -> None:
        vocabulary = [VocabularyTerm(PatternType.LIGHTING, "neon")]

        assert extract_patterns("Neon-lit alley", vocabulary) == [("lighting", "neon")]
        assert extract_patterns("golden hour", vocabulary) == []

    def test_empty_text(self) -> None:
        assert extract_patterns("", DEFAULT_VOCABULARY) == []


class TestNormalizeIssues:
    def test_supplied_tags_are_filtered(self) -> None:
        assert normalize_issues(["Motion", "bogus", "motion", "physics"], None) == [
            "motion",
            "physics",
        ]

    def test_inferred_from_notes(self) -> None:
        issues = normalize_issues(None, "Too dark and the car kept flickering")

        assert IssueTag.LIGHTING.value in issues
        assert IssueTag.CONSISTENCY.value in issues

    def test_nothing_to_infer(self) -> None:
        assert normalize_issues([], "") == []


class TestFeedbackLearner:
    def test_invalid_rating_writes_nothing(self, db_session, brand, make_prompt, owner_id) -> None:
        prompt = make_prompt(brand)
        learner = FeedbackLearner(db_session)

        with pytest.raises(InvalidRatingError):
            learner.record(prompt.id, owner_id, "excellent")

        db_session.refresh(prompt)
        assert prompt.rating is None

    def test_foreign_prompt_is_not_found(
        self, db_session, brand, make_prompt, owner_id, other_owner_id
    ) -> None:
        prompt = make_prompt(brand)

        with pytest.raises(PromptNotFoundError):
            FeedbackLearner(db_session).record(prompt.id, other_owner_id, "good")
        with pytest.raises(PromptNotFoundError):
            FeedbackLearner(db_session).record(uuid4(), owner_id, "good")

    def test_positive_rating_learns_patterns(
        self, db_session, brand, make_prompt, owner_id
    ) -> None:
        prompt = make_prompt(
            brand, prompt_text="Steady lateral tracking at golden hour", platform="kling"
        )

        result = FeedbackLearner(db_session).record(prompt.id, owner_id, "perfect")

        assert result.rating == Rating.PERFECT
        assert result.learning_failed is False
        store = BrandIntelligenceStore(db_session)
        preference = store.get(brand.id, PatternType.PLATFORM_PREFERENCE, "kling")
        assert preference is not None
        assert preference.confidence == pytest.approx(0.6)
        lighting = store.get(brand.id, PatternType.LIGHTING, "golden hour")
        assert lighting is not None and lighting.confidence == pytest.approx(0.6)
        assert {p.pattern_value for p in result.learned} >= {"kling", "golden hour", "steady"}

        db_session.refresh(prompt)
        assert prompt.rating == "perfect"
        assert "feedback_at" in prompt.metadata_

    def test_five_positive_ratings_raise_preference(
        self, db_session, brand, make_prompt, owner_id
    ) -> None:
        store = BrandIntelligenceStore(db_session)
        learner = FeedbackLearner(db_session)
        confidences = []
        for _ in range(5):
            prompt = make_prompt(brand, prompt_text="A clean shot", platform="veo3")
            learner.record(prompt.id, owner_id, 4)
            confidences.append(
                store.get(brand.id, PatternType.PLATFORM_PREFERENCE, "veo3").confidence
            )

        assert all(b > a for a, b in zip(confidences, confidences[1:]))
        assert confidences[-1] <= 1.0

    def test_negative_rating_records_issues(
        self, db_session, brand, make_prompt, owner_id
    ) -> None:
        prompt = make_prompt(brand, platform="sora")

        result = FeedbackLearner(db_session).record(
            prompt.id, owner_id, "failed", notes="Car teleported", issues=["motion", "physics"]
        )

        assert result.issues == ["motion", "physics"]
        store = BrandIntelligenceStore(db_session)
        preference = store.get(brand.id, PatternType.PLATFORM_PREFERENCE, "sora")
        assert preference.confidence == pytest.approx(0.35)
        issues = store.platform_issues(brand.id, "sora")
        assert {i.pattern_value for i in issues} == {"motion", "physics"}
        assert all(i.confidence == pytest.approx(0.3) for i in issues)

        db_session.refresh(prompt)
        assert prompt.feedback_notes == "Car teleported"
        assert prompt.metadata_["issues_reported"] == ["motion", "physics"]

    def test_negative_rating_infers_issues_from_notes(
        self, db_session, brand, make_prompt, owner_id
    ) -> None:
        prompt = make_prompt(brand, platform="kling")

        result = FeedbackLearner(db_session).record(
            prompt.id, owner_id, "poor", notes="Colors were muddy"
        )

        assert result.issues == ["color"]

    def test_okay_records_rating_only(self, db_session, brand, make_prompt, owner_id) -> None:
        prompt = make_prompt(brand, prompt_text="Steady lateral tracking at golden hour")

        result = FeedbackLearner(db_session).record(prompt.id, owner_id, "okay", issues=["motion"])

        assert result.learned == []
        assert result.issues == []
        assert BrandIntelligenceStore(db_session).list_for_tenant(brand.id) == []
        db_session.refresh(prompt)
        assert prompt.rating == "okay"

    def test_learning_failure_keeps_rating(self, db_session, brand, make_prompt, owner_id) -> None:
        prompt = make_prompt(brand, platform="veo3")
        learner = FeedbackLearner(db_session)

        with patch.object(learner.store, "adjust", side_effect=RuntimeError("db down")):
            result = learner.record(prompt.id, owner_id, "good")

        assert result.learning_failed is True
        assert result.learned == []
        db_session.refresh(prompt)
        assert prompt.rating == "good"

    def test_to_dict(self, db_session, brand, make_prompt, owner_id) -> None:
        prompt = make_prompt(brand, prompt_text="A clean shot")

        data = FeedbackLearner(db_session).record(prompt.id, owner_id, "5").to_dict()

        assert data["prompt_id"] == str(prompt.id)
        assert data["rating"] == "perfect"
        assert data["learning_failed"] is False
        assert data["patterns_updated"][0]["pattern_type"] == "platform_preference"

    def test_rated_prompt_cannot_be_rated_again(
        self, db_session, brand, make_prompt, owner_id
    ) -> None:
        prompt = make_prompt(brand, prompt_text="A clean shot", platform="veo3")
        learner = FeedbackLearner(db_session)
        learner.record(prompt.id, owner_id, "failed")

        for _ in range(3):
            with pytest.raises(PromptAlreadyRatedError):
                learner.record(prompt.id, owner_id, "perfect")

        db_session.refresh(prompt)
        assert prompt.rating == "failed"
        preference = BrandIntelligenceStore(db_session).get(
            brand.id, PatternType.PLATFORM_PREFERENCE, "veo3"
        )
        assert preference.confidence == pytest.approx(0.35)
        assert preference.occurrences == 1

    def test_okay_rating_also_locks_the_prompt(
        self, db_session, brand, make_prompt, owner_id
    ) -> None:
        prompt = make_prompt(brand)
        learner = FeedbackLearner(db_session)
        learner.record(prompt.id, owner_id, "okay")

        with pytest.raises(PromptAlreadyRatedError):
            learner.record(prompt.id, owner_id, "good")
        assert BrandIntelligenceStore(db_session).list_for_tenant(brand.id) == []
