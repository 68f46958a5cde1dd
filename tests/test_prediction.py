"""Tests for platform prediction."""

import pytest

from continuum.domain.enums import OutputKind, ShotType
from continuum.presets.platforms import PlatformCapability, PlatformCatalog
from continuum.services.prediction import PredictionEngine, round_half_up


@pytest.fixture
def engine() -> PredictionEngine:
    return PredictionEngine()


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(93.5, 94), (93.49999999999999, 94), (93.4, 93), (97.75, 98), (0.5, 1), (0.0, 0)],
    )
    def test_rounding(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected


class TestLateralTrackScenario:
    """Seven second lateral tracking shot on video."""

    def test_scores(self, engine: PredictionEngine) -> None:
        prediction = engine.predict(ShotType.LATERAL_TRACK, 7, OutputKind.VIDEO)

        assert prediction.score_for("veo3") == 98
        assert prediction.score_for("kling") == 94
        assert prediction.score_for("minimax") == 90
        assert prediction.score_for("runway") == 77
        assert prediction.score_for("sora") == 65

    def test_recommendation(self, engine: PredictionEngine) -> None:
        prediction = engine.predict("lateral_track", 7, OutputKind.VIDEO)

        assert prediction.recommended_platform == "veo3"
        assert prediction.confidence == 98
        assert [a.platform for a in prediction.alternatives] == ["kling", "minimax"]
        assert prediction.alternatives[0].note == (
            "Better for dynamic backgrounds (waves, weather)"
        )
        assert prediction.warnings == []

    def test_factors(self, engine: PredictionEngine) -> None:
        prediction = engine.predict("lateral_track", 7, OutputKind.VIDEO)

        assert prediction.factors.to_dict() == {
            "shotTypeMatch": 91,
            "durationFit": 100,
            "cameraRequirement": 100,
            "platformStrength": 100,
        }

    def test_rationale(self, engine: PredictionEngine) -> None:
        prediction = engine.predict("lateral_track", 7, OutputKind.VIDEO)

        assert prediction.rationale == (
            "veo3 excels at lateral tracking shots with excellent camera lock, "
            "high vehicle consistency, broadcast-grade literal execution."
        )

    def test_ranking_is_descending(self, engine: PredictionEngine) -> None:
        prediction = engine.predict("lateral_track", 7, OutputKind.VIDEO)
        scores = [s.score for s in prediction.ranking]

        assert scores == sorted(scores, reverse=True)
        assert [s.platform for s in prediction.ranking] == [
            "veo3",
            "kling",
            "minimax",
            "runway",
            "sora",
        ]


class TestOutputKind:
    def test_still_on_video_platform_scores_zero(self, engine: PredictionEngine) -> None:
        prediction = engine.predict(
            "auto", 0, OutputKind.STILL, requested_platform="veo3"
        )

        assert prediction.score_for("veo3") == 0
        assert "veo3 cannot produce still output" in prediction.warnings
        assert prediction.recommended_platform == "flux"

    def test_still_candidates(self, engine: PredictionEngine) -> None:
        prediction = engine.predict("auto", 0, OutputKind.STILL)

        assert {s.platform for s in prediction.ranking} == {"midjourney", "flux"}
        assert prediction.score_for("flux") == 85
        assert prediction.score_for("midjourney") == 79
        assert prediction.factors.duration_fit == 100
        assert prediction.factors.platform_strength == 90

    def test_video_on_stills_platform_scores_zero(self, engine: PredictionEngine) -> None:
        prediction = engine.predict(
            "auto", 7, OutputKind.VIDEO, requested_platform="midjourney"
        )

        assert prediction.score_for("midjourney") == 0
        assert "midjourney cannot produce video output" in prediction.warnings


class TestDurationFit:
    def test_too_long(self, engine: PredictionEngine) -> None:
        score = engine.score_platform("veo3", ShotType.LATERAL_TRACK, 12, OutputKind.VIDEO)

        assert score.factors.duration_fit == 60
        assert "Duration exceeds optimal range - consistency may degrade" in score.warnings

    def test_too_short_with_sweet_spot(self, engine: PredictionEngine) -> None:
        score = engine.score_platform("veo3", ShotType.LATERAL_TRACK, 3, OutputKind.VIDEO)

        assert score.factors.duration_fit == 80
        assert "Duration may be too short for this shot type" in score.warnings

    def test_kling_sweet_spot(self, engine: PredictionEngine) -> None:
        score = engine.score_platform("kling", ShotType.LATERAL_TRACK, 12, OutputKind.VIDEO)
        assert score.factors.duration_fit == 60

        score = engine.score_platform("kling", ShotType.FOLLOW_BEHIND, 9, OutputKind.VIDEO)
        assert score.factors.duration_fit == 100

    def test_sora_long_bonus_is_strict(self, engine: PredictionEngine) -> None:
        at_ten = engine.score_platform("sora", ShotType.WIDE_ESTABLISH, 10, OutputKind.VIDEO)
        past_ten = engine.score_platform("sora", ShotType.LATERAL_TRACK, 12, OutputKind.VIDEO)

        assert at_ten.factors.duration_fit == 100
        assert past_ten.factors.duration_fit == 65

    def test_kling_rationale_mentions_duration(self) -> None:
        engine = PredictionEngine(platforms=PlatformCatalog(video_platforms=("kling", "sora")))
        prediction = engine.predict("follow_behind", 10, OutputKind.VIDEO)

        assert prediction.recommended_platform == "kling"
        assert prediction.rationale == (
            "kling excels at follow shots with excellent camera lock, high vehicle "
            "consistency, dynamic backgrounds, optimal 10s duration range."
        )


class TestPlatformStrength:
    def test_keyword_bonus(self, engine: PredictionEngine) -> None:
        plain = engine.score_platform("kling", ShotType.AUTO, 7, OutputKind.VIDEO)
        ocean = engine.score_platform(
            "kling", ShotType.AUTO, 7, OutputKind.VIDEO, description="Coastal road, crashing waves"
        )

        assert ocean.factors.platform_strength == plain.factors.platform_strength + 10

    def test_sora_precision_penalty_and_people(self, engine: PredictionEngine) -> None:
        precise = engine.score_platform("sora", ShotType.LATERAL_TRACK, 7, OutputKind.VIDEO)
        people = engine.score_platform(
            "sora", ShotType.AUTO, 7, OutputKind.VIDEO, description="People dancing, cinematic"
        )

        assert precise.factors.platform_strength == 45
        assert people.factors.platform_strength == 85

    def test_camera_critical_warnings(self, engine: PredictionEngine) -> None:
        score = engine.score_platform("sora", ShotType.LATERAL_TRACK, 7, OutputKind.VIDEO)

        assert "sora may drift on camera-critical shots" in score.warnings
        assert "sora may show vehicle inconsistency" in score.warnings


class TestRequestedPlatform:
    def test_switch_warning(self, engine: PredictionEngine) -> None:
        prediction = engine.predict(
            "lateral_track", 7, OutputKind.VIDEO, requested_platform="sora"
        )

        assert prediction.recommended_platform == "veo3"
        assert "sora scores 65% vs veo3 at 98%. Consider switching." in prediction.warnings
        assert "sora may drift on camera-critical shots" in prediction.warnings

    def test_no_switch_warning_within_margin(self, engine: PredictionEngine) -> None:
        prediction = engine.predict(
            "lateral_track", 7, OutputKind.VIDEO, requested_platform="kling"
        )

        assert not any("Consider switching" in w for w in prediction.warnings)

    def test_unknown_platform_is_scored_neutrally(self, engine: PredictionEngine) -> None:
        prediction = engine.predict("auto", 7, OutputKind.VIDEO, requested_platform="Seedance")

        assert prediction.score_for("seedance") == 67
        assert prediction.recommended_platform == "veo3"
        assert "seedance scores 67% vs veo3 at 96%. Consider switching." in prediction.warnings

    def test_unknown_winner_rationale(self) -> None:
        engine = PredictionEngine(platforms=PlatformCatalog(video_platforms=("mystery",)))
        prediction = engine.predict("auto", 7, OutputKind.VIDEO)

        assert prediction.recommended_platform == "mystery"
        assert prediction.rationale == "mystery selected based on available data."
        assert prediction.alternatives == []


class TestSerialization:
    def test_to_dict_keys(self, engine: PredictionEngine) -> None:
        data = engine.predict("lateral_track", 7, OutputKind.VIDEO).to_dict()

        assert data["recommendedPlatform"] == "veo3"
        assert data["confidence"] == 98
        assert set(data) >= {
            "recommendedPlatform",
            "confidence",
            "rationale",
            "alternatives",
            "warnings",
            "factors",
        }
        assert data["alternatives"][0] == {
            "platform": "kling",
            "confidence": 94,
            "note": "Better for dynamic backgrounds (waves, weather)",
        }

    def test_unknown_shot_type_resolves_to_auto(self, engine: PredictionEngine) -> None:
        unknown = engine.predict("drone_orbit", 7, OutputKind.VIDEO)
        auto = engine.predict(ShotType.AUTO, 7, OutputKind.VIDEO)

        assert unknown.to_dict() == auto.to_dict()


class TestScoringBounds:
    @pytest.mark.parametrize("shot_type", list(ShotType))
    @pytest.mark.parametrize("output_kind", list(OutputKind))
    @pytest.mark.parametrize("duration", [0, 2, 5, 7, 10, 15, 30])
    @pytest.mark.parametrize("requested", [None, "veo3", "midjourney", "hailuo-2"])
    def test_scores_bounded_and_winner_is_max(
        self,
        engine: PredictionEngine,
        shot_type: ShotType,
        output_kind: OutputKind,
        duration: int,
        requested: str | None,
    ) -> None:
        prediction = engine.predict(
            shot_type,
            duration,
            output_kind,
            description="people by the ocean at dusk",
            requested_platform=requested,
        )

        for entry in prediction.ranking:
            assert 0 <= entry.score <= 100
            assert all(0 <= value <= 100 for value in entry.factors.to_dict().values())
        assert prediction.confidence == max(s.score for s in prediction.ranking)
        assert prediction.score_for(prediction.recommended_platform) == prediction.confidence
        if requested:
            assert prediction.score_for(requested) is not None


class TestTieBreak:
    def test_first_listed_platform_wins_a_tie(self) -> None:
        twin = {"consistency": 8, "camera_lock": 8, "instruction_compliance": 8}
        catalog = PlatformCatalog(
            capabilities={
                "alpha": PlatformCapability(name="alpha", **twin),
                "beta": PlatformCapability(name="beta", **twin),
            },
            video_platforms=("beta", "alpha"),
        )

        prediction = PredictionEngine(platforms=catalog).predict("lateral_track", 7)

        assert prediction.score_for("alpha") == prediction.score_for("beta")
        assert prediction.recommended_platform == "beta"
        assert [s.platform for s in prediction.ranking] == ["beta", "alpha"]


def test_stills_ignore_the_shot_duration_window(engine: PredictionEngine) -> None:
    for duration in (0, 3, 30):
        prediction = engine.predict("lateral_track", duration, OutputKind.STILL)

        assert prediction.factors.duration_fit == 100
        assert not any("Duration" in w for w in prediction.warnings)
