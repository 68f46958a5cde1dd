"""Platform success prediction.

Each candidate platform is scored on four factors, 0-100 each:

    score = 0.30 * camera_requirement + 0.25 * shot_type_match
          + 0.20 * duration_fit + 0.25 * platform_strength

- camera_requirement: platform camera lock blended by how much the shot
  needs it (a shot that does not care about camera lock scores near 100
  everywhere)
- shot_type_match: same blend for subject consistency
- duration_fit: 100 inside the shot's optimal window, 70 too short, 60 too
  long, plus platform sweet-spot bonuses
- platform_strength: instruction compliance plus keyword and shot-type bonuses

The highest score wins; ties keep catalog order.
"""

import math
from dataclasses import dataclass, field
from typing import Any

from continuum.domain.enums import OutputKind, ShotType
from continuum.logging import get_logger
from continuum.presets.platforms import (
    DEFAULT_PLATFORM_CATALOG,
    PlatformCapability,
    PlatformCatalog,
)
from continuum.presets.shots import DEFAULT_SHOT_CATALOG, ShotCatalog, ShotRequirements

logger = get_logger(__name__)

CAMERA_WEIGHT = 0.30
SHOT_TYPE_WEIGHT = 0.25
DURATION_WEIGHT = 0.20
STRENGTH_WEIGHT = 0.25

TOO_SHORT_FIT = 70
TOO_LONG_FIT = 60
STILLS_PLATFORM_STRENGTH = 90
VIDEO_PLATFORM_STILL_STRENGTH = 30

# Warn when the requested platform trails the winner by more than this
SWITCH_MARGIN = 10
MAX_ALTERNATIVES = 2


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounding up.

    The value is first snapped to 6 decimals so float noise such as
    93.49999999999999 still rounds like 93.5.
    """
    return int(math.floor(round(value, 6) + 0.5))


def _clamp_score(value: float) -> float:
    return min(100.0, max(0.0, value))


@dataclass
class PredictionFactors:
    """The four weighted sub-scores, each 0-100."""

    shot_type_match: int
    duration_fit: int
    camera_requirement: int
    platform_strength: int

    def to_dict(self) -> dict[str, int]:
        return {
            "shotTypeMatch": self.shot_type_match,
            "durationFit": self.duration_fit,
            "cameraRequirement": self.camera_requirement,
            "platformStrength": self.platform_strength,
        }


@dataclass
class PlatformScore:
    """Score of one evaluated platform."""

    platform: str
    score: int
    factors: PredictionFactors
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "platform": self.platform,
            "score": self.score,
            "factors": self.factors.to_dict(),
            "warnings": list(self.warnings),
        }


@dataclass
class AlternativePlatform:
    """A runner-up platform with a short static note."""

    platform: str
    confidence: int
    note: str

    def to_dict(self) -> dict[str, Any]:
        return {"platform": self.platform, "confidence": self.confidence, "note": self.note}


@dataclass
class PlatformPrediction:
    """Recommendation returned alongside a synthesized prompt."""

    recommended_platform: str
    confidence: int
    rationale: str
    alternatives: list[AlternativePlatform]
    warnings: list[str]
    factors: PredictionFactors
    ranking: list[PlatformScore] = field(default_factory=list)

    def score_for(self, platform: str) -> int | None:
        """Score of an evaluated platform, if it was evaluated."""
        for entry in self.ranking:
            if entry.platform == platform:
                return entry.score
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire format used by API clients."""
        return {
            "recommendedPlatform": self.recommended_platform,
            "confidence": self.confidence,
            "rationale": self.rationale,
            "alternatives": [a.to_dict() for a in self.alternatives],
            "warnings": list(self.warnings),
            "factors": self.factors.to_dict(),
            "ranking": [{"platform": s.platform, "score": s.score} for s in self.ranking],
        }


class PredictionEngine:
    """Scores candidate platforms for a shot and recommends one.

    Catalogs are injected so tests can substitute their own tables.
    """

    def __init__(
        self,
        platforms: PlatformCatalog = DEFAULT_PLATFORM_CATALOG,
        shots: ShotCatalog = DEFAULT_SHOT_CATALOG,
    ) -> None:
        self.platforms = platforms
        self.shots = shots

    def predict(
        self,
        shot_type: str | ShotType | None,
        duration: float,
        output_kind: OutputKind = OutputKind.VIDEO,
        description: str = "",
        requested_platform: str | None = None,
    ) -> PlatformPrediction:
        """Rank candidate platforms and build the recommendation.

        Args:
            shot_type: Shot type hint (unknown values resolve to auto)
            duration: Clip duration in seconds
            output_kind: Video or still
            description: Free-text shot description scanned for keyword cues
            requested_platform: Platform the caller intends to use, if any

        Returns:
            PlatformPrediction with the winner, two alternatives and warnings
        """
        resolved = ShotType.resolve(shot_type)
        output_kind = OutputKind(output_kind)
        requested = requested_platform.strip().lower() if requested_platform else None

        candidates = list(self.platforms.candidates(output_kind))
        if requested and requested not in candidates:
            candidates.append(requested)

        scores = [
            self.score_platform(p, resolved, duration, output_kind, description)
            for p in candidates
        ]
        # sorted() is stable, so ties keep candidate order
        ranking = sorted(scores, key=lambda s: s.score, reverse=True)
        best = ranking[0]

        alternatives = [
            AlternativePlatform(
                platform=s.platform,
                confidence=s.score,
                note=self.platforms.capability(s.platform).alternative_note,
            )
            for s in ranking[1 : 1 + MAX_ALTERNATIVES]
        ]

        warnings = list(best.warnings)
        if requested and requested != best.platform:
            requested_score = next(s for s in ranking if s.platform == requested)
            for warning in requested_score.warnings:
                if warning not in warnings:
                    warnings.append(warning)
            if requested_score.score < best.score - SWITCH_MARGIN:
                warnings.append(
                    f"{requested} scores {requested_score.score}% vs {best.platform} "
                    f"at {best.score}%. Consider switching."
                )

        prediction = PlatformPrediction(
            recommended_platform=best.platform,
            confidence=best.score,
            rationale=self._rationale(best.platform, resolved, duration),
            alternatives=alternatives,
            warnings=warnings,
            factors=best.factors,
            ranking=ranking,
        )
        logger.debug(
            "prediction_computed",
            shot_type=resolved.value,
            output_kind=output_kind.value,
            recommended=best.platform,
            confidence=best.score,
        )
        return prediction

    def score_platform(
        self,
        platform: str,
        shot_type: ShotType,
        duration: float,
        output_kind: OutputKind,
        description: str = "",
    ) -> PlatformScore:
        """Compute the four factors and overall score for one platform."""
        caps = self.platforms.capability(platform)
        reqs = self.shots.requirements_for(shot_type)
        warnings: list[str] = []

        camera_requirement = _blend(caps.camera_lock, reqs.camera_lock_importance)
        if reqs.camera_lock_importance >= 9 and caps.camera_lock < 8:
            warnings.append(f"{caps.name} may drift on camera-critical shots")

        shot_type_match = _blend(caps.consistency, reqs.consistency_importance)
        if reqs.consistency_importance >= 9 and caps.consistency < 8:
            warnings.append(f"{caps.name} may show vehicle inconsistency")

        duration_fit = self._duration_fit(caps, reqs, duration, output_kind, warnings)

        supported = caps.supports(output_kind)
        if supported:
            platform_strength = self._platform_strength(
                caps, reqs, shot_type, output_kind, description
            )
        else:
            platform_strength = 0.0
            warnings.append(f"{caps.name} cannot produce {output_kind.value} output")

        factors = PredictionFactors(
            shot_type_match=round_half_up(shot_type_match),
            duration_fit=round_half_up(duration_fit),
            camera_requirement=round_half_up(camera_requirement),
            platform_strength=round_half_up(platform_strength),
        )

        if supported:
            weighted = (
                camera_requirement * CAMERA_WEIGHT
                + shot_type_match * SHOT_TYPE_WEIGHT
                + duration_fit * DURATION_WEIGHT
                + platform_strength * STRENGTH_WEIGHT
            )
            score = round_half_up(_clamp_score(weighted))
        else:
            score = 0

        return PlatformScore(platform=caps.name, score=score, factors=factors, warnings=warnings)

    @staticmethod
    def _duration_fit(
        caps: PlatformCapability,
        reqs: ShotRequirements,
        duration: float,
        output_kind: OutputKind,
        warnings: list[str],
    ) -> float:
        # Stills skip the shot duration window; it only bounds clip length
        if output_kind == OutputKind.STILL:
            return 100.0

        fit = 100.0
        if duration < reqs.optimal_duration_min:
            fit = TOO_SHORT_FIT
            warnings.append("Duration may be too short for this shot type")
        elif duration > reqs.optimal_duration_max:
            fit = TOO_LONG_FIT
            warnings.append("Duration exceeds optimal range - consistency may degrade")

        for bonus in caps.duration_bonuses:
            if bonus.applies(duration):
                fit = min(100.0, fit + bonus.bonus)
        return fit

    @staticmethod
    def _platform_strength(
        caps: PlatformCapability,
        reqs: ShotRequirements,
        shot_type: ShotType,
        output_kind: OutputKind,
        description: str,
    ) -> float:
        if output_kind == OutputKind.STILL:
            return STILLS_PLATFORM_STRENGTH if caps.stills_only else VIDEO_PLATFORM_STILL_STRENGTH

        strength = float(caps.instruction_compliance * 10)
        if reqs.prefers_static_camera:
            strength += caps.static_camera_bonus
        if reqs.prefers_dynamic_background:
            strength += caps.dynamic_background_bonus
        strength += caps.shot_type_bonuses.get(shot_type, 0)
        for keyword_bonus in caps.keyword_bonuses:
            if keyword_bonus.applies(description):
                strength += keyword_bonus.bonus
        if reqs.camera_lock_importance >= 9:
            strength -= caps.precision_penalty
        return _clamp_score(strength)

    def _rationale(self, platform: str, shot_type: ShotType, duration: float) -> str:
        caps = self.platforms.capability(platform)
        if not caps.validated:
            return f"{platform} selected based on available data."

        strengths: list[str] = []
        if caps.camera_lock >= 9:
            strengths.append("excellent camera lock")
        if caps.consistency >= 9:
            strengths.append("high vehicle consistency")
        if caps.signature_strength:
            strengths.append(caps.signature_strength)
        for bonus in caps.duration_bonuses:
            if bonus.strength and bonus.applies(duration):
                strengths.append(bonus.strength)

        label = self.shots.requirements_for(shot_type).label
        if not strengths:
            return f"{platform} is a reasonable choice for {label}."
        return f"{platform} excels at {label} with {', '.join(strengths)}."


def _blend(rating: int, importance: int) -> float:
    """Blend a 0-10 platform rating with a 0-10 shot importance into 0-100."""
    rating_score = min(100.0, rating * 10.0)
    weight = importance / 10
    return rating_score * weight + 100 * (1 - weight)
