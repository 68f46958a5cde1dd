"""Domain models - pure Python classes independent of database."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from continuum.domain.enums import OutputKind, Rating, ScreenDirection, ShotType


class RequestValidationError(ValueError):
    """Raised when a generation request is malformed."""

    pass


@dataclass
class GenerationRequest:
    """Request to synthesize a generation instruction for one shot."""

    tenant_id: UUID
    description: str
    platform: str
    output_kind: OutputKind = OutputKind.VIDEO
    duration_seconds: int | None = None
    shot_type: ShotType = ShotType.AUTO
    screen_direction: ScreenDirection | None = None
    session_id: UUID | None = None
    user_id: str | None = None

    def __post_init__(self) -> None:
        """Validate and normalize values."""
        if not self.description or not self.description.strip():
            raise RequestValidationError("description is required")
        if not self.platform or not self.platform.strip():
            raise RequestValidationError("platform is required")
        self.platform = self.platform.strip().lower()

        try:
            self.output_kind = OutputKind(str(self.output_kind).lower())
        except ValueError:
            raise RequestValidationError(
                f"output_kind must be one of: {', '.join(k.value for k in OutputKind)}"
            ) from None

        if self.duration_seconds is not None and self.duration_seconds < 0:
            raise RequestValidationError("duration_seconds must be non-negative")

        # Unknown shot types are not an error, they select the auto template
        self.shot_type = ShotType.resolve(self.shot_type)

        if self.screen_direction is not None:
            try:
                self.screen_direction = ScreenDirection(str(self.screen_direction).lower())
            except ValueError:
                raise RequestValidationError(
                    "screen_direction must be 'left-to-right' or 'right-to-left'"
                ) from None

    def effective_duration(self, default_video_duration: int = 7) -> int:
        """Duration used for budgeting: explicit value, else 7s video / 0s still."""
        if self.duration_seconds:
            return self.duration_seconds
        return default_video_duration if self.output_kind == OutputKind.VIDEO else 0


@dataclass
class BrandProfile:
    """Read-only view of a tenant's brand record."""

    id: UUID
    owner_id: str
    name: str
    description: str | None = None
    industry: str | None = None
    guidelines: list[str] = field(default_factory=list)
    color_palette: list[dict[str, str]] = field(default_factory=list)
    typography: dict[str, str] = field(default_factory=dict)
    tone_keywords: list[str] = field(default_factory=list)
    visual_rules: str | None = None
    guidelines_source: str | None = None
    document_url: str | None = None

    @property
    def has_structured_guidelines(self) -> bool:
        """Whether structured guidelines were configured for this brand."""
        return bool(self.guidelines_source) and bool(
            self.color_palette or self.typography or self.tone_keywords or self.visual_rules
        )


@dataclass
class LearnedPattern:
    """A brand intelligence record as seen by the engine."""

    tenant_id: UUID
    pattern_type: str
    pattern_value: str
    confidence: float
    occurrences: int = 1
    last_seen: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "pattern_type": self.pattern_type,
            "pattern_value": self.pattern_value,
            "confidence": round(self.confidence, 4),
            "occurrences": self.occurrences,
            "last_seen": self.last_seen.isoformat() if self.last_seen else None,
        }


@dataclass
class HistoryEntry:
    """A past prompt for the same tenant, newest first."""

    prompt_text: str
    user_input: str
    platform: str
    rating: Rating | None = None
    shot_type: str | None = None
    duration_seconds: int | None = None
