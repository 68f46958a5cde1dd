"""Domain models and enumerations."""

from continuum.domain.enums import (
    IssueTag,
    OutputKind,
    PatternType,
    Rating,
    ScreenDirection,
    ShotType,
)
from continuum.domain.models import (
    BrandProfile,
    GenerationRequest,
    HistoryEntry,
    LearnedPattern,
    RequestValidationError,
)

__all__ = [
    "BrandProfile",
    "GenerationRequest",
    "HistoryEntry",
    "IssueTag",
    "LearnedPattern",
    "OutputKind",
    "PatternType",
    "Rating",
    "RequestValidationError",
    "ScreenDirection",
    "ShotType",
]
