"""Feedback learning.

A rating is always stored on the prompt record first. Learning from it is
best-effort and runs afterwards in its own transaction:

- good / perfect: reinforce the vocabulary terms found in the prompt text and
  the platform preference (+0.10 each)
- failed / poor: lower the platform preference (-0.15) and record each
  reported issue against the platform
- okay: nothing beyond the rating itself
"""

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from continuum.config import settings
from continuum.domain.enums import IssueTag, PatternType, Rating
from continuum.domain.models import LearnedPattern
from continuum.logging import get_logger
from continuum.services.intelligence import BrandIntelligenceStore
from continuum.services.tenant_store import TenantStore

logger = get_logger(__name__)


class InvalidRatingError(ValueError):
    """Raised when a rating is outside the accepted vocabulary."""

    pass


class PromptAlreadyRatedError(Exception):
    """Raised when a prompt already carries a rating."""

    pass


@dataclass(frozen=True)
class VocabularyTerm:
    """A trigger phrase that maps to a learned pattern."""

    pattern_type: PatternType
    trigger: str
    value: str | None = None

    @property
    def pattern_value(self) -> str:
        return self.value or self.trigger


def _terms(pattern_type: PatternType, *triggers: str) -> list[VocabularyTerm]:
    return [VocabularyTerm(pattern_type, t) for t in triggers]


DEFAULT_VOCABULARY: tuple[VocabularyTerm, ...] = (
    *_terms(
        PatternType.CAMERA_TYPE,
        "lateral tracking",
        "follow behind",
        "wide establishing",
        "static hero",
        "interior",
        "detail",
        "macro",
        "aerial",
        "drone",
        "mounted on left",
        "mounted on right",
    ),
    *_terms(
        PatternType.LIGHTING,
        "golden hour",
        "blue hour",
        "studio lighting",
        "natural light",
        "dramatic lighting",
        "sunset",
        "overcast",
        "night",
    ),
    *_terms(
        PatternType.MOTION_STYLE,
        "steady",
        "smooth",
        "fast",
        "slow",
        "accelerating",
        "cruising",
        "drifting",
        "cornering",
    ),
    VocabularyTerm(PatternType.SCREEN_DIRECTION, "left to right", "left-to-right"),
    VocabularyTerm(PatternType.SCREEN_DIRECTION, "left-to-right", "left-to-right"),
    VocabularyTerm(PatternType.SCREEN_DIRECTION, "right to left", "right-to-left"),
    VocabularyTerm(PatternType.SCREEN_DIRECTION, "right-to-left", "right-to-left"),
)

# Notes keywords used to infer issue tags when none were supplied
ISSUE_KEYWORDS: dict[IssueTag, tuple[str, ...]] = {
    IssueTag.MOTION: ("motion", "moving", "speed"),
    IssueTag.LIGHTING: ("light", "dark", "bright"),
    IssueTag.COLOR: ("color", "muddy", "saturate"),
    IssueTag.CONSISTENCY: ("consistent", "flicker", "jump"),
    IssueTag.PHYSICS: ("physics", "realistic", "fake"),
}


@dataclass
class FeedbackResult:
    """Outcome of a rating event."""

    prompt_id: UUID
    rating: Rating
    issues: list[str] = field(default_factory=list)
    learned: list[LearnedPattern] = field(default_factory=list)
    learning_failed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "prompt_id": str(self.prompt_id),
            "rating": self.rating.value,
            "issues_detected": list(self.issues),
            "patterns_updated": [p.to_dict() for p in self.learned],
            "learning_failed": self.learning_failed,
        }


def extract_patterns(
    text: str, vocabulary: tuple[VocabularyTerm, ...] | list[VocabularyTerm] = DEFAULT_VOCABULARY
) -> list[tuple[str, str]]:
    """(pattern type, pattern value) pairs whose trigger occurs in the text."""
    lower = (text or "").lower()
    found: list[tuple[str, str]] = []
    for term in vocabulary:
        if term.trigger.lower() in lower:
            key = (str(term.pattern_type), term.pattern_value)
            if key not in found:
                found.append(key)
    return found


def normalize_issues(issues: list[str] | None, notes: str | None) -> list[str]:
    """Recognized issue tags, inferred from notes when none were supplied.

    Unrecognized tags are dropped silently.
    """
    if issues:
        recognized: list[str] = []
        for issue in issues:
            tag = str(issue).strip().lower()
            if tag in IssueTag._value2member_map_ and tag not in recognized:
                recognized.append(tag)
        return recognized

    lower = (notes or "").lower()
    return [
        tag.value
        for tag, keywords in ISSUE_KEYWORDS.items()
        if any(k in lower for k in keywords)
    ]


class FeedbackLearner:
    """Records ratings and learns brand intelligence from them."""

    def __init__(
        self,
        session: Session,
        vocabulary: tuple[VocabularyTerm, ...] | list[VocabularyTerm] = DEFAULT_VOCABULARY,
        store: BrandIntelligenceStore | None = None,
        tenants: TenantStore | None = None,
    ) -> None:
        self.session = session
        self.vocabulary = vocabulary
        self.store = store or BrandIntelligenceStore(session)
        self.tenants = tenants or TenantStore(session)

    def record(
        self,
        prompt_id: UUID,
        owner_id: str,
        rating: str | int | Rating,
        notes: str | None = None,
        issues: list[str] | None = None,
    ) -> FeedbackResult:
        """Record a rating and learn from it.

        Args:
            prompt_id: Prompt being rated
            owner_id: Caller identity, must own the prompt's brand
            rating: Rating name or 1-5 score
            notes: Optional free-text notes
            issues: Optional structured issue tags

        Returns:
            FeedbackResult describing what was stored and learned

        Raises:
            InvalidRatingError: If the rating is not in the vocabulary
            PromptNotFoundError: If the caller does not own the prompt
            PromptAlreadyRatedError: If the prompt was rated before
        """
        parsed = Rating.parse(rating)
        if parsed is None:
            valid = ", ".join(r.value for r in Rating)
            raise InvalidRatingError(f"Invalid rating. Valid values: {valid} (or 1-5)")

        prompt = self.tenants.get_prompt(prompt_id, owner_id)
        if prompt.rating is not None:
            logger.info("feedback_rejected", prompt_id=str(prompt.id), rating=prompt.rating)
            raise PromptAlreadyRatedError("Prompt has already been rated")

        issue_tags = normalize_issues(issues, notes) if parsed.is_negative else []

        # Primary write
        self.tenants.record_feedback(prompt, parsed, notes=notes, issues=issue_tags)
        self.session.commit()
        logger.info(
            "feedback_recorded",
            prompt_id=str(prompt.id),
            rating=parsed.value,
            issues=issue_tags,
        )

        result = FeedbackResult(prompt_id=prompt.id, rating=parsed, issues=issue_tags)
        if not (parsed.is_positive or parsed.is_negative):
            return result

        # Secondary writes never fail the response
        tenant_id = prompt.tenant_id
        try:
            result.learned = self._learn(
                tenant_id, prompt.platform, prompt.prompt_text, parsed, issue_tags
            )
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            result.learned = []
            result.learning_failed = True
            logger.error(
                "intelligence_upsert_failed",
                prompt_id=str(prompt_id),
                tenant_id=str(tenant_id),
                error=str(e),
            )

        return result

    def _learn(
        self,
        tenant_id: UUID,
        platform: str,
        prompt_text: str,
        rating: Rating,
        issues: list[str],
    ) -> list[LearnedPattern]:
        learned: list[LearnedPattern] = []

        if rating.is_positive:
            step = settings.intelligence_positive_step
            for pattern_type, value in extract_patterns(prompt_text, self.vocabulary):
                learned.append(self.store.adjust(tenant_id, pattern_type, value, step))
            learned.append(
                self.store.adjust(tenant_id, PatternType.PLATFORM_PREFERENCE, platform, step)
            )
        else:
            learned.append(
                self.store.adjust(
                    tenant_id,
                    PatternType.PLATFORM_PREFERENCE,
                    platform,
                    -settings.intelligence_negative_step,
                )
            )
            for issue in issues:
                learned.append(self.store.record_negative(tenant_id, platform, issue))

        logger.info(
            "feedback_learned",
            tenant_id=str(tenant_id),
            rating=rating.value,
            patterns=len(learned),
        )
        return learned
