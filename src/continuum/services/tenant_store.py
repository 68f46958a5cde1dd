"""Tenant-scoped access to brand profiles and prompt records.

Every read is scoped by the caller's identity: a brand or prompt that exists
but belongs to someone else is indistinguishable from one that does not.
"""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from continuum.config import settings
from continuum.db.models import BrandProfileModel, PromptModel
from continuum.domain.enums import Rating
from continuum.domain.models import BrandProfile, HistoryEntry
from continuum.logging import get_logger

logger = get_logger(__name__)

# Prompts younger than this belong to the current working session
UNRATED_MIN_AGE = timedelta(minutes=5)


class BrandNotFoundError(Exception):
    """Raised when a brand does not exist or is not owned by the caller."""

    pass


class PromptNotFoundError(Exception):
    """Raised when a prompt does not exist or is not owned by the caller."""

    pass


class TenantStore:
    """Reads brands and reads/writes prompt records for a caller."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # -------------------------------------------------------------------------
    # Brands
    # -------------------------------------------------------------------------

    def get_brand(self, brand_id: UUID, owner_id: str) -> BrandProfile:
        """Get a brand profile owned by the caller.

        Raises:
            BrandNotFoundError: If the brand is missing or owned by someone else
        """
        model = self.session.execute(
            select(BrandProfileModel).where(
                BrandProfileModel.id == brand_id,
                BrandProfileModel.owner_id == owner_id,
            )
        ).scalar_one_or_none()

        if model is None:
            logger.info("brand_access_denied", brand_id=str(brand_id))
            raise BrandNotFoundError("Brand not found or access denied")

        return BrandProfile(
            id=model.id,
            owner_id=model.owner_id,
            name=model.name,
            description=model.description,
            industry=model.industry,
            guidelines=list(model.guidelines or []),
            color_palette=list(model.color_palette or []),
            typography=dict(model.typography or {}),
            tone_keywords=list(model.tone_keywords or []),
            visual_rules=model.visual_rules,
            guidelines_source=model.guidelines_source,
            document_url=model.document_url,
        )

    def recent_history(self, brand_id: UUID, limit: int | None = None) -> list[HistoryEntry]:
        """Most recent prompts for a brand, newest first."""
        limit = limit or settings.history_lookback_count
        models = (
            self.session.execute(
                select(PromptModel)
                .where(PromptModel.tenant_id == brand_id)
                .order_by(desc(PromptModel.created_at))
                .limit(limit)
            )
            .scalars()
            .all()
        )
        return [
            HistoryEntry(
                prompt_text=m.prompt_text,
                user_input=m.user_input,
                platform=m.platform,
                rating=Rating.parse(m.rating),
                shot_type=m.shot_type,
                duration_seconds=m.duration_seconds,
            )
            for m in models
        ]

    # -------------------------------------------------------------------------
    # Prompts
    # -------------------------------------------------------------------------

    def create_prompt(
        self,
        brand_id: UUID,
        prompt_text: str,
        user_input: str,
        platform: str,
        output_kind: str,
        shot_type: str | None = None,
        duration_seconds: int | None = None,
        was_translated: bool = False,
        translated_phrase: str | None = None,
        session_id: UUID | None = None,
        user_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> PromptModel:
        """Insert a prompt record and flush it so its id is available."""
        prompt = PromptModel(
            tenant_id=brand_id,
            session_id=session_id,
            user_id=user_id,
            prompt_text=prompt_text,
            user_input=user_input,
            platform=platform,
            output_kind=output_kind,
            shot_type=shot_type,
            duration_seconds=duration_seconds,
            was_translated=was_translated,
            translated_phrase=translated_phrase,
            metadata_=metadata or {},
        )
        self.session.add(prompt)
        self.session.flush()
        logger.info("prompt_recorded", prompt_id=str(prompt.id), brand_id=str(brand_id))
        return prompt

    def get_prompt(self, prompt_id: UUID, owner_id: str) -> PromptModel:
        """Get a prompt whose brand is owned by the caller.

        Raises:
            PromptNotFoundError: If the prompt is missing or owned by someone else
        """
        prompt = self.session.execute(
            select(PromptModel)
            .join(BrandProfileModel, PromptModel.tenant_id == BrandProfileModel.id)
            .where(
                PromptModel.id == prompt_id,
                BrandProfileModel.owner_id == owner_id,
            )
        ).scalar_one_or_none()

        if prompt is None:
            logger.info("prompt_access_denied", prompt_id=str(prompt_id))
            raise PromptNotFoundError("Prompt not found or access denied")
        return prompt

    def record_feedback(
        self,
        prompt: PromptModel,
        rating: Rating,
        notes: str | None = None,
        issues: list[str] | None = None,
    ) -> PromptModel:
        """Store a rating with its notes, issues and timestamp."""
        metadata = dict(prompt.metadata_ or {})
        metadata["feedback_at"] = datetime.now(UTC).isoformat()
        if issues:
            metadata["issues_reported"] = list(issues)
        else:
            metadata.pop("issues_reported", None)

        prompt.rating = rating.value
        prompt.feedback_notes = notes or None
        # Reassign so the JSON column is flagged dirty
        prompt.metadata_ = metadata
        self.session.flush()
        return prompt

    def list_unrated(
        self,
        owner_id: str,
        limit: int = 1,
        min_age: timedelta = UNRATED_MIN_AGE,
    ) -> list[PromptModel]:
        """Unrated prompts from earlier sessions, newest first."""
        cutoff = datetime.now(UTC) - min_age
        return list(
            self.session.execute(
                select(PromptModel)
                .join(BrandProfileModel, PromptModel.tenant_id == BrandProfileModel.id)
                .where(
                    BrandProfileModel.owner_id == owner_id,
                    PromptModel.rating.is_(None),
                    PromptModel.created_at < cutoff,
                )
                .order_by(desc(PromptModel.created_at))
                .limit(limit)
            )
            .scalars()
            .all()
        )
