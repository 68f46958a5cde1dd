"""Prompt feedback endpoint."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from continuum.api.deps import CallerDep, SessionDep
from continuum.logging import get_logger
from continuum.services.feedback import (
    FeedbackLearner,
    InvalidRatingError,
    PromptAlreadyRatedError,
)
from continuum.services.tenant_store import PromptNotFoundError

router = APIRouter(tags=["Feedback"])
logger = get_logger(__name__)


class FeedbackRequest(BaseModel):
    """Rating for a generated prompt."""

    prompt_id: UUID
    rating: str | int
    notes: str | None = Field(default=None, max_length=5000)
    issues: list[str] | None = None


class FeedbackResponse(BaseModel):
    """What was stored and learned."""

    success: bool
    rating: str
    issues_detected: list[str]
    patterns_updated: int
    learning_failed: bool


@router.post(
    "/feedback",
    response_model=FeedbackResponse,
    summary="Rate a prompt",
    description="Store a rating for a prompt and learn brand intelligence from it.",
)
def submit_feedback(
    request: FeedbackRequest,
    caller: CallerDep,
    session: SessionDep,
) -> FeedbackResponse:
    """Record feedback for a prompt owned by the caller."""
    learner = FeedbackLearner(session)
    try:
        result = learner.record(
            request.prompt_id,
            caller,
            request.rating,
            notes=request.notes,
            issues=request.issues,
        )
    except InvalidRatingError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PromptNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PromptAlreadyRatedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return FeedbackResponse(
        success=True,
        rating=result.rating.value,
        issues_detected=result.issues,
        patterns_updated=len(result.learned),
        learning_failed=result.learning_failed,
    )
