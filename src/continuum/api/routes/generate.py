"""Prompt generation and refinement endpoints."""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from continuum.api.deps import CallerDep, SessionDep, SynthesizerDep
from continuum.domain.models import GenerationRequest, RequestValidationError
from continuum.logging import get_logger
from continuum.services.generation import GenerationService
from continuum.services.synthesizer import GenerationError
from continuum.services.tenant_store import BrandNotFoundError

router = APIRouter(tags=["Generation"])
logger = get_logger(__name__)


class GenerateRequest(BaseModel):
    """Request to synthesize a prompt for one shot."""

    brand_id: UUID
    description: str = Field(..., max_length=5000)
    platform: str = Field(..., max_length=50)
    output_kind: str = Field(default="video", max_length=20)
    duration_seconds: int | None = None
    shot_type: str | None = Field(default=None, max_length=50)
    screen_direction: str | None = Field(default=None, max_length=20)
    session_id: UUID | None = None


class GenerateResponse(BaseModel):
    """Synthesized prompt with its prediction."""

    prompt_id: str
    prompt_text: str
    applied_patterns: list[str]
    suggestions: list[str]
    warnings: list[str]
    was_translated: bool
    matched_phrase: str | None
    complexity_warning: str | None
    technical_notes: str
    prediction: dict[str, Any]


class RefineRequest(BaseModel):
    """Request to refine an existing prompt."""

    original_prompt: str = Field(..., max_length=10000)
    platform: str = Field(..., max_length=50)
    feedback: str | None = Field(default=None, max_length=2000)


class RefineResponse(BaseModel):
    """Refined prompt."""

    refined_prompt: str
    warnings: list[str]


@router.post(
    "/generate",
    response_model=GenerateResponse,
    summary="Generate prompt",
    description="Synthesize a platform-optimized prompt and predict platform success.",
)
async def generate_prompt(
    request: GenerateRequest,
    caller: CallerDep,
    session: SessionDep,
    synthesizer: SynthesizerDep,
) -> GenerateResponse:
    """Generate a prompt for a brand owned by the caller."""
    try:
        generation_request = GenerationRequest(
            tenant_id=request.brand_id,
            description=request.description,
            platform=request.platform,
            output_kind=request.output_kind,
            duration_seconds=request.duration_seconds,
            shot_type=request.shot_type,
            screen_direction=request.screen_direction,
            session_id=request.session_id,
            user_id=caller,
        )
    except RequestValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    service = GenerationService(session, synthesizer=synthesizer)
    try:
        result = await service.generate(generation_request)
    except BrandNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except GenerationError as e:
        logger.error("generation_failed", brand_id=str(request.brand_id), error=str(e))
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return GenerateResponse(**result.to_dict())


@router.post(
    "/refine",
    response_model=RefineResponse,
    summary="Refine prompt",
    description="Refine an existing prompt with feedback while preserving its structure.",
)
async def refine_prompt(
    request: RefineRequest,
    caller: CallerDep,
    synthesizer: SynthesizerDep,
) -> RefineResponse:
    """Refine a prompt."""
    if not request.original_prompt.strip() or not request.platform.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields"
        )

    try:
        result = await synthesizer.refine(
            request.original_prompt, request.platform, request.feedback
        )
    except GenerationError as e:
        logger.error("refinement_failed", platform=request.platform, error=str(e))
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    logger.info("refinement_completed", caller=caller, platform=request.platform)
    return RefineResponse(refined_prompt=result.prompt_text, warnings=result.warnings)
