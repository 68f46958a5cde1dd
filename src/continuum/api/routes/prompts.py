"""Prompt listing endpoints."""

from datetime import datetime

from fastapi import APIRouter, Query
from pydantic import BaseModel

from continuum.api.deps import CallerDep, SessionDep
from continuum.services.tenant_store import TenantStore

router = APIRouter(prefix="/prompts", tags=["Prompts"])


class UnratedPromptResponse(BaseModel):
    """A prompt still waiting for a rating."""

    prompt_id: str
    prompt_text: str
    platform: str
    brand_id: str
    created_at: datetime | None


class UnratedPromptsResponse(BaseModel):
    """Unrated prompts from earlier sessions."""

    prompts: list[UnratedPromptResponse]


@router.get(
    "/unrated",
    response_model=UnratedPromptsResponse,
    summary="List unrated prompts",
    description="Most recent unrated prompts created more than five minutes ago.",
)
def list_unrated_prompts(
    caller: CallerDep,
    session: SessionDep,
    limit: int = Query(default=1, ge=1, le=50),
) -> UnratedPromptsResponse:
    """List the caller's unrated prompts, newest first."""
    prompts = TenantStore(session).list_unrated(caller, limit=limit)
    return UnratedPromptsResponse(
        prompts=[
            UnratedPromptResponse(
                prompt_id=str(p.id),
                prompt_text=p.prompt_text,
                platform=p.platform,
                brand_id=str(p.tenant_id),
                created_at=p.created_at,
            )
            for p in prompts
        ]
    )
