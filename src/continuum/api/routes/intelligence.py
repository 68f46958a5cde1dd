"""Brand intelligence endpoints."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from continuum.api.deps import CallerDep, SessionDep
from continuum.services.intelligence import BrandIntelligenceStore
from continuum.services.tenant_store import BrandNotFoundError, TenantStore

router = APIRouter(prefix="/brands", tags=["Intelligence"])


class PatternResponse(BaseModel):
    """A learned pattern."""

    pattern_type: str
    pattern_value: str
    confidence: float
    occurrences: int
    last_seen: datetime | None


class IntelligenceResponse(BaseModel):
    """Learned patterns for a brand."""

    brand_id: str
    patterns: list[PatternResponse]


@router.get(
    "/{brand_id}/intelligence",
    response_model=IntelligenceResponse,
    summary="List learned patterns",
    description="Learned patterns for a brand, strongest first.",
)
def get_brand_intelligence(
    brand_id: UUID,
    caller: CallerDep,
    session: SessionDep,
    min_confidence: float = Query(default=0.0, ge=0.0, le=1.0),
    limit: int = Query(default=50, ge=1, le=500),
) -> IntelligenceResponse:
    """List a brand's learned patterns."""
    try:
        brand = TenantStore(session).get_brand(brand_id, caller)
    except BrandNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    records = BrandIntelligenceStore(session).list_for_tenant(
        brand.id, min_confidence=min_confidence, limit=limit
    )
    return IntelligenceResponse(
        brand_id=str(brand.id),
        patterns=[
            PatternResponse(
                pattern_type=r.pattern_type,
                pattern_value=r.pattern_value,
                confidence=r.confidence,
                occurrences=r.occurrences,
                last_seen=r.last_seen,
            )
            for r in records
        ],
    )
