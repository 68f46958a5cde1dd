"""Platform prediction endpoint."""

from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from continuum.api.deps import CallerDep, PredictionEngineDep
from continuum.config import settings
from continuum.domain.enums import OutputKind

router = APIRouter(tags=["Prediction"])


class PredictRequest(BaseModel):
    """Request to rank platforms for a shot."""

    shot_type: str | None = Field(default=None, max_length=50)
    duration_seconds: float | None = None
    output_kind: str = Field(default="video", max_length=20)
    description: str = Field(default="", max_length=5000)
    platform: str | None = Field(default=None, max_length=50)


@router.post(
    "/predict",
    summary="Predict platform success",
    description="Score candidate platforms for a shot without generating a prompt.",
)
async def predict_platform(
    request: PredictRequest,
    caller: CallerDep,
    engine: PredictionEngineDep,
) -> dict[str, Any]:
    """Rank candidate platforms."""
    try:
        output_kind = OutputKind(request.output_kind.lower())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"output_kind must be one of: {', '.join(k.value for k in OutputKind)}",
        ) from None

    if request.duration_seconds is not None and request.duration_seconds < 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="duration_seconds must be non-negative"
        )

    duration = request.duration_seconds
    if duration is None:
        duration = settings.default_video_duration if output_kind == OutputKind.VIDEO else 0

    prediction = engine.predict(
        request.shot_type,
        duration,
        output_kind,
        description=request.description,
        requested_platform=request.platform,
    )
    return prediction.to_dict()
