"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from continuum.db.session import get_session
from continuum.services.prediction import PredictionEngine
from continuum.services.synthesizer import PromptSynthesizer

# Database session dependency
SessionDep = Annotated[Session, Depends(get_session)]


def get_caller_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    """Caller identity resolved by the upstream auth layer."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return x_user_id.strip()


CallerDep = Annotated[str, Depends(get_caller_id)]


def get_synthesizer() -> PromptSynthesizer:
    """Get a prompt synthesizer with the configured completion provider."""
    return PromptSynthesizer()


SynthesizerDep = Annotated[PromptSynthesizer, Depends(get_synthesizer)]


def get_prediction_engine() -> PredictionEngine:
    """Get a prediction engine over the default catalogs."""
    return PredictionEngine()


PredictionEngineDep = Annotated[PredictionEngine, Depends(get_prediction_engine)]
