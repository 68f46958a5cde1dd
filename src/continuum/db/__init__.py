"""Database layer."""

from continuum.db.models import (
    Base,
    BrandIntelligenceModel,
    BrandProfileModel,
    PromptModel,
)
from continuum.db.session import get_engine, get_session, get_session_context, init_db

__all__ = [
    "Base",
    "get_engine",
    "get_session",
    "get_session_context",
    "init_db",
    # Models
    "BrandIntelligenceModel",
    "BrandProfileModel",
    "PromptModel",
]
