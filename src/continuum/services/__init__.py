"""Application services."""

from continuum.services.complexity import ComplexityBudget, get_complexity_budget
from continuum.services.feedback import (
    FeedbackLearner,
    FeedbackResult,
    InvalidRatingError,
    PromptAlreadyRatedError,
)
from continuum.services.generation import GenerationResult, GenerationService
from continuum.services.history import HistoryPatternAnalyzer, HistoryPatterns
from continuum.services.intelligence import BrandIntelligenceStore
from continuum.services.policy import ContentPolicyTranslator, TranslationResult
from continuum.services.prediction import PlatformPrediction, PredictionEngine
from continuum.services.synthesizer import GenerationError, PromptSynthesizer
from continuum.services.tenant_store import BrandNotFoundError, PromptNotFoundError, TenantStore

__all__ = [
    "BrandIntelligenceStore",
    "BrandNotFoundError",
    "ComplexityBudget",
    "ContentPolicyTranslator",
    "FeedbackLearner",
    "FeedbackResult",
    "GenerationError",
    "GenerationResult",
    "GenerationService",
    "HistoryPatternAnalyzer",
    "HistoryPatterns",
    "InvalidRatingError",
    "PlatformPrediction",
    "PromptAlreadyRatedError",
    "PredictionEngine",
    "PromptNotFoundError",
    "PromptSynthesizer",
    "TenantStore",
    "TranslationResult",
    "get_complexity_budget",
]
