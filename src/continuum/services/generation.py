"""End-to-end prompt generation.

Pipeline for one request:

1. Check the caller owns the brand
2. Read recent history and learned intelligence for the brand
3. Synthesize the prompt (one completion call)
4. Predict platform success
5. Store the prompt record (primary write)
6. Reinforce patterns detected in history (best-effort)
"""

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from continuum.config import settings
from continuum.domain.models import GenerationRequest
from continuum.logging import get_logger
from continuum.services.history import HistoryPatternAnalyzer, HistoryPatterns
from continuum.services.intelligence import BrandIntelligenceStore
from continuum.services.prediction import PlatformPrediction, PredictionEngine
from continuum.services.synthesizer import PromptSynthesizer, SynthesisContext
from continuum.services.tenant_store import TenantStore

logger = get_logger(__name__)


@dataclass
class GenerationResult:
    """Everything returned to the caller for one generation."""

    prompt_id: UUID
    prompt_text: str
    prediction: PlatformPrediction
    applied_patterns: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    was_translated: bool = False
    matched_phrase: str | None = None
    complexity_warning: str | None = None
    technical_notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "prompt_id": str(self.prompt_id),
            "prompt_text": self.prompt_text,
            "applied_patterns": list(self.applied_patterns),
            "suggestions": list(self.suggestions),
            "warnings": list(self.warnings),
            "was_translated": self.was_translated,
            "matched_phrase": self.matched_phrase,
            "complexity_warning": self.complexity_warning,
            "technical_notes": self.technical_notes,
            "prediction": self.prediction.to_dict(),
        }


class GenerationService:
    """Orchestrates a generation request against the tenant's state."""

    def __init__(
        self,
        session: Session,
        synthesizer: PromptSynthesizer | None = None,
        predictor: PredictionEngine | None = None,
        analyzer: HistoryPatternAnalyzer | None = None,
    ) -> None:
        self.session = session
        self.synthesizer = synthesizer or PromptSynthesizer()
        self.predictor = predictor or PredictionEngine(
            platforms=self.synthesizer.platforms, shots=self.synthesizer.shots
        )
        self.analyzer = analyzer or HistoryPatternAnalyzer()
        self.tenants = TenantStore(session)
        self.intelligence = BrandIntelligenceStore(session)

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Generate a prompt for a request.

        Raises:
            BrandNotFoundError: If the caller does not own the brand
            GenerationError: If the completion service fails (nothing is stored)
        """
        brand = self.tenants.get_brand(request.tenant_id, request.user_id or "")

        history = self.tenants.recent_history(brand.id)
        patterns = self.analyzer.analyze(history)
        intelligence = self.intelligence.list_for_tenant(
            brand.id,
            min_confidence=settings.intelligence_min_confidence,
            limit=settings.intelligence_max_records,
        )
        issues = self.intelligence.platform_issues(brand.id, request.platform)

        synthesis = await self.synthesizer.synthesize(
            request,
            SynthesisContext(
                brand=brand,
                intelligence=intelligence,
                platform_issues=issues,
                history=patterns,
            ),
        )

        prediction = self.predictor.predict(
            request.shot_type,
            synthesis.duration,
            request.output_kind,
            description=request.description,
            requested_platform=request.platform,
        )

        prompt = self.tenants.create_prompt(
            brand.id,
            prompt_text=synthesis.prompt_text,
            user_input=request.description,
            platform=request.platform,
            output_kind=request.output_kind.value,
            shot_type=request.shot_type.value,
            duration_seconds=synthesis.duration or None,
            was_translated=synthesis.translation.was_translated,
            translated_phrase=synthesis.translation.matched_phrase,
            session_id=request.session_id,
            user_id=request.user_id,
            metadata={
                "applied_patterns": synthesis.applied_patterns,
                "suggestions": synthesis.suggestions,
                "recommended_platform": prediction.recommended_platform,
                "prediction_confidence": prediction.confidence,
                "model": synthesis.model,
            },
        )
        self.session.commit()
        prompt_id = prompt.id

        self._reinforce_history_patterns(brand.id, patterns)

        logger.info(
            "prompt_generated",
            prompt_id=str(prompt_id),
            brand_id=str(brand.id),
            platform=request.platform,
            recommended=prediction.recommended_platform,
            confidence=prediction.confidence,
        )

        return GenerationResult(
            prompt_id=prompt_id,
            prompt_text=synthesis.prompt_text,
            prediction=prediction,
            applied_patterns=synthesis.applied_patterns,
            suggestions=synthesis.suggestions,
            warnings=synthesis.warnings,
            was_translated=synthesis.translation.was_translated,
            matched_phrase=synthesis.translation.matched_phrase,
            complexity_warning=synthesis.budget.warning if synthesis.budget else None,
            technical_notes=(
                f"Duration: {synthesis.duration}s | Shot: {request.shot_type.value} | "
                f"Platform: {request.platform} | Confidence: {prediction.confidence}%"
            ),
        )

    def _reinforce_history_patterns(self, tenant_id: UUID, patterns: HistoryPatterns) -> None:
        """Passively reinforce patterns detected in history. Failures are logged only."""
        if not patterns.detected:
            return
        try:
            for detected in patterns.detected:
                self.intelligence.reinforce(
                    tenant_id,
                    detected.pattern_type,
                    detected.value,
                    initial_confidence=detected.frequency,
                )
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.error(
                "intelligence_upsert_failed",
                tenant_id=str(tenant_id),
                stage="history_reinforcement",
                error=str(e),
            )
