"""Brand intelligence store.

Learned patterns are keyed by (tenant, pattern type, pattern value). Every
write is a single INSERT ... ON CONFLICT DO UPDATE against the unique key, so
two feedback events racing on the same pattern can neither create a
duplicate row nor push confidence outside [floor, ceiling]: the clamp runs
inside the database against the current row.

Confidence moves in steps:
- passive reinforcement (pattern seen in history): +0.05
- positive feedback: +0.10
- negative feedback: -0.15
"""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import ColumnElement, case, desc, literal, select
from sqlalchemy.orm import Session

from continuum.config import get_settings
from continuum.db.models import BrandIntelligenceModel
from continuum.domain.enums import PatternType
from continuum.domain.models import LearnedPattern
from continuum.logging import get_logger

logger = get_logger(__name__)

_KEY_COLUMNS = ["tenant_id", "pattern_type", "pattern_value"]


def clamp_confidence(value: float, floor: float, ceiling: float = 1.0) -> float:
    """Clamp a confidence value into [floor, ceiling]."""
    return max(floor, min(ceiling, value))


class BrandIntelligenceStore:
    """Read and upsert learned patterns for a tenant.

    The store never commits; the calling service owns the transaction.
    """

    def __init__(
        self,
        session: Session,
        floor: float | None = None,
        ceiling: float | None = None,
    ) -> None:
        config = get_settings()
        self.session = session
        self.floor = config.intelligence_confidence_floor if floor is None else floor
        self.ceiling = config.intelligence_confidence_ceiling if ceiling is None else ceiling
        self.initial_confidence = config.intelligence_initial_confidence
        self.reinforce_step = config.intelligence_reinforce_step
        self.issue_confidence = config.intelligence_issue_confidence

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def reinforce(
        self,
        tenant_id: UUID,
        pattern_type: str,
        pattern_value: str,
        initial_confidence: float | None = None,
        step: float | None = None,
    ) -> LearnedPattern:
        """Passive reinforcement of a pattern observed in history.

        Creates the record at ``initial_confidence`` with one occurrence, or
        increments occurrences and raises confidence by ``step``.
        """
        initial = self.initial_confidence if initial_confidence is None else initial_confidence
        step = self.reinforce_step if step is None else step
        return self._upsert(
            tenant_id,
            str(pattern_type),
            pattern_value,
            insert_confidence=clamp_confidence(initial, self.floor, self.ceiling),
            delta=step,
        )

    def adjust(
        self,
        tenant_id: UUID,
        pattern_type: str,
        pattern_value: str,
        delta: float,
        initial_confidence: float | None = None,
    ) -> LearnedPattern:
        """Feedback-driven adjustment.

        A missing record is created at ``initial + delta`` (clamped), an
        existing one gets ``delta`` applied (clamped) and one more occurrence.
        """
        initial = self.initial_confidence if initial_confidence is None else initial_confidence
        return self._upsert(
            tenant_id,
            str(pattern_type),
            pattern_value,
            insert_confidence=clamp_confidence(initial + delta, self.floor, self.ceiling),
            delta=delta,
        )

    def record_negative(self, tenant_id: UUID, platform: str, issue: str) -> LearnedPattern:
        """Record an issue reported against a platform.

        Issues start at a low confidence; repeats only bump occurrences.
        """
        return self._upsert(
            tenant_id,
            PatternType.platform_issue(platform),
            issue,
            insert_confidence=clamp_confidence(self.issue_confidence, self.floor, self.ceiling),
            delta=0.0,
        )

    def _upsert(
        self,
        tenant_id: UUID,
        pattern_type: str,
        pattern_value: str,
        insert_confidence: float,
        delta: float,
    ) -> LearnedPattern:
        now = datetime.now(UTC)
        insert = self._dialect_insert()
        model = BrandIntelligenceModel

        stmt = insert(model).values(
            id=uuid4(),
            tenant_id=tenant_id,
            pattern_type=pattern_type,
            pattern_value=pattern_value,
            confidence=insert_confidence,
            occurrences=1,
            last_seen=now,
        )
        update_values: dict[str, Any] = {
            "occurrences": model.occurrences + 1,
            "last_seen": now,
        }
        if delta:
            update_values["confidence"] = self._clamped(model.confidence + delta)

        stmt = stmt.on_conflict_do_update(index_elements=_KEY_COLUMNS, set_=update_values)
        self.session.execute(stmt)

        record = self.get(tenant_id, pattern_type, pattern_value)
        if record is None:  # pragma: no cover - the upsert guarantees a row
            raise RuntimeError("intelligence upsert produced no row")

        logger.debug(
            "intelligence_upserted",
            tenant_id=str(tenant_id),
            pattern_type=pattern_type,
            pattern_value=pattern_value,
            confidence=record.confidence,
            occurrences=record.occurrences,
        )
        return record

    def _clamped(self, expr: ColumnElement[float]) -> ColumnElement[float]:
        return case(
            (expr > self.ceiling, literal(self.ceiling)),
            (expr < self.floor, literal(self.floor)),
            else_=expr,
        )

    def _dialect_insert(self) -> Any:
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            raise NotImplementedError(f"Atomic upsert not supported on dialect: {dialect}")
        return insert

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(
        self, tenant_id: UUID, pattern_type: str, pattern_value: str
    ) -> LearnedPattern | None:
        """Get a single record by key."""
        model = self.session.execute(
            select(BrandIntelligenceModel)
            .where(
                BrandIntelligenceModel.tenant_id == tenant_id,
                BrandIntelligenceModel.pattern_type == str(pattern_type),
                BrandIntelligenceModel.pattern_value == pattern_value,
            )
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        return _to_pattern(model) if model else None

    def list_for_tenant(
        self,
        tenant_id: UUID,
        min_confidence: float = 0.0,
        limit: int | None = None,
        pattern_type: str | None = None,
    ) -> list[LearnedPattern]:
        """Records for a tenant at or above a confidence, strongest first.

        Args:
            tenant_id: Tenant to read
            min_confidence: Inclusive lower bound on confidence
            limit: Maximum number of records to return
            pattern_type: Only return records of this pattern type

        Returns:
            Records ordered by confidence, then occurrences, descending
        """
        stmt = (
            select(BrandIntelligenceModel)
            .where(
                BrandIntelligenceModel.tenant_id == tenant_id,
                BrandIntelligenceModel.confidence >= min_confidence,
            )
            .order_by(
                desc(BrandIntelligenceModel.confidence),
                desc(BrandIntelligenceModel.occurrences),
                BrandIntelligenceModel.pattern_type,
                BrandIntelligenceModel.pattern_value,
            )
        )
        if pattern_type:
            stmt = stmt.where(BrandIntelligenceModel.pattern_type == str(pattern_type))
        if limit is not None:
            stmt = stmt.limit(limit)

        return [_to_pattern(m) for m in self.session.execute(stmt).scalars().all()]

    def platform_issues(self, tenant_id: UUID, platform: str) -> list[LearnedPattern]:
        """Issues previously reported against a platform for this tenant."""
        return self.list_for_tenant(
            tenant_id, pattern_type=PatternType.platform_issue(platform)
        )


def _to_pattern(model: BrandIntelligenceModel) -> LearnedPattern:
    return LearnedPattern(
        tenant_id=model.tenant_id,
        pattern_type=model.pattern_type,
        pattern_value=model.pattern_value,
        confidence=model.confidence,
        occurrences=model.occurrences,
        last_seen=model.last_seen,
    )
