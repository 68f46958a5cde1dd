"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any
from uuid import UUID as PyUUID
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class BrandProfileModel(Base):
    """Brand (tenant) ORM model. Managed by the dashboard, read by the engine."""

    __tablename__ = "brands"

    id: Mapped[PyUUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    industry: Mapped[str | None] = mapped_column(String(100), nullable=True)
    guidelines: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)

    # Structured guidelines
    color_palette: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, nullable=True)
    typography: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    tone_keywords: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)
    visual_rules: Mapped[str | None] = mapped_column(Text, nullable=True)
    guidelines_source: Mapped[str | None] = mapped_column(String(50), nullable=True)
    document_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    # Relationships
    prompts: Mapped[list["PromptModel"]] = relationship(
        "PromptModel", back_populates="brand", cascade="all, delete-orphan"
    )
    intelligence: Mapped[list["BrandIntelligenceModel"]] = relationship(
        "BrandIntelligenceModel", back_populates="brand", cascade="all, delete-orphan"
    )


class PromptModel(Base):
    """Synthesized prompt record. Created once per synthesis, rated once."""

    __tablename__ = "prompts"

    id: Mapped[PyUUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    tenant_id: Mapped[PyUUID] = mapped_column(
        Uuid, ForeignKey("brands.id", ondelete="CASCADE"), index=True
    )
    session_id: Mapped[PyUUID | None] = mapped_column(Uuid, nullable=True, index=True)
    user_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    prompt_text: Mapped[str] = mapped_column(Text, nullable=False)
    user_input: Mapped[str] = mapped_column(Text, nullable=False)
    platform: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    output_kind: Mapped[str] = mapped_column(String(20), nullable=False, default="video")
    shot_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    was_translated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    translated_phrase: Mapped[str | None] = mapped_column(String(255), nullable=True)
    rating: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    feedback_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    metadata_: Mapped[dict[str, Any] | None] = mapped_column("metadata_", JSONType, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    # Relationships
    brand: Mapped["BrandProfileModel"] = relationship(
        "BrandProfileModel", back_populates="prompts"
    )


class BrandIntelligenceModel(Base):
    """Learned pattern for a brand, one row per (brand, type, value)."""

    __tablename__ = "brand_intelligence"

    id: Mapped[PyUUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    tenant_id: Mapped[PyUUID] = mapped_column(
        Uuid, ForeignKey("brands.id", ondelete="CASCADE"), index=True
    )
    pattern_type: Mapped[str] = mapped_column(String(100), nullable=False)
    pattern_value: Mapped[str] = mapped_column(String(255), nullable=False)
    confidence: Mapped[float] = mapped_column(Float, nullable=False, default=0.5)
    occurrences: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    last_seen: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "pattern_type", "pattern_value", name="uq_brand_intelligence_pattern"
        ),
        # The configurable floor and ceiling are applied by the upsert
        CheckConstraint(
            "confidence > 0.0 AND confidence <= 1.0", name="ck_brand_intelligence_confidence"
        ),
    )

    # Relationships
    brand: Mapped["BrandProfileModel"] = relationship(
        "BrandProfileModel", back_populates="intelligence"
    )
