"""Initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Brands table (tenants)
    op.create_table(
        "brands",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("owner_id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("industry", sa.String(100), nullable=True),
        sa.Column("guidelines", postgresql.JSONB(), nullable=True),
        sa.Column("color_palette", postgresql.JSONB(), nullable=True),
        sa.Column("typography", postgresql.JSONB(), nullable=True),
        sa.Column("tone_keywords", postgresql.JSONB(), nullable=True),
        sa.Column("visual_rules", sa.Text(), nullable=True),
        sa.Column("guidelines_source", sa.String(50), nullable=True),
        sa.Column("document_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), onupdate=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_brands_owner_id", "brands", ["owner_id"])

    # Prompts table
    op.create_table(
        "prompts",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("tenant_id", sa.UUID(), nullable=False),
        sa.Column("session_id", sa.UUID(), nullable=True),
        sa.Column("user_id", sa.String(255), nullable=True),
        sa.Column("prompt_text", sa.Text(), nullable=False),
        sa.Column("user_input", sa.Text(), nullable=False),
        sa.Column("platform", sa.String(50), nullable=False),
        sa.Column("output_kind", sa.String(20), nullable=False, server_default="video"),
        sa.Column("shot_type", sa.String(50), nullable=True),
        sa.Column("duration_seconds", sa.Integer(), nullable=True),
        sa.Column("was_translated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("translated_phrase", sa.String(255), nullable=True),
        sa.Column("rating", sa.String(20), nullable=True),
        sa.Column("feedback_notes", sa.Text(), nullable=True),
        sa.Column("metadata_", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), onupdate=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["brands.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_prompts_tenant_id", "prompts", ["tenant_id"])
    op.create_index("ix_prompts_session_id", "prompts", ["session_id"])
    op.create_index("ix_prompts_platform", "prompts", ["platform"])
    op.create_index("ix_prompts_rating", "prompts", ["rating"])
    op.create_index("ix_prompts_created_at", "prompts", ["created_at"])

    # Brand intelligence table, one row per (brand, pattern type, pattern value)
    op.create_table(
        "brand_intelligence",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("tenant_id", sa.UUID(), nullable=False),
        sa.Column("pattern_type", sa.String(100), nullable=False),
        sa.Column("pattern_value", sa.String(255), nullable=False),
        sa.Column("confidence", sa.Float(), nullable=False, server_default="0.5"),
        sa.Column("occurrences", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("last_seen", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["brands.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "tenant_id", "pattern_type", "pattern_value", name="uq_brand_intelligence_pattern"
        ),
        sa.CheckConstraint(
            "confidence > 0.0 AND confidence <= 1.0", name="ck_brand_intelligence_confidence"
        ),
    )
    op.create_index("ix_brand_intelligence_tenant_id", "brand_intelligence", ["tenant_id"])
    op.create_index(
        "ix_brand_intelligence_confidence",
        "brand_intelligence",
        ["tenant_id", sa.text("confidence DESC")],
    )


def downgrade() -> None:
    op.drop_table("brand_intelligence")
    op.drop_table("prompts")
    op.drop_table("brands")
