"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LLM_PROVIDER"] = "stub"
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

OWNER_ID = "user-owner"
OTHER_OWNER_ID = "user-other"


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine with the full schema."""
    from continuum.db.models import Base

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine: Engine) -> Generator[Session, None, None]:
    """Database session bound to the in-memory engine."""
    factory = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)
    session = factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def brand(db_session: Session):
    """A brand owned by OWNER_ID."""
    from continuum.db.models import BrandProfileModel

    model = BrandProfileModel(
        id=uuid4(),
        owner_id=OWNER_ID,
        name="Coastline Motors",
        description="Premium coastal driving experiences",
        industry="Automotive",
        guidelines=["Always show the ocean"],
        color_palette=[{"hex": "#0A3D62", "name": "Deep Sea", "usage": "Primary"}],
        typography={"primary_font": "Futura"},
        tone_keywords=["confident", "serene"],
        visual_rules="Never show the vehicle airborne.",
        guidelines_source="manual",
    )
    db_session.add(model)
    db_session.commit()
    return model


@pytest.fixture
def other_brand(db_session: Session):
    """A brand owned by someone else."""
    from continuum.db.models import BrandProfileModel

    model = BrandProfileModel(id=uuid4(), owner_id=OTHER_OWNER_ID, name="Rival Rides")
    db_session.add(model)
    db_session.commit()
    return model


@pytest.fixture
def make_prompt(db_session: Session):
    """Factory inserting prompt records for a brand."""
    from continuum.db.models import PromptModel

    def _make(
        brand,
        prompt_text: str = "Steady lateral tracking at golden hour, 24fps",
        platform: str = "veo3",
        rating: str | None = None,
        age: timedelta = timedelta(hours=1),
        **fields,
    ) -> PromptModel:
        prompt = PromptModel(
            id=uuid4(),
            tenant_id=brand.id,
            prompt_text=prompt_text,
            user_input=fields.pop("user_input", "Car on a coastal road"),
            platform=platform,
            output_kind=fields.pop("output_kind", "video"),
            rating=rating,
            created_at=datetime.now(UTC) - age,
            metadata_={},
            **fields,
        )
        db_session.add(prompt)
        db_session.commit()
        return prompt

    return _make


@pytest.fixture
def stub_provider():
    """Get a stub completion provider."""
    from continuum.adapters.llm.stub import StubLLMProvider

    return StubLLMProvider()


@pytest.fixture
def synthesizer(stub_provider):
    """Prompt synthesizer backed by the stub provider."""
    from continuum.services.synthesizer import PromptSynthesizer

    return PromptSynthesizer(llm_provider=stub_provider)


@pytest.fixture
def test_client(db_session: Session, synthesizer) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app with the database and LLM overridden."""
    from continuum.api.deps import get_synthesizer
    from continuum.db.session import get_session
    from continuum.main import app

    def _session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_synthesizer] = lambda: synthesizer
    client = TestClient(app)
    try:
        yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-User-ID": OWNER_ID}


@pytest.fixture
def owner_id() -> str:
    return OWNER_ID


@pytest.fixture
def other_owner_id() -> str:
    return OTHER_OWNER_ID
