"""Tests for end-to-end prompt generation."""

import pytest
from sqlalchemy import func, select

from continuum.adapters.llm.stub import StubLLMProvider
from continuum.db.models import PromptModel
from continuum.domain.enums import PatternType
from continuum.domain.models import GenerationRequest
from continuum.services.generation import GenerationService
from continuum.services.intelligence import BrandIntelligenceStore
from continuum.services.synthesizer import GenerationError, PromptSynthesizer
from continuum.services.tenant_store import BrandNotFoundError


def _prompt_count(session) -> int:
    return session.execute(select(func.count()).select_from(PromptModel)).scalar_one()


def _request(brand, user_id: str, **overrides) -> GenerationRequest:
    values = {
        "tenant_id": brand.id,
        "description": "A Porsche 911 on a coastal road",
        "platform": "veo3",
        "shot_type": "lateral_track",
        "duration_seconds": 7,
        "user_id": user_id,
    }
    values.update(overrides)
    return GenerationRequest(**values)


@pytest.mark.asyncio
async def test_generate_stores_prompt(db_session, brand, synthesizer, owner_id) -> None:
    service = GenerationService(db_session, synthesizer=synthesizer)

    result = await service.generate(_request(brand, owner_id))

    assert result.prediction.recommended_platform == "veo3"
    assert result.prediction.confidence == 98
    assert result.was_translated is True
    assert result.matched_phrase == "porsche 911"
    assert result.applied_patterns == ["golden hour lighting", "locked camera"]
    assert "Confidence: 98%" in result.technical_notes

    stored = db_session.get(PromptModel, result.prompt_id)
    assert stored is not None
    assert stored.tenant_id == brand.id
    assert stored.prompt_text == result.prompt_text
    assert stored.user_input == "A Porsche 911 on a coastal road"
    assert stored.rating is None
    assert stored.shot_type == "lateral_track"
    assert stored.metadata_["recommended_platform"] == "veo3"


@pytest.mark.asyncio
async def test_brand_context_reaches_instruction(
    db_session, brand, stub_provider, owner_id
) -> None:
    service = GenerationService(db_session, synthesizer=PromptSynthesizer(llm_provider=stub_provider))

    await service.generate(_request(brand, owner_id))

    system, _ = stub_provider.calls[0]
    assert "## BRAND: Coastline Motors" in system.content


@pytest.mark.asyncio
async def test_foreign_brand_is_not_found(
    db_session, brand, synthesizer, other_owner_id
) -> None:
    service = GenerationService(db_session, synthesizer=synthesizer)

    with pytest.raises(BrandNotFoundError):
        await service.generate(_request(brand, other_owner_id))
    assert _prompt_count(db_session) == 0


@pytest.mark.asyncio
async def test_missing_caller_is_not_found(db_session, brand, synthesizer) -> None:
    service = GenerationService(db_session, synthesizer=synthesizer)

    with pytest.raises(BrandNotFoundError):
        await service.generate(_request(brand, None))


@pytest.mark.asyncio
async def test_failed_completion_stores_nothing(db_session, brand, owner_id) -> None:
    synthesizer = PromptSynthesizer(llm_provider=StubLLMProvider(response="   "))
    service = GenerationService(db_session, synthesizer=synthesizer)

    with pytest.raises(GenerationError):
        await service.generate(_request(brand, owner_id))
    assert _prompt_count(db_session) == 0


@pytest.mark.asyncio
async def test_history_patterns_are_reinforced(
    db_session, brand, make_prompt, synthesizer, owner_id
) -> None:
    for _ in range(3):
        make_prompt(brand, prompt_text="Smooth tracking along the coast, 24fps")
    service = GenerationService(db_session, synthesizer=synthesizer)

    await service.generate(_request(brand, owner_id))

    store = BrandIntelligenceStore(db_session)
    fps = store.get(brand.id, PatternType.FPS_PREFERENCE, "24")
    assert fps is not None
    assert fps.occurrences == 1
    platform = store.get(brand.id, PatternType.PLATFORM_PREFERENCE, "veo3")
    assert platform is not None
    assert _prompt_count(db_session) == 4


@pytest.mark.asyncio
async def test_reinforcement_failure_keeps_prompt(
    db_session, brand, make_prompt, synthesizer, owner_id
) -> None:
    for _ in range(3):
        make_prompt(brand, prompt_text="Smooth tracking along the coast, 24fps")
    service = GenerationService(db_session, synthesizer=synthesizer)

    def _boom(*args, **kwargs):
        raise RuntimeError("db down")

    service.intelligence.reinforce = _boom
    result = await service.generate(_request(brand, owner_id))

    assert db_session.get(PromptModel, result.prompt_id) is not None


@pytest.mark.asyncio
async def test_still_output(db_session, brand, synthesizer, owner_id) -> None:
    service = GenerationService(db_session, synthesizer=synthesizer)

    result = await service.generate(
        _request(
            brand,
            owner_id,
            platform="midjourney",
            output_kind="still",
            shot_type=None,
            duration_seconds=None,
        )
    )

    assert result.prediction.recommended_platform == "flux"
    assert result.complexity_warning is None
    stored = db_session.get(PromptModel, result.prompt_id)
    assert stored.output_kind == "still"
    assert stored.duration_seconds is None


@pytest.mark.asyncio
async def test_to_dict(db_session, brand, synthesizer, owner_id) -> None:
    service = GenerationService(db_session, synthesizer=synthesizer)

    data = (await service.generate(_request(brand, owner_id))).to_dict()

    assert set(data) == {
        "prompt_id",
        "prompt_text",
        "applied_patterns",
        "suggestions",
        "warnings",
        "was_translated",
        "matched_phrase",
        "complexity_warning",
        "technical_notes",
        "prediction",
    }
    assert data["prediction"]["recommendedPlatform"] == "veo3"
