"""
Unit tests for the conversational service.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from earthscore.core.api_errors import MissingProviderConfigError, ProviderExhaustedError
from earthscore.core.config import NarrativeConfig
from earthscore.core.schemas import ChatRequest
from earthscore.narrative.cascade import CascadeFailure, CascadeSuccess, ProviderCascade
from earthscore.narrative.chat import ChatService
from earthscore.narrative.prompts import EXPLAIN_SYSTEM_PROMPT, QA_SYSTEM_PROMPT

CONFIGURED = NarrativeConfig(
    provider_credentials={"openai": "sk-test"},
    model_preferences={"openai": ("gpt-4o-mini",)},
)


def fake_cascade(result, attempts=1):
    cascade = MagicMock()
    cascade.__len__.return_value = attempts
    cascade.run = AsyncMock(return_value=result)
    cascade.aclose = AsyncMock()
    return cascade


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_configuration_makes_no_calls():
    factory = MagicMock()
    service = ChatService(NarrativeConfig(), cascade_factory=factory)

    with pytest.raises(MissingProviderConfigError) as exc_info:
        await service.answer(ChatRequest(question="Is it safe to run outside?"))

    assert "OPENAI_API_KEY" in exc_info.value.message
    factory.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_empty_cascade_is_missing_configuration():
    service = ChatService(CONFIGURED, cascade_factory=lambda config: ProviderCascade([]))

    with pytest.raises(MissingProviderConfigError):
        await service.answer(ChatRequest(question="Why?"))


@pytest.mark.unit
@pytest.mark.asyncio
async def test_answer_reports_provider():
    cascade = fake_cascade(CascadeSuccess(payload="It is mild.", provider_id="openai:gpt-4o-mini"))
    service = ChatService(CONFIGURED, cascade_factory=lambda config: cascade)

    answer = await service.answer(
        ChatRequest(question="Is it hot?", lat=64.1, lon=-21.9, context={"heatIndexCurrent": 59.0})
    )

    assert answer.answer == "It is mild."
    assert answer.provider_used == "openai:gpt-4o-mini"
    prompt = cascade.run.call_args.args[0]
    assert "Question: Is it hot?" in prompt
    assert "heatIndexCurrent" in prompt
    assert cascade.run.call_args.kwargs["system_prompt"] == QA_SYSTEM_PROMPT
    cascade.aclose.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_explain_mode_uses_explain_prompt():
    cascade = fake_cascade(CascadeSuccess(payload="Because...", provider_id="anthropic:claude"))
    service = ChatService(CONFIGURED, cascade_factory=lambda config: cascade)

    await service.answer(ChatRequest(question="Explain my score", mode="explain"))

    assert cascade.run.call_args.kwargs["system_prompt"] == EXPLAIN_SYSTEM_PROMPT


@pytest.mark.unit
@pytest.mark.asyncio
async def test_history_capped_to_last_ten_turns():
    cascade = fake_cascade(CascadeSuccess(payload="ok", provider_id="p:m"))
    service = ChatService(CONFIGURED, cascade_factory=lambda config: cascade)
    history = [
        {"role": "user" if i % 2 == 0 else "assistant", "content": f"turn {i}"} for i in range(15)
    ]

    await service.answer(ChatRequest(question="And now?", history=history))

    sent = cascade.run.call_args.kwargs["history"]
    assert len(sent) == 10
    assert sent[0] == {"role": "assistant", "content": "turn 5"}
    assert sent[-1] == {"role": "user", "content": "turn 14"}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_exhaustion_detail_bounded():
    reasons = [f"openai:model-{i}: RuntimeError: " + "x" * 500 for i in range(5)]
    cascade = fake_cascade(CascadeFailure(reasons=reasons), attempts=5)
    service = ChatService(CONFIGURED, cascade_factory=lambda config: cascade)

    with pytest.raises(ProviderExhaustedError) as exc_info:
        await service.answer(ChatRequest(question="Hello?"))

    detail = exc_info.value.detail
    assert len(detail) == ProviderExhaustedError.MAX_DETAIL_CHARS
    assert detail.startswith("openai:model-4")
    cascade.aclose.assert_awaited_once()


@pytest.mark.unit
def test_question_must_not_be_blank():
    with pytest.raises(ValueError):
        ChatRequest(question="   ")
