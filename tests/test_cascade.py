"""
Unit tests for the provider cascade.
"""
import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from earthscore.core.config import NarrativeConfig
from earthscore.narrative.cascade import ProviderAttempt, ProviderCascade, build_cascade
from earthscore.narrative.llm_client import LLMResponse


def attempt(provider_id, result=None, error=None, delay=0.0, calls=None):
    async def complete(prompt, system_prompt, history):
        if calls is not None:
            calls.append(provider_id)
        if delay:
            await asyncio.sleep(delay)
        if error is not None:
            raise error
        return result

    return ProviderAttempt(provider_id=provider_id, complete=complete)


class TestProviderCascade:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_first_success_wins(self):
        calls = []
        cascade = ProviderCascade([
            attempt("openai:gpt-4o-mini", result="answer", calls=calls),
            attempt("anthropic:claude", result="other", calls=calls),
        ])

        result = await cascade.run("q")

        assert result.ok is True
        assert result.payload == "answer"
        assert result.provider_id == "openai:gpt-4o-mini"
        assert calls == ["openai:gpt-4o-mini"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_strict_order_after_failures(self):
        calls = []
        cascade = ProviderCascade([
            attempt("openai:gpt-4o-mini", error=RuntimeError("rate limited"), calls=calls),
            attempt("openai:gpt-3.5-turbo", result="", calls=calls),
            attempt("anthropic:claude", result="  from claude  ", calls=calls),
        ])

        result = await cascade.run("q")

        assert calls == ["openai:gpt-4o-mini", "openai:gpt-3.5-turbo", "anthropic:claude"]
        assert result.ok is True
        assert result.payload == "from claude"
        assert result.failures == [
            "openai:gpt-4o-mini: RuntimeError: rate limited",
            "openai:gpt-3.5-turbo: empty response",
        ]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout_moves_to_next_attempt(self):
        cascade = ProviderCascade(
            [attempt("slow:model", result="late", delay=1.0), attempt("fast:model", result="ok")],
            timeout_seconds=0.05,
        )

        result = await cascade.run("q")

        assert result.provider_id == "fast:model"
        assert "timed out" in result.failures[0]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_exhaustion_reports_every_reason(self):
        cascade = ProviderCascade([
            attempt("a:1", error=ValueError("bad key")),
            attempt("b:2", result=None),
        ])

        result = await cascade.run("q")

        assert result.ok is False
        assert result.reasons == ["a:1: ValueError: bad key", "b:2: empty response"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_cascade_fails(self):
        result = await ProviderCascade([]).run("q")

        assert result.ok is False
        assert result.reasons == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_passes_prompt_system_and_history(self):
        complete = AsyncMock(return_value="ok")
        history = [{"role": "user", "content": "hi"}]
        cascade = ProviderCascade([ProviderAttempt("p:m", complete)])

        await cascade.run("question", system_prompt="system", history=history)

        complete.assert_awaited_once_with("question", "system", history)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_aclose_closes_every_attempt(self):
        first, second = AsyncMock(), AsyncMock(side_effect=RuntimeError("already closed"))
        cascade = ProviderCascade([
            ProviderAttempt("a:1", AsyncMock(), close=first),
            ProviderAttempt("b:2", AsyncMock(), close=second),
            ProviderAttempt("c:3", AsyncMock()),
        ])

        await cascade.aclose()

        first.assert_awaited_once()
        second.assert_awaited_once()


class TestBuildCascade:

    @pytest.mark.unit
    def test_order_openai_models_then_anthropic(self):
        config = NarrativeConfig(
            provider_credentials={"anthropic": "sk-ant", "openai": "sk-oa"},
            model_preferences={
                "openai": ("gpt-4o-mini", "gpt-3.5-turbo"),
                "anthropic": ("claude-3-5-haiku-20241022",),
            },
            timeout_seconds=7.0,
        )

        cascade = build_cascade(config)

        assert [a.provider_id for a in cascade.attempts] == [
            "openai:gpt-4o-mini",
            "openai:gpt-3.5-turbo",
            "anthropic:claude-3-5-haiku-20241022",
        ]
        assert cascade.timeout_seconds == 7.0

    @pytest.mark.unit
    def test_unconfigured_provider_skipped(self):
        config = NarrativeConfig(
            provider_credentials={"anthropic": "sk-ant"},
            model_preferences={"openai": ("gpt-4o-mini",), "anthropic": ("claude-3-5-haiku-20241022",)},
        )

        cascade = build_cascade(config)

        assert [a.provider_id for a in cascade.attempts] == ["anthropic:claude-3-5-haiku-20241022"]

    @pytest.mark.unit
    def test_no_credentials_is_empty(self):
        assert len(build_cascade(NarrativeConfig())) == 0

    @pytest.mark.unit
    def test_clients_built_single_attempt(self):
        factory = MagicMock()
        factory.return_value.provider = "openai"
        factory.return_value.model = "gpt-4o-mini"
        config = NarrativeConfig(
            provider_credentials={"openai": "sk-oa"},
            model_preferences={"openai": ("gpt-4o-mini",)},
            max_tokens=123,
            temperature=0.1,
        )

        build_cascade(config, client_factory=factory)

        factory.assert_called_once_with(
            provider="openai",
            api_key="sk-oa",
            model="gpt-4o-mini",
            max_tokens=123,
            temperature=0.1,
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_attempt_returns_client_content(self):
        client = MagicMock()
        client.provider = "openai"
        client.model = "gpt-4o-mini"
        client.complete = AsyncMock(return_value=LLMResponse(content="- tip", model="gpt-4o-mini"))
        client.close = AsyncMock()
        config = NarrativeConfig(
            provider_credentials={"openai": "sk-oa"},
            model_preferences={"openai": ("gpt-4o-mini",)},
        )
        cascade = build_cascade(config, client_factory=lambda **kwargs: client)

        result = await cascade.run("q", system_prompt="s")
        await cascade.aclose()

        assert result.payload == "- tip"
        client.complete.assert_awaited_once_with("q", system_prompt="s", history=())
        client.close.assert_awaited_once()
