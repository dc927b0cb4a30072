"""
LLM client: one async completion call against OpenAI or Anthropic.

Both SDKs are wrapped behind `complete()`, which takes a prompt, an optional
system prompt and prior conversation turns, and returns the generated text.
Each call is a single attempt; fallbacks across providers and models live in
the cascade.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

Message = Dict[str, str]

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-haiku-20241022",
}

PROVIDERS = ("openai", "anthropic")


@dataclass
class LLMResponse:
    """Generated text from one completion."""

    content: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0


def _openai_text_and_usage(response) -> Tuple[str, int, int]:
    text = response.choices[0].message.content if response.choices else None
    usage = response.usage
    if usage is None:
        return text or "", 0, 0
    return text or "", usage.prompt_tokens, usage.completion_tokens


def _anthropic_text_and_usage(response) -> Tuple[str, int, int]:
    text = response.content[0].text if response.content else None
    usage = response.usage
    if usage is None:
        return text or "", 0, 0
    return text or "", usage.input_tokens, usage.output_tokens


def _drop_leading_assistant_turns(messages: List[Message]) -> List[Message]:
    """Anthropic requires the conversation to open with a user turn."""
    start = 0
    while start < len(messages) and messages[start]["role"] == "assistant":
        start += 1
    return messages[start:]


class LLMClient:
    """
    Async completion client for a single provider/model pair.

    Usage:
        client = LLMClient(provider="anthropic", api_key="sk-ant-...")
        response = await client.complete("Summarize these livability metrics...")
        await client.close()
    """

    def __init__(
        self,
        provider: str = "openai",
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: int = 300,
        temperature: float = 0.3,
    ):
        """
        Args:
            provider: "openai" or "anthropic" (case-insensitive)
            api_key: Provider API key
            model: Model id; defaults per provider
            max_tokens: Response token cap
            temperature: Sampling temperature
        """
        self.provider = provider.lower()
        self.api_key = api_key
        self.model = model or DEFAULT_MODELS.get(self.provider, DEFAULT_MODELS["openai"])
        self.max_tokens = max_tokens
        self.temperature = temperature

        self._client = None

    @property
    def is_available(self) -> bool:
        return self.provider in PROVIDERS and bool(self.api_key)

    def _get_client(self):
        # SDK-level retries are disabled; one request per call.
        if self._client is None:
            sdk_class = AsyncAnthropic if self.provider == "anthropic" else AsyncOpenAI
            self._client = sdk_class(api_key=self.api_key, max_retries=0)
        return self._client

    def _openai_request(self, messages: List[Message], system_prompt: Optional[str]) -> Dict[str, Any]:
        if system_prompt:
            messages = [{"role": "system", "content": system_prompt}, *messages]
        return {
            "model": self.model,
            "messages": messages,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    def _anthropic_request(self, messages: List[Message], system_prompt: Optional[str]) -> Dict[str, Any]:
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": _drop_leading_assistant_turns(messages),
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        if system_prompt:
            request["system"] = system_prompt
        return request

    async def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        history: Optional[Sequence[Message]] = None,
    ) -> LLMResponse:
        """
        Run one completion.

        `history` holds prior {"role", "content"} turns, oldest first; the
        prompt is appended as the final user turn.

        Raises:
            ValueError: provider unknown or API key missing
            Exception: whatever the SDK raised
        """
        if not self.is_available:
            raise ValueError(
                f"LLM provider '{self.provider}' not available. Check that the API key is set."
            )

        messages = [{"role": turn["role"], "content": turn["content"]} for turn in history or ()]
        messages.append({"role": "user", "content": prompt})

        client = self._get_client()
        if self.provider == "anthropic":
            raw = await client.messages.create(**self._anthropic_request(messages, system_prompt))
            text, input_tokens, output_tokens = _anthropic_text_and_usage(raw)
        else:
            raw = await client.chat.completions.create(**self._openai_request(messages, system_prompt))
            text, input_tokens, output_tokens = _openai_text_and_usage(raw)

        logger.debug(
            f"{self.provider}:{self.model} tokens in={input_tokens} out={output_tokens}"
        )
        return LLMResponse(
            content=text, model=self.model, input_tokens=input_tokens, output_tokens=output_tokens
        )

    async def close(self) -> None:
        """Close the SDK client, if one was opened."""
        client, self._client = self._client, None
        if client is not None:
            await client.close()
