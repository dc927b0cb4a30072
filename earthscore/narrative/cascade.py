"""
Provider cascade: ordered text-generation attempts with a uniform contract.

Attempts run strictly one after another; the next one starts only after the
previous one has failed. Each attempt is bounded by its own timeout. The
cascade stops at the first success and keeps failure reasons only for the
final diagnostic.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Union

from earthscore.core.config import NarrativeConfig
from earthscore.narrative.llm_client import LLMClient

logger = logging.getLogger(__name__)

# (prompt, system_prompt, history) -> generated text
CompletionFn = Callable[[str, Optional[str], Sequence[Dict[str, str]]], Awaitable[str]]

# Provider order: the primary provider's models first, then the next provider
PROVIDER_ORDER = ("openai", "anthropic")


@dataclass
class ProviderAttempt:
    """One provider/model pair in the chain."""

    provider_id: str  # "<provider>:<model>"
    complete: CompletionFn
    close: Optional[Callable[[], Awaitable[None]]] = None


@dataclass
class CascadeSuccess:
    payload: str
    provider_id: str
    failures: List[str] = field(default_factory=list)

    ok = True


@dataclass
class CascadeFailure:
    reasons: List[str] = field(default_factory=list)

    ok = False


CascadeResult = Union[CascadeSuccess, CascadeFailure]


class ProviderCascade:
    """Try attempts in order until one returns non-empty text."""

    def __init__(self, attempts: Sequence[ProviderAttempt], timeout_seconds: float = 12.0):
        self.attempts = list(attempts)
        self.timeout_seconds = timeout_seconds

    def __len__(self) -> int:
        return len(self.attempts)

    async def run(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        history: Sequence[Dict[str, str]] = (),
    ) -> CascadeResult:
        reasons: List[str] = []

        for attempt in self.attempts:
            try:
                text = await asyncio.wait_for(
                    attempt.complete(prompt, system_prompt, history),
                    timeout=self.timeout_seconds,
                )
            except asyncio.TimeoutError:
                reason = f"{attempt.provider_id}: timed out after {self.timeout_seconds:.0f}s"
            except Exception as e:
                reason = f"{attempt.provider_id}: {type(e).__name__}: {e}"
            else:
                if text and text.strip():
                    logger.info(f"Provider cascade answered by {attempt.provider_id}")
                    return CascadeSuccess(
                        payload=text.strip(), provider_id=attempt.provider_id, failures=reasons
                    )
                reason = f"{attempt.provider_id}: empty response"

            logger.warning(f"Provider attempt failed - {reason}")
            reasons.append(reason)

        return CascadeFailure(reasons=reasons)

    async def aclose(self) -> None:
        """Release provider clients; safe to call more than once."""
        for attempt in self.attempts:
            if attempt.close is not None:
                try:
                    await attempt.close()
                except Exception as e:
                    logger.debug(f"Closing {attempt.provider_id} failed: {e}")


def _llm_attempt(client: LLMClient) -> ProviderAttempt:
    async def complete(prompt, system_prompt, history) -> str:
        response = await client.complete(prompt, system_prompt=system_prompt, history=history)
        return response.content

    return ProviderAttempt(
        provider_id=f"{client.provider}:{client.model}",
        complete=complete,
        close=client.close,
    )


def build_cascade(
    config: NarrativeConfig,
    client_factory: Callable[..., LLMClient] = LLMClient,
) -> ProviderCascade:
    """
    Build the provider/model chain from explicit configuration.

    Order: every configured OpenAI model (primary, then fallbacks), then
    every configured Anthropic model. Unconfigured providers are skipped,
    so an empty cascade means no credentials.
    """
    attempts = []
    for provider in PROVIDER_ORDER:
        api_key = config.provider_credentials.get(provider)
        if not api_key:
            continue
        for model in config.model_preferences.get(provider, ()):
            client = client_factory(
                provider=provider,
                api_key=api_key,
                model=model,
                max_tokens=config.max_tokens,
                temperature=config.temperature,
            )
            attempts.append(_llm_attempt(client))
    return ProviderCascade(attempts, timeout_seconds=config.timeout_seconds)
