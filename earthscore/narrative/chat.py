"""
Conversational endpoint service.

Answers a free-form question about a location from its metrics, cascading
across configured provider/model pairs. This is the only path allowed to
report an explicit failure, and only after the whole chain has failed.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from earthscore.core.api_errors import MissingProviderConfigError, ProviderExhaustedError
from earthscore.core.config import NarrativeConfig
from earthscore.core.schemas import MAX_HISTORY_TURNS, ChatRequest
from earthscore.narrative.cascade import ProviderCascade, build_cascade
from earthscore.narrative.prompts import build_chat_prompt, system_prompt_for

logger = logging.getLogger(__name__)


@dataclass
class ChatAnswer:
    answer: str
    provider_used: str


class ChatService:
    def __init__(
        self,
        config: NarrativeConfig,
        cascade_factory: Callable[[NarrativeConfig], ProviderCascade] = build_cascade,
    ):
        self.config = config
        self.cascade_factory = cascade_factory

    async def answer(self, request: ChatRequest) -> ChatAnswer:
        """
        Raises:
            MissingProviderConfigError: no credentials; nothing is sent
            ProviderExhaustedError: every provider/model failed
        """
        if not self.config.has_credentials:
            raise MissingProviderConfigError()

        history = [
            {"role": turn.role, "content": turn.content}
            for turn in request.history[-MAX_HISTORY_TURNS:]
        ]
        prompt = build_chat_prompt(request.question, request.lat, request.lon, request.context)

        cascade = self.cascade_factory(self.config)
        if not len(cascade):
            raise MissingProviderConfigError()
        try:
            result = await cascade.run(
                prompt, system_prompt=system_prompt_for(request.mode), history=history
            )
        finally:
            await cascade.aclose()

        if not result.ok:
            logger.error(f"Chat failed on every provider: {result.reasons}")
            raise ProviderExhaustedError(result.reasons)

        return ChatAnswer(answer=result.payload, provider_used=result.provider_id)
