"""
Advice narrative and conversational answers.

Key Components:
- rules: deterministic sentence rules over derived metrics
- generator: generated bullet advice with rule-based fallback
- cascade: ordered provider/model fallback chain
- llm_client: unified LLM client for OpenAI/Anthropic
- chat: question answering about a location
"""

from earthscore.narrative.cascade import ProviderCascade, build_cascade
from earthscore.narrative.chat import ChatService
from earthscore.narrative.generator import NarrativeGenerator, NarrativeResult
from earthscore.narrative.llm_client import LLMClient, LLMResponse

__all__ = [
    "ProviderCascade",
    "build_cascade",
    "ChatService",
    "NarrativeGenerator",
    "NarrativeResult",
    "LLMClient",
    "LLMResponse",
]
