"""
Conversational endpoint.

POST /chat answers a question about a location from the metrics the score
endpoint returned. Unlike scoring, it reports failure explicitly:
400 when no provider is configured, 502 when every provider failed.
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from earthscore.core.api_errors import MissingProviderConfigError, ProviderExhaustedError
from earthscore.core.config import get_settings
from earthscore.core.schemas import ChatRequest, ChatResponse, ErrorResponse
from earthscore.narrative.chat import ChatService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


def get_chat_service() -> ChatService:
    return ChatService(get_settings().narrative_config())


@router.post(
    "/chat",
    response_model=ChatResponse,
    response_model_by_alias=True,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def chat(
    request: ChatRequest,
    service: ChatService = Depends(get_chat_service),
):
    """
    Ask a question about a location.

    Pass the `metrics` object from `/score` as `context`. `mode` is `qa`
    (concise answer) or `explain` (walk through the score components).
    Only the last 10 `history` turns are sent.

    **Requires** OPENAI_API_KEY or ANTHROPIC_API_KEY.
    """
    try:
        answer = await service.answer(request)
    except MissingProviderConfigError as e:
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="Chat unavailable", detail=e.message).model_dump(),
        )
    except ProviderExhaustedError as e:
        return JSONResponse(
            status_code=502,
            content=ErrorResponse(error="Chat failed", detail=e.detail).model_dump(),
        )

    return ChatResponse(answer=answer.answer, provider_used=answer.provider_used)
