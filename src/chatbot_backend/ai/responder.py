"""Cliente do responder de texto livre (API compatível com OpenAI).

Usado apenas quando o engine não reconhece a intenção no estado Idle.
Best effort: sem retry, timeout curto e qualquer falha vira None, para que
o engine responda com o fallback localizado.
"""

from __future__ import annotations

import logging
import time

import httpx
from openai import APIError, APITimeoutError, AsyncOpenAI

from chatbot_backend.ai import prompts
from chatbot_backend.config.settings import Settings
from chatbot_backend.domain.models import Message
from chatbot_backend.observability.logging import get_logger
from chatbot_backend.observability.timing import elapsed_ms_since

logger: logging.Logger = get_logger(__name__)


class OpenAICompatibleResponder:
    """Responder sobre qualquer endpoint /chat/completions compatível.

    O padrão aponta para a Mistral; `base_url` permite trocar de provedor
    sem alterar código.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        timeout_seconds: float = 10.0,
        history_limit: int = 10,
        temperature: float = 0.7,
        max_tokens: int = 300,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._model = model
        self._timeout = timeout_seconds
        self._history_limit = history_limit
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
            http_client=httpx.AsyncClient(timeout=timeout_seconds),
        )

    @property
    def model(self) -> str:
        return self._model

    async def complete(self, history: list[Message]) -> str | None:
        """Gera resposta livre; None em erro, timeout ou payload vazio."""
        start = time.perf_counter()
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=prompts.format_history(history, self._history_limit),
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                timeout=self._timeout,
            )
        except (APIError, APITimeoutError) as e:
            logger.warning(
                "responder_request_failed",
                extra={
                    "error_type": type(e).__name__,
                    "elapsed_ms": elapsed_ms_since(start),
                },
            )
            return None

        if not response.choices:
            logger.warning("responder_empty_choices", extra={"model": self._model})
            return None

        content = response.choices[0].message.content or ""
        if not content.strip():
            logger.warning("responder_empty_content", extra={"model": self._model})
            return None

        logger.debug(
            "responder_completed",
            extra={"model": self._model, "elapsed_ms": elapsed_ms_since(start)},
        )
        return content.strip()

    async def aclose(self) -> None:
        await self._client.close()


def create_responder(settings: Settings) -> OpenAICompatibleResponder | None:
    """Factory: None quando desabilitado ou sem chave (engine usa fallback)."""
    if not settings.responder_enabled:
        logger.info("responder_disabled")
        return None
    if not settings.responder_api_key:
        logger.warning("responder_missing_api_key")
        return None

    logger.info(
        "responder_enabled",
        extra={"base_url": settings.responder_base_url, "model": settings.responder_model},
    )
    return OpenAICompatibleResponder(
        api_key=settings.responder_api_key,
        base_url=settings.responder_base_url,
        model=settings.responder_model,
        timeout_seconds=settings.responder_timeout_seconds,
        history_limit=settings.responder_history_limit,
        temperature=settings.responder_temperature,
        max_tokens=settings.responder_max_tokens,
    )
