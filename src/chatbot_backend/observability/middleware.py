"""Middlewares e contexto de observabilidade.

Mantém dois ContextVars por request:
- correlation_id: propagado via header `x-correlation-id` (ou gerado)
- session_tag: prefixo (8 chars) da sessão em processamento, preenchido
  pelo ChatService para que todo log do turno carregue a sessão
"""

from __future__ import annotations

import time
import uuid
from contextvars import ContextVar, Token

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from chatbot_backend.observability.timing import elapsed_ms_since

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")
_session_tag: ContextVar[str] = ContextVar("session_tag", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id corrente (ou vazio)."""

    return _correlation_id.get()


def get_session_tag() -> str:
    """Retorna o prefixo da sessão corrente (ou vazio)."""

    return _session_tag.get()


def bind_session(session_id: str) -> Token[str]:
    """Associa a sessão ao contexto corrente; devolve token para reset."""

    return _session_tag.set(session_id[:8])


def unbind_session(token: Token[str]) -> None:
    _session_tag.reset(token)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Gera ou propaga correlation_id e registra a latência de cada request."""

    def __init__(self, app, logger=None) -> None:  # type: ignore[no-untyped-def]
        super().__init__(app)
        self._logger = logger

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        incoming = request.headers.get("x-correlation-id")
        correlation_id = incoming or str(uuid.uuid4())
        token = _correlation_id.set(correlation_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
            if self._logger is not None:
                self._logger.info(
                    "http_request",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "status_code": response.status_code,
                        "elapsed_ms": elapsed_ms_since(start),
                    },
                )
        finally:
            _correlation_id.reset(token)

        response.headers["x-correlation-id"] = correlation_id
        return response
