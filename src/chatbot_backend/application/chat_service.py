"""Orquestração de um turno de chat (sessão → engine → efeitos).

Responsabilidades:
- Resolver a sessão (criar quando ausente, adotar id externo desconhecido)
- Registrar mensagens do usuário e do bot no histórico
- Executar o engine sobre cópias e gravar estado/dados de volta
- Disparar efeitos do lead concluído (relatório + persistência)

Falhas de efeitos colaterais são logadas e nunca derrubam o turno: o
usuário sempre recebe a resposta do engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chatbot_backend.application.dialogue_engine import (
    RESPONDER_HISTORY_LIMIT,
    MetricsSink,
    generate_reply,
    is_lead_completed,
)
from chatbot_backend.domain.enums import ConversationState, MessageRole
from chatbot_backend.domain.localization import MessageKey, translate
from chatbot_backend.domain.models import Lead, SessionData
from chatbot_backend.domain.protocols import (
    FreeFormResponder,
    LeadStoreError,
    LeadStoreProtocol,
    ReportGenerator,
    SessionStoreProtocol,
)
from chatbot_backend.observability.logging import get_logger
from chatbot_backend.observability.middleware import bind_session, unbind_session

logger: logging.Logger = get_logger(__name__)


class EmptyMessageError(ValueError):
    """Mensagem vazia (ou só espaços) rejeitada antes do engine."""


@dataclass(slots=True, frozen=True)
class ChatTurnResult:
    session_id: str
    reply: str
    state: ConversationState


class ChatService:
    """Ponto único de entrada para um turno de conversa."""

    def __init__(
        self,
        store: SessionStoreProtocol,
        metrics: MetricsSink,
        responder: FreeFormResponder | None = None,
        lead_store: LeadStoreProtocol | None = None,
        report_generator: ReportGenerator | None = None,
        history_limit: int = RESPONDER_HISTORY_LIMIT,
    ) -> None:
        self._store = store
        self._metrics = metrics
        self._responder = responder
        self._lead_store = lead_store
        self._report_generator = report_generator
        self._history_limit = history_limit

    async def _resolve_session(self, session_id: str | None) -> str:
        if session_id is None or not session_id.strip():
            return await self._store.create()
        return await self._store.ensure(session_id.strip())

    async def handle_turn(self, session_id: str | None, message: str) -> ChatTurnResult:
        """Processa uma mensagem e devolve a resposta do bot.

        Raises:
            EmptyMessageError: Se a mensagem estiver vazia
        """
        if not message or not message.strip():
            raise EmptyMessageError("message must not be empty")

        resolved_id = await self._resolve_session(session_id)
        token = bind_session(resolved_id)
        try:
            return await self._run_turn(resolved_id, message)
        finally:
            unbind_session(token)

    async def _run_turn(self, session_id: str, message: str) -> ChatTurnResult:
        await self._store.append_message(session_id, MessageRole.USER, message)

        history = await self._store.get_history(session_id) or []
        current_state = await self._store.get_state(session_id)
        current_data = await self._store.get_data(session_id)

        reply, next_state, next_data = await generate_reply(
            current_state,
            message,
            current_data,
            history,
            self._metrics,
            responder=self._responder,
            history_limit=self._history_limit,
        )

        await self._store.set_state(session_id, next_state)
        await self._store.set_data(session_id, next_data)

        if is_lead_completed(current_state, next_state):
            report_url = await self._finalize_lead(session_id, next_data)
            if report_url:
                link = translate(next_data.language, MessageKey.REPORT_LINK, url=report_url)
                reply = f"{reply}\n\n{link}"

        await self._store.append_message(session_id, MessageRole.BOT, reply)

        logger.info(
            "chat_turn_completed",
            extra={
                "from_state": current_state,
                "to_state": next_state,
                "language": next_data.language,
            },
        )
        return ChatTurnResult(session_id=session_id, reply=reply, state=next_state)

    async def _finalize_lead(self, session_id: str, data: SessionData) -> str | None:
        """Gera relatório e grava o lead; devolve a URL do relatório (se houver)."""
        report_url: str | None = None
        if self._report_generator is not None:
            try:
                report_url = await self._report_generator.generate(session_id, data)
            except (OSError, ValueError) as e:
                logger.error(
                    "report_generation_failed",
                    extra={"error_type": type(e).__name__},
                )

        if self._lead_store is not None:
            try:
                await self._lead_store.append(Lead.from_session(session_id, data, report_url))
            except LeadStoreError as e:
                logger.error(
                    "lead_persist_failed",
                    extra={"error_type": type(e).__name__},
                )

        return report_url
