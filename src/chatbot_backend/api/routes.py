"""Rotas HTTP: chat, healthcheck e leitura administrativa."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from chatbot_backend.api.dependencies import (
    get_chat_service,
    get_lead_store,
    get_metrics,
    get_settings,
    require_admin_key,
)
from chatbot_backend.api.schemas import (
    ChatRequest,
    ChatResponse,
    HealthResponse,
    MetricsResponse,
)
from chatbot_backend.application.chat_service import ChatService, EmptyMessageError
from chatbot_backend.application.metrics import MetricsAggregator
from chatbot_backend.config.settings import Settings
from chatbot_backend.domain.models import Lead
from chatbot_backend.domain.protocols.lead_store import LeadStoreError, LeadStoreProtocol
from chatbot_backend.observability.logging import get_logger
from chatbot_backend.observability.middleware import get_correlation_id

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """Healthcheck simples."""
    return HealthResponse(status="ok", service=settings.service_name, version=settings.version)


@router.post("/chat", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
    settings: Settings = Depends(get_settings),
) -> ChatResponse:
    """Processa uma mensagem e devolve a resposta do bot."""
    if len(payload.message) > settings.max_message_length_chars:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="message_too_long",
        )

    try:
        result = await chat_service.handle_turn(payload.session_id, payload.message)
    except EmptyMessageError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="empty_message",
        ) from exc

    return ChatResponse(session_id=result.session_id, reply=result.reply)


@router.get(
    "/admin/metrics",
    response_model=MetricsResponse,
    dependencies=[Depends(require_admin_key)],
)
def admin_metrics(metrics: MetricsAggregator = Depends(get_metrics)) -> MetricsResponse:
    """Snapshot dos contadores de idioma e intenção."""
    snapshot = metrics.snapshot()
    return MetricsResponse(
        language_usage=snapshot.language_usage,
        intent_usage=snapshot.intent_usage,
    )


@router.get(
    "/admin/leads",
    response_model=list[Lead],
    dependencies=[Depends(require_admin_key)],
)
async def admin_leads(lead_store: LeadStoreProtocol = Depends(get_lead_store)) -> list[Lead]:
    """Leads finalizados, na ordem de gravação."""
    try:
        return await lead_store.list_leads()
    except LeadStoreError as exc:
        logger.error("lead_list_failed", extra={"error_type": type(exc).__name__})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "lead_store_unavailable",
                "correlation_id": get_correlation_id(),
            },
        ) from exc
