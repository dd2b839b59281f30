"""Dependências injetadas nas rotas."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from chatbot_backend.application.chat_service import ChatService
from chatbot_backend.application.metrics import MetricsAggregator
from chatbot_backend.config.settings import Settings
from chatbot_backend.domain.protocols.lead_store import LeadStoreProtocol


def get_settings(request: Request) -> Settings:
    """Retorna settings da aplicação."""

    return request.app.state.settings


def get_metrics(request: Request) -> MetricsAggregator:
    return request.app.state.metrics


def get_lead_store(request: Request) -> LeadStoreProtocol:
    """Retorna o store de leads ativo."""
    return request.app.state.lead_store


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


def require_admin_key(request: Request, settings: Settings = Depends(get_settings)) -> None:
    """Valida a chave de admin enviada no header configurado."""
    expected = settings.admin_api_key
    provided = request.headers.get(settings.admin_key_header)

    if expected and provided == expected:
        return

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="unauthorized_admin_call",
    )
