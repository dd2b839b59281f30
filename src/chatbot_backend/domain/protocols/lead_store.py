"""Protocolos de domínio para persistência de leads e geração de relatório."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from chatbot_backend.domain.models import Lead, SessionData


class LeadStoreError(Exception):
    """Erro ao gravar ou ler leads."""

    pass


class LeadStoreProtocol(ABC):
    """Contrato mínimo append-only para leads finalizados."""

    @abstractmethod
    async def append(self, lead: Lead) -> None:
        """Grava o lead (sem sobrescrever registros anteriores)."""

    @abstractmethod
    async def list_leads(self) -> list[Lead]:
        """Lista leads na ordem de gravação."""


class ReportGenerator(Protocol):
    """Gera o relatório do projeto e devolve a URL/caminho público."""

    async def generate(self, session_id: str, data: SessionData) -> str: ...
