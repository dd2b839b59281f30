"""Protocolo de domínio para o armazenamento de sessões de conversa."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chatbot_backend.domain.enums import ConversationState, MessageRole
    from chatbot_backend.domain.models import Message, SessionData


class SessionStoreProtocol(ABC):
    """Contrato assíncrono do store de sessões.

    Contrato de falha:
    - Leituras de sessão inexistente devolvem valores padrão (sem exceção)
    - Escritas de estado/dados em sessão inexistente são descartadas
    - `append_message` cria a sessão se ela não existir
    """

    @abstractmethod
    async def create(self) -> str:
        """Cria sessão com id novo e devolve o id."""

    @abstractmethod
    async def ensure(self, session_id: str) -> str:
        """Get-or-create idempotente sob um id fornecido externamente."""

    @abstractmethod
    async def append_message(self, session_id: str, role: MessageRole, content: str) -> int:
        """Anexa mensagem ao histórico; devolve o novo tamanho."""

    @abstractmethod
    async def get_state(self, session_id: str) -> ConversationState: ...

    @abstractmethod
    async def set_state(self, session_id: str, state: ConversationState) -> None: ...

    @abstractmethod
    async def get_data(self, session_id: str) -> SessionData: ...

    @abstractmethod
    async def set_data(self, session_id: str, data: SessionData) -> None: ...

    @abstractmethod
    async def get_history(self, session_id: str) -> list[Message] | None:
        """Cópia do histórico, ou None se a sessão nunca existiu."""

    @abstractmethod
    async def remove(self, session_id: str) -> bool: ...

    @abstractmethod
    async def purge_expired(self, now: float | None = None) -> int:
        """Remove sessões ociosas há pelo menos o TTL; devolve quantas."""
