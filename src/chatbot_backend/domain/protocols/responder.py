"""Porta para o responder de texto livre (IA externa)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from chatbot_backend.domain.models import Message


class FreeFormResponder(Protocol):
    """Capacidade opcional consultada apenas em intenção desconhecida no Idle.

    `complete` devolve o texto da resposta ou None quando indisponível.
    Implementações não devem lançar exceção.
    """

    async def complete(self, history: list[Message]) -> str | None:
        """Gera resposta a partir das mensagens mais recentes."""
