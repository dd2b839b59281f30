"""Prompts e formatação para o responder de texto livre.

Responsabilidades:
- Definir o system prompt fixo (preâmbulo)
- Converter o histórico de domínio em mensagens de chat
"""

from __future__ import annotations

from chatbot_backend.domain.enums import MessageRole
from chatbot_backend.domain.models import Message

SYSTEM_PREAMBLE = (
    "You are a helpful assistant for a web development agency. "
    "Keep answers short and friendly. "
    "If the user wants a website, suggest typing 'website' to start a project request."
)

_ROLE_MAP: dict[MessageRole, str] = {
    MessageRole.USER: "user",
    MessageRole.BOT: "assistant",
}


def get_system_prompt() -> str:
    """Retorna o preâmbulo enviado antes do histórico."""
    return SYSTEM_PREAMBLE


def format_history(history: list[Message], limit: int) -> list[dict[str, str]]:
    """Preâmbulo + até `limit` mensagens mais recentes, em ordem cronológica."""
    recent = history[-limit:] if limit > 0 else []
    messages = [{"role": "system", "content": get_system_prompt()}]
    messages.extend(
        {"role": _ROLE_MAP[message.role], "content": message.content} for message in recent
    )
    return messages
