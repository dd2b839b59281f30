"""Enums de domínio: estados da conversa, intenções e papéis de mensagem."""

from __future__ import annotations

from enum import StrEnum


class ConversationState(StrEnum):
    """Estados da FSM de atendimento.

    Nenhum estado é terminal: a conversa circula até a sessão expirar.
    """

    ASKING_LANGUAGE = "AskingLanguage"
    IDLE = "Idle"
    ASKING_NAME = "AskingName"
    ASKING_EMAIL = "AskingEmail"
    ASKING_BUDGET = "AskingBudget"
    ASKING_PROJECT_DETAILS = "AskingProjectDetails"
    ASKING_PROJECT_CONFIRMATION = "AskingProjectConfirmation"


class Intent(StrEnum):
    """Intenções grosseiras de uma mensagem.

    Os valores são as chaves usadas nas métricas (`intent_usage`).
    """

    GREETING = "Greeting"
    WEBSITE_REQUEST = "WebsiteRequest"
    PRICING = "Pricing"
    CONTACT = "Contact"
    HELP = "Help"
    SERVICES = "Services"
    UNKNOWN = "Unknown"


class MessageRole(StrEnum):
    """Autor de uma mensagem no histórico da sessão."""

    USER = "user"
    BOT = "bot"


# Estado de entrada de sessões novas e alvo do comando reset
ENTRY_STATE: ConversationState = ConversationState.ASKING_LANGUAGE

# Intenções que podem interromper um fluxo de coleta sem abandoná-lo
INTERRUPTION_INTENTS = frozenset({Intent.PRICING, Intent.CONTACT, Intent.HELP})
