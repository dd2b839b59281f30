"""Engine de diálogo: FSM pura com regras globais e interrupções.

Ordem de avaliação de cada turno (cada etapa pode encerrar o turno):
1. Inferência de idioma (sempre conta métrica de idioma); em AskingLanguage
   a escolha explícita vence os marcadores
2. Aprendizado contínuo de tópicos
3. Reset global ("reset" / "cancel")
4. Status global ("status")
5. Interrupções (Pricing/Contact/Help fora do Idle)
6. Transição específica do estado (tabela de handlers)

Contrato:
- Total: nunca lança exceção por causa da entrada do usuário
- Sem I/O: a única fonte de não-determinismo é o responder injetado
- Recebe cópias (state, data, history) e devolve valores novos
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from chatbot_backend.domain.enums import (
    ENTRY_STATE,
    INTERRUPTION_INTENTS,
    ConversationState,
    Intent,
)
from chatbot_backend.domain.intents import detect_intent
from chatbot_backend.domain.keywords import extract_keywords, merge_keywords, tokenize
from chatbot_backend.domain.language import (
    detect_language,
    effective_language,
    match_language_choice,
)
from chatbot_backend.domain.localization import (
    FIELD_PLACEHOLDER,
    NAME_PLACEHOLDER,
    REPORT_MARKER,
    TOPICS_PLACEHOLDER,
    MessageKey,
    language_prompt,
    reminder,
    step_description,
    translate,
)
from chatbot_backend.domain.models import Message, SessionData
from chatbot_backend.domain.protocols.responder import FreeFormResponder
from chatbot_backend.observability.logging import get_logger, log_fallback
from chatbot_backend.observability.timing import elapsed_ms_since, timed

logger: logging.Logger = get_logger(__name__)

RESET_COMMANDS = frozenset({"reset", "cancel"})
STATUS_COMMAND = "status"
RESPONDER_HISTORY_LIMIT = 10

AFFIRMATIVE_TOKENS = frozenset({
    "yes", "yeah", "yep", "sure", "ok", "okay",
    "tak", "oui", "si", "sí", "claro",
})

INTERRUPTION_KEYS: dict[Intent, MessageKey] = {
    Intent.PRICING: MessageKey.PRICING_INFO,
    Intent.CONTACT: MessageKey.CONTACT_INFO,
    Intent.HELP: MessageKey.HELP_TEXT,
}

# Intenções do Idle resolvidas por texto fixo: (chave, próximo estado)
IDLE_REPLIES: dict[Intent, tuple[MessageKey, ConversationState]] = {
    Intent.GREETING: (MessageKey.GREETING, ConversationState.IDLE),
    Intent.PRICING: (MessageKey.PRICING_PITCH, ConversationState.ASKING_PROJECT_CONFIRMATION),
    Intent.CONTACT: (MessageKey.CONTACT_INFO, ConversationState.IDLE),
    Intent.HELP: (MessageKey.HELP_TEXT, ConversationState.IDLE),
    Intent.SERVICES: (MessageKey.SERVICES_LIST, ConversationState.IDLE),
}

_NAME_EXTRA_CHARS = frozenset("-'")


class MetricsSink(Protocol):
    """Destino das contagens do turno (ver MetricsAggregator)."""

    def increment_language(self, language: str) -> None: ...

    def increment_intent(self, intent: str) -> None: ...


@dataclass(slots=True)
class TurnContext:
    """Entrada de um handler de estado (já com idioma e tópicos aplicados)."""

    message: str
    data: SessionData
    detected_language: str | None = None

    @property
    def language(self) -> str:
        return self.data.language

    def reply(self, key: MessageKey, next_state: ConversationState, **params: str) -> Transition:
        """Transição com texto localizado no idioma da sessão."""
        return Transition(translate(self.language, key, **params), next_state, self.data)


@dataclass(slots=True)
class Transition:
    """Resultado de um handler de estado.

    - intent: intenção classificada a contabilizar (ou None)
    - delegate: True quando a resposta deve vir do responder externo;
      nesse caso `reply` contém o fallback localizado
    """

    reply: str
    next_state: ConversationState
    data: SessionData
    intent: Intent | None = None
    delegate: bool = False


def is_valid_name(text: str) -> bool:
    """Nome válido: não vazio, mais de 1 caractere, só letras/espaço/hífen/apóstrofo."""
    candidate = text.strip()
    if len(candidate) <= 1:
        return False
    return all(ch.isalpha() or ch in _NAME_EXTRA_CHARS or ch.isspace() for ch in candidate)


def is_affirmative(text: str) -> bool:
    lowered = text.lower()
    if any(tok in AFFIRMATIVE_TOKENS for tok in tokenize(lowered)):
        return True
    # "d'accord" é quebrado pelo tokenizador no apóstrofo
    return "d'accord" in lowered


def is_lead_completed(previous_state: ConversationState, next_state: ConversationState) -> bool:
    """Único ponto em que o lead está completo: AskingProjectDetails → Idle."""
    return (
        previous_state == ConversationState.ASKING_PROJECT_DETAILS
        and next_state == ConversationState.IDLE
    )


# ---------------------------------------------------------------------------
# Handlers por estado (puros)
# ---------------------------------------------------------------------------


def _handle_asking_language(ctx: TurnContext) -> Transition:
    chosen = ctx.detected_language
    if chosen is None:
        return Transition(language_prompt(), ConversationState.ASKING_LANGUAGE, ctx.data)

    ctx.data.language = chosen
    return Transition(translate(chosen, MessageKey.GREETING), ConversationState.IDLE, ctx.data)


def _handle_idle(ctx: TurnContext) -> Transition:
    intent = detect_intent(ctx.message)
    lang = ctx.language

    if intent == Intent.WEBSITE_REQUEST:
        return Transition(
            translate(lang, MessageKey.WEBSITE_START),
            ConversationState.ASKING_NAME,
            ctx.data.reset_keeping_language(),
            intent,
        )

    if intent in IDLE_REPLIES:
        key, next_state = IDLE_REPLIES[intent]
        return Transition(translate(lang, key), next_state, ctx.data, intent)

    return Transition(
        translate(lang, MessageKey.NOT_UNDERSTOOD),
        ConversationState.IDLE,
        ctx.data,
        intent,
        delegate=True,
    )


def _handle_asking_name(ctx: TurnContext) -> Transition:
    if not is_valid_name(ctx.message):
        return ctx.reply(MessageKey.INVALID_NAME, ConversationState.ASKING_NAME)

    ctx.data.name = ctx.message.strip()
    return ctx.reply(MessageKey.ASK_EMAIL, ConversationState.ASKING_EMAIL, name=ctx.data.name)


def _handle_asking_email(ctx: TurnContext) -> Transition:
    if "@" not in ctx.message:
        return ctx.reply(MessageKey.INVALID_EMAIL, ConversationState.ASKING_EMAIL)

    ctx.data.email = ctx.message.strip()
    return ctx.reply(MessageKey.ASK_BUDGET, ConversationState.ASKING_BUDGET)


def _handle_asking_budget(ctx: TurnContext) -> Transition:
    if not any(ch.isdigit() for ch in ctx.message):
        return ctx.reply(MessageKey.INVALID_BUDGET, ConversationState.ASKING_BUDGET)

    # Texto bruto: "5k", "5000 EUR" e faixas são aceitos como digitados
    ctx.data.budget = ctx.message.strip()
    return ctx.reply(MessageKey.ASK_PROJECT_DETAILS, ConversationState.ASKING_PROJECT_DETAILS)


def _handle_asking_project_details(ctx: TurnContext) -> Transition:
    data = ctx.data
    topics = ", ".join(data.detected_keywords).upper() or TOPICS_PLACEHOLDER
    return ctx.reply(
        MessageKey.PROJECT_SUMMARY,
        ConversationState.IDLE,
        name=data.name or NAME_PLACEHOLDER,
        email=data.email or FIELD_PLACEHOLDER,
        budget=data.budget or FIELD_PLACEHOLDER,
        topics=topics,
        marker=REPORT_MARKER,
    )


def _handle_asking_project_confirmation(ctx: TurnContext) -> Transition:
    if is_affirmative(ctx.message):
        return Transition(
            translate(ctx.language, MessageKey.WEBSITE_START),
            ConversationState.ASKING_NAME,
            ctx.data.reset_keeping_language(),
        )

    return ctx.reply(MessageKey.ACKNOWLEDGE, ConversationState.IDLE)


STATE_HANDLERS: dict[ConversationState, Callable[[TurnContext], Transition]] = {
    ConversationState.ASKING_LANGUAGE: _handle_asking_language,
    ConversationState.IDLE: _handle_idle,
    ConversationState.ASKING_NAME: _handle_asking_name,
    ConversationState.ASKING_EMAIL: _handle_asking_email,
    ConversationState.ASKING_BUDGET: _handle_asking_budget,
    ConversationState.ASKING_PROJECT_DETAILS: _handle_asking_project_details,
    ConversationState.ASKING_PROJECT_CONFIRMATION: _handle_asking_project_confirmation,
}


# ---------------------------------------------------------------------------
# Regras globais (prioridade sobre os handlers)
# ---------------------------------------------------------------------------


def _global_command(
    current_state: ConversationState, message: str, data: SessionData
) -> Transition | None:
    command = message.strip().lower()

    if command in RESET_COMMANDS:
        reply = f"{translate(data.language, MessageKey.RESET)}\n{language_prompt()}"
        return Transition(reply, ENTRY_STATE, SessionData())

    if command == STATUS_COMMAND:
        reply = translate(
            data.language,
            MessageKey.STATUS,
            step=step_description(data.language, current_state),
        )
        return Transition(reply, current_state, data)

    return None


def _interruption(
    current_state: ConversationState, message: str, data: SessionData
) -> Transition | None:
    if current_state == ConversationState.IDLE:
        return None

    intent = detect_intent(message)
    if intent not in INTERRUPTION_INTENTS:
        return None
    # Em AskingEmail, o próprio e-mail digitado casaria com Contact
    if intent == Intent.CONTACT and current_state == ConversationState.ASKING_EMAIL:
        return None

    answer = translate(data.language, INTERRUPTION_KEYS[intent])
    reply = f"{answer}\n\n{reminder(data.language, current_state)}"
    return Transition(reply, current_state, data, intent)


async def _delegate(
    transition: Transition,
    history: list[Message],
    responder: FreeFormResponder | None,
    history_limit: int,
) -> str:
    """Consulta o responder externo; qualquer falha vira o fallback localizado."""
    if responder is None:
        log_fallback(logger, "free_form_responder", reason="unavailable")
        return transition.reply

    start = time.perf_counter()
    try:
        text = await responder.complete(history[-history_limit:])
    except Exception as e:
        logger.warning(
            "free_form_responder_error",
            extra={"error_type": type(e).__name__},
        )
        text = None

    if not text or not text.strip():
        log_fallback(
            logger,
            "free_form_responder",
            reason="empty_or_failed",
            elapsed_ms=elapsed_ms_since(start),
        )
        return transition.reply

    return text.strip()


async def generate_reply(
    current_state: ConversationState,
    user_message: str,
    current_data: SessionData,
    history: list[Message],
    metrics: MetricsSink,
    responder: FreeFormResponder | None = None,
    history_limit: int = RESPONDER_HISTORY_LIMIT,
) -> tuple[str, ConversationState, SessionData]:
    """Avalia um turno e devolve (resposta, próximo estado, próximos dados).

    `current_data` nunca é modificado; o engine trabalha sobre uma cópia.
    """
    with timed("dialogue_engine", logger):
        data = current_data.model_copy(deep=True)

        # 1. Idioma
        detected = detect_language(user_message)
        if current_state == ConversationState.ASKING_LANGUAGE:
            detected = match_language_choice(user_message) or detected
        if detected:
            data.language = detected
        metrics.increment_language(effective_language(data.language))

        # 2. Tópicos
        data.detected_keywords = merge_keywords(
            data.detected_keywords, extract_keywords(user_message)
        )

        # 3-5. Regras globais e interrupções
        transition = _global_command(current_state, user_message, data)
        if transition is None:
            transition = _interruption(current_state, user_message, data)

        # 6. FSM
        if transition is None:
            ctx = TurnContext(message=user_message, data=data, detected_language=detected)
            transition = STATE_HANDLERS[current_state](ctx)

        if transition.intent is not None:
            metrics.increment_intent(transition.intent.value)

        reply = transition.reply
        if transition.delegate:
            reply = await _delegate(transition, history, responder, history_limit)

        logger.debug(
            "dialogue_turn_evaluated",
            extra={
                "current_state": current_state,
                "next_state": transition.next_state,
                "intent": transition.intent,
                "language": transition.data.language,
            },
        )

    return reply, transition.next_state, transition.data
