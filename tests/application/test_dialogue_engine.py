"""Testes do engine de diálogo (FSM, regras globais e interrupções)."""

from __future__ import annotations

import pytest

from chatbot_backend.application.dialogue_engine import (
    generate_reply,
    is_affirmative,
    is_lead_completed,
    is_valid_name,
)
from chatbot_backend.application.metrics import MetricsAggregator
from chatbot_backend.domain.enums import ENTRY_STATE, ConversationState, MessageRole
from chatbot_backend.domain.localization import REPORT_MARKER, MessageKey, translate
from chatbot_backend.domain.models import Message, SessionData

S = ConversationState


class RecordingResponder:
    """Responder falso que registra o histórico recebido."""

    def __init__(self, reply: str | None = "Free-form answer") -> None:
        self.reply = reply
        self.calls: list[list[Message]] = []

    async def complete(self, history: list[Message]) -> str | None:
        self.calls.append(list(history))
        return self.reply


class ExplodingResponder:
    async def complete(self, history: list[Message]) -> str | None:
        raise RuntimeError("network down")


@pytest.fixture()
def metrics() -> MetricsAggregator:
    return MetricsAggregator()


async def _turn(state, message, data=None, metrics=None, responder=None, history=None):
    return await generate_reply(
        state,
        message,
        data or SessionData(),
        history or [],
        metrics or MetricsAggregator(),
        responder=responder,
    )


class TestEndToEndWebsiteScenario:
    @pytest.mark.asyncio
    async def test_full_collection_flow(self, metrics):
        reply, state, data = await _turn(S.IDLE, "I want a website", metrics=metrics)
        assert state == S.ASKING_NAME
        assert "name" in reply

        reply, state, data = await _turn(state, "John", data, metrics)
        assert state == S.ASKING_EMAIL
        assert data.name == "John"
        assert "John" in reply
        assert "email" in reply

        reply, state, data = await _turn(state, "john@test.com", data, metrics)
        assert state == S.ASKING_BUDGET
        assert data.email == "john@test.com"
        assert "budget" in reply

        reply, state, data = await _turn(state, "5000", data, metrics)
        assert state == S.ASKING_PROJECT_DETAILS
        assert data.budget == "5000"
        assert "requirements" in reply

        reply, state, data = await _turn(state, "I need a blog", data, metrics)
        assert state == S.IDLE
        assert "5000" in reply
        assert REPORT_MARKER in reply
        assert "blog" in data.detected_keywords
        assert "BLOG" in reply

    @pytest.mark.asyncio
    async def test_summary_placeholders_when_fields_missing(self):
        reply, state, _ = await _turn(S.ASKING_PROJECT_DETAILS, "just something")
        assert state == S.IDLE
        assert "Unknown" in reply
        assert "N/A" in reply
        assert "GENERAL INQUIRY" in reply

    @pytest.mark.asyncio
    async def test_budget_is_kept_as_typed(self):
        _, state, data = await _turn(S.ASKING_BUDGET, " 5k EUR ")
        assert state == S.ASKING_PROJECT_DETAILS
        assert data.budget == "5k EUR"


class TestGlobalCommands:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("state", list(ConversationState))
    @pytest.mark.parametrize("command", ["reset", "  RESET  ", "Cancel"])
    async def test_reset_from_any_state(self, state, command):
        data = SessionData(
            language="pl", name="Jan", email="jan@x.pl", budget="1", detected_keywords=["blog"]
        )
        reply, next_state, next_data = await _turn(state, command, data)

        assert next_state == ENTRY_STATE
        assert next_data == SessionData()
        assert translate("en", MessageKey.CHOOSE_LANGUAGE) in reply

    @pytest.mark.asyncio
    async def test_reset_reply_uses_previous_language(self):
        reply, _, _ = await _turn(S.ASKING_NAME, "reset", SessionData(language="pl"))
        assert reply.startswith(translate("pl", MessageKey.RESET))

    @pytest.mark.asyncio
    async def test_status_keeps_state_and_data(self):
        data = SessionData(name="John")
        reply, state, next_data = await _turn(S.ASKING_EMAIL, " Status ", data)
        assert state == S.ASKING_EMAIL
        assert next_data.name == "John"
        assert "asking for your email address" in reply

    @pytest.mark.asyncio
    async def test_reset_is_exact_match(self):
        """Comando só vale quando é a mensagem inteira."""
        _, state, _ = await _turn(S.ASKING_BUDGET, "reset my budget")
        assert state == S.ASKING_BUDGET


class TestValidation:
    @pytest.mark.asyncio
    async def test_name_with_digits_is_rejected(self):
        reply, state, data = await _turn(S.ASKING_NAME, "User123")
        assert state == S.ASKING_NAME
        assert data.name is None
        assert reply == translate("en", MessageKey.INVALID_NAME)

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("John", True),
            ("Jean-Pierre", True),
            ("O'Brien", True),
            ("Anna Maria", True),
            ("Zoë", True),
            ("J", False),
            ("", False),
            ("User123", False),
            ("john@test.com", False),
        ],
    )
    def test_is_valid_name(self, text, expected):
        assert is_valid_name(text) is expected

    @pytest.mark.asyncio
    async def test_email_without_at_is_rejected(self):
        reply, state, data = await _turn(S.ASKING_EMAIL, "john at test dot com")
        assert state == S.ASKING_EMAIL
        assert data.email is None
        assert reply == translate("en", MessageKey.INVALID_EMAIL)

    @pytest.mark.asyncio
    async def test_budget_without_digit_is_rejected(self):
        reply, state, data = await _turn(S.ASKING_BUDGET, "a lot")
        assert state == S.ASKING_BUDGET
        assert data.budget is None
        assert reply == translate("en", MessageKey.INVALID_BUDGET)


class TestInterruptions:
    @pytest.mark.asyncio
    async def test_pricing_during_name_collection(self):
        reply, state, data = await _turn(S.ASKING_NAME, "what is the price?")
        assert state == S.ASKING_NAME
        assert data.name is None
        assert "$1000" in reply
        assert translate("en", MessageKey.REMIND_NAME) in reply

    @pytest.mark.asyncio
    async def test_help_during_budget(self):
        reply, state, _ = await _turn(S.ASKING_BUDGET, "help")
        assert state == S.ASKING_BUDGET
        assert reply.startswith(translate("en", MessageKey.HELP_TEXT))
        assert reply.endswith(translate("en", MessageKey.REMIND_BUDGET))

    @pytest.mark.asyncio
    async def test_contact_is_not_an_interruption_while_asking_email(self):
        _, state, data = await _turn(S.ASKING_EMAIL, "contact@acme.com")
        assert state == S.ASKING_BUDGET
        assert data.email == "contact@acme.com"

    @pytest.mark.asyncio
    async def test_interruption_counts_intent(self, metrics):
        await _turn(S.ASKING_NAME, "how much", metrics=metrics)
        assert metrics.snapshot().intent_usage == {"Pricing": 1}


class TestIdle:
    @pytest.mark.asyncio
    async def test_greeting(self):
        reply, state, _ = await _turn(S.IDLE, "Hello")
        assert state == S.IDLE
        assert reply == translate("en", MessageKey.GREETING)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("message", "key"),
        [
            ("How can I contact you", MessageKey.CONTACT_INFO),
            ("I need help", MessageKey.HELP_TEXT),
            ("What services do you offer", MessageKey.SERVICES_LIST),
        ],
    )
    async def test_informational_intents_stay_idle(self, message, key):
        reply, state, _ = await _turn(S.IDLE, message)
        assert state == S.IDLE
        assert reply == translate("en", key)

    @pytest.mark.asyncio
    async def test_website_request_resets_data_but_keeps_language(self):
        data = SessionData(language="fr", name="Old", detected_keywords=["seo"])
        _, state, next_data = await _turn(S.IDLE, "site web", data)
        assert state == S.ASKING_NAME
        assert next_data == SessionData(language="fr")

    @pytest.mark.asyncio
    async def test_pricing_moves_to_confirmation(self):
        reply, state, _ = await _turn(S.IDLE, "what is the price?")
        assert state == S.ASKING_PROJECT_CONFIRMATION
        assert reply == translate("en", MessageKey.PRICING_PITCH)


class TestConfirmation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["yes", "Sure!", "ok", "tak", "oui", "sí", "d'accord"])
    async def test_affirmative_starts_collection(self, answer):
        data = SessionData(language="en", name="Old")
        _, state, next_data = await _turn(S.ASKING_PROJECT_CONFIRMATION, answer, data)
        assert state == S.ASKING_NAME
        assert next_data.name is None

    @pytest.mark.asyncio
    async def test_negative_acknowledges_and_returns_to_idle(self):
        reply, state, _ = await _turn(S.ASKING_PROJECT_CONFIRMATION, "no thanks")
        assert state == S.IDLE
        assert reply == translate("en", MessageKey.ACKNOWLEDGE)

    def test_affirmative_uses_whole_tokens(self):
        assert is_affirmative("Yes please") is True
        assert is_affirmative("okra soup") is False


class TestLanguageSelection:
    @pytest.mark.asyncio
    async def test_entry_state_asks_language_until_recognised(self):
        reply, state, _ = await _turn(S.ASKING_LANGUAGE, "Deutsch")
        assert state == S.ASKING_LANGUAGE
        assert translate("es", MessageKey.CHOOSE_LANGUAGE) in reply

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("choice", "code"),
        [("English", "en"), ("Français", "fr"), ("Polski", "pl"), ("Español", "es")],
    )
    async def test_choice_sets_language_and_greets(self, choice, code):
        reply, state, data = await _turn(S.ASKING_LANGUAGE, choice)
        assert state == S.IDLE
        assert data.language == code
        assert reply == translate(code, MessageKey.GREETING)

    @pytest.mark.asyncio
    async def test_detected_language_also_counts_as_choice(self):
        _, state, data = await _turn(S.ASKING_LANGUAGE, "hola")
        assert state == S.IDLE
        assert data.language == "es"

    @pytest.mark.asyncio
    async def test_french_sentence_with_en_preposition_selects_french(self, metrics):
        reply, state, data = await _turn(
            S.ASKING_LANGUAGE, "Je veux parler en français", metrics=metrics
        )
        assert state == S.IDLE
        assert data.language == "fr"
        assert reply == translate("fr", MessageKey.GREETING)
        assert metrics.snapshot().language_usage == {"fr": 1}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("choice", "code"), [("Spanish", "es"), ("polish", "pl")])
    async def test_english_language_name_counts_chosen_language(self, metrics, choice, code):
        _, _, data = await _turn(S.ASKING_LANGUAGE, choice, metrics=metrics)
        assert data.language == code
        assert metrics.snapshot().language_usage == {code: 1}


class TestMultilingual:
    @pytest.mark.asyncio
    async def test_spanish_website_flow(self):
        reply, state, data = await _turn(S.IDLE, "Hola, quiero un sitio web")
        # Greeting tem prioridade sobre WebsiteRequest
        assert state == S.IDLE
        assert data.language == "es"
        assert reply == translate("es", MessageKey.GREETING)

        reply, state, data = await _turn(state, "quiero un sitio web", data)
        assert state == S.ASKING_NAME
        assert reply == translate("es", MessageKey.WEBSITE_START)

    @pytest.mark.asyncio
    async def test_polish_pricing(self):
        reply, state, data = await _turn(S.IDLE, "Ile kosztuje, jaka cena?")
        assert data.language == "pl"
        assert state == S.ASKING_PROJECT_CONFIRMATION
        assert reply == translate("pl", MessageKey.PRICING_PITCH)

    @pytest.mark.asyncio
    async def test_french_greeting(self):
        reply, _, data = await _turn(S.IDLE, "Bonjour")
        assert data.language == "fr"
        assert reply == translate("fr", MessageKey.GREETING)

    @pytest.mark.asyncio
    async def test_language_persists_without_markers(self):
        reply, _, data = await _turn(S.ASKING_NAME, "Jan", SessionData(language="pl"))
        assert data.language == "pl"
        assert reply == translate("pl", MessageKey.ASK_EMAIL, name="Jan")


class TestKeywordAccumulation:
    @pytest.mark.asyncio
    async def test_keywords_accumulate_in_order_without_duplicates(self):
        data = SessionData()
        _, state, data = await _turn(S.ASKING_BUDGET, "I need a Rust backend API", data)
        _, state, data = await _turn(S.ASKING_BUDGET, "and also Python", data)
        _, state, data = await _turn(S.ASKING_BUDGET, "rust again, api again", data)

        assert data.detected_keywords == ["rust", "backend", "api", "python"]

    @pytest.mark.asyncio
    async def test_input_data_is_not_mutated(self):
        data = SessionData()
        await _turn(S.ASKING_NAME, "John blog", data)
        assert data == SessionData()


class TestMetrics:
    @pytest.mark.asyncio
    async def test_one_pricing_turn(self, metrics):
        await _turn(S.IDLE, "what is the price?", metrics=metrics)
        snapshot = metrics.snapshot()
        assert snapshot.intent_usage == {"Pricing": 1}
        assert snapshot.language_usage == {"en": 1}

    @pytest.mark.asyncio
    async def test_language_counted_every_turn(self, metrics):
        await _turn(S.ASKING_NAME, "John", metrics=metrics)
        await _turn(S.ASKING_EMAIL, "status", SessionData(language="fr"), metrics)
        assert metrics.snapshot().language_usage == {"en": 1, "fr": 1}

    @pytest.mark.asyncio
    async def test_collection_turns_do_not_count_intents(self, metrics):
        await _turn(S.ASKING_NAME, "John", metrics=metrics)
        assert metrics.snapshot().intent_usage == {}

    @pytest.mark.asyncio
    async def test_unknown_counted(self, metrics):
        await _turn(S.IDLE, "the weather is nice", metrics=metrics)
        assert metrics.snapshot().intent_usage == {"Unknown": 1}


class TestFreeFormDelegation:
    @pytest.mark.asyncio
    async def test_unknown_uses_responder_text(self):
        responder = RecordingResponder("  We can do that.  ")
        reply, state, _ = await _turn(S.IDLE, "the weather is nice", responder=responder)
        assert state == S.IDLE
        assert reply == "We can do that."
        assert len(responder.calls) == 1

    @pytest.mark.asyncio
    async def test_responder_receives_last_ten_messages(self):
        responder = RecordingResponder()
        history = [
            Message(role=MessageRole.USER if i % 2 == 0 else MessageRole.BOT, content=f"m{i}")
            for i in range(25)
        ]
        await _turn(S.IDLE, "the weather is nice", responder=responder, history=history)
        sent = responder.calls[0]
        assert len(sent) == 10
        assert [m.content for m in sent] == [f"m{i}" for i in range(15, 25)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "responder", [None, RecordingResponder(None), RecordingResponder("  ")]
    )
    async def test_fallback_when_unavailable_or_empty(self, responder):
        reply, state, _ = await _turn(S.IDLE, "the weather is nice", responder=responder)
        assert state == S.IDLE
        assert reply == translate("en", MessageKey.NOT_UNDERSTOOD)

    @pytest.mark.asyncio
    async def test_fallback_when_responder_raises(self):
        reply, state, _ = await _turn(
            S.IDLE, "the weather is nice", responder=ExplodingResponder()
        )
        assert state == S.IDLE
        assert reply == translate("en", MessageKey.NOT_UNDERSTOOD)

    @pytest.mark.asyncio
    async def test_responder_not_called_for_known_intents(self):
        responder = RecordingResponder()
        await _turn(S.IDLE, "Hello", responder=responder)
        await _turn(S.ASKING_NAME, "blah blah", responder=responder)
        assert responder.calls == []


def test_lead_completion_edge():
    assert is_lead_completed(S.ASKING_PROJECT_DETAILS, S.IDLE) is True
    assert is_lead_completed(S.ASKING_PROJECT_DETAILS, S.ASKING_LANGUAGE) is False
    assert is_lead_completed(S.IDLE, S.IDLE) is False
