"""Testes do responder de texto livre (cliente OpenAI simulado)."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest
from openai import APIConnectionError, APITimeoutError

from chatbot_backend.ai.prompts import SYSTEM_PREAMBLE, format_history
from chatbot_backend.ai.responder import OpenAICompatibleResponder, create_responder
from chatbot_backend.config.settings import Settings
from chatbot_backend.domain.enums import MessageRole
from chatbot_backend.domain.models import Message

_REQUEST = httpx.Request("POST", "https://api.example.test/v1/chat/completions")


def _completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _fake_client(create: AsyncMock) -> SimpleNamespace:
    return SimpleNamespace(
        chat=SimpleNamespace(completions=SimpleNamespace(create=create)),
        close=AsyncMock(),
    )


def _responder(create: AsyncMock, history_limit: int = 10) -> OpenAICompatibleResponder:
    return OpenAICompatibleResponder(
        api_key="k",
        base_url="https://api.example.test/v1",
        model="test-model",
        history_limit=history_limit,
        client=_fake_client(create),  # type: ignore[arg-type]
    )


def _history(n: int) -> list[Message]:
    roles = (MessageRole.USER, MessageRole.BOT)
    return [Message(role=roles[i % 2], content=f"m{i}") for i in range(n)]


class TestFormatHistory:
    def test_preamble_first_and_roles_mapped(self):
        messages = format_history(_history(2), limit=10)
        assert messages[0] == {"role": "system", "content": SYSTEM_PREAMBLE}
        assert messages[1] == {"role": "user", "content": "m0"}
        assert messages[2] == {"role": "assistant", "content": "m1"}

    def test_keeps_only_most_recent(self):
        messages = format_history(_history(15), limit=10)
        assert len(messages) == 11
        assert messages[1]["content"] == "m5"
        assert messages[-1]["content"] == "m14"


class TestComplete:
    @pytest.mark.asyncio
    async def test_returns_stripped_text(self):
        create = AsyncMock(return_value=_completion("  Sure, we build blogs.  "))
        result = await _responder(create).complete(_history(3))

        assert result == "Sure, we build blogs."
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["messages"][0]["role"] == "system"

    @pytest.mark.asyncio
    async def test_sends_bounded_history(self):
        create = AsyncMock(return_value=_completion("ok"))
        await _responder(create, history_limit=4).complete(_history(12))

        sent = create.call_args.kwargs["messages"]
        assert len(sent) == 5
        assert [m["content"] for m in sent[1:]] == ["m8", "m9", "m10", "m11"]

    @pytest.mark.asyncio
    async def test_timeout_returns_none(self):
        create = AsyncMock(side_effect=APITimeoutError(request=_REQUEST))
        assert await _responder(create).complete(_history(1)) is None

    @pytest.mark.asyncio
    async def test_connection_error_returns_none(self):
        create = AsyncMock(side_effect=APIConnectionError(request=_REQUEST))
        assert await _responder(create).complete(_history(1)) is None

    @pytest.mark.asyncio
    async def test_empty_choices_returns_none(self):
        create = AsyncMock(return_value=SimpleNamespace(choices=[]))
        assert await _responder(create).complete(_history(1)) is None

    @pytest.mark.asyncio
    async def test_blank_content_returns_none(self):
        create = AsyncMock(return_value=_completion("   "))
        assert await _responder(create).complete(_history(1)) is None

    @pytest.mark.asyncio
    async def test_none_content_returns_none(self):
        create = AsyncMock(return_value=_completion(None))
        assert await _responder(create).complete(_history(1)) is None


class TestCreateResponder:
    def test_disabled_returns_none(self):
        assert create_responder(Settings(responder_enabled=False, responder_api_key="k")) is None

    def test_missing_key_returns_none(self):
        assert create_responder(Settings(responder_enabled=True, responder_api_key=None)) is None

    def test_enabled_with_key(self):
        settings = Settings(responder_enabled=True, responder_api_key="k", responder_model="m")
        responder = create_responder(settings)
        assert isinstance(responder, OpenAICompatibleResponder)
        assert responder.model == "m"
