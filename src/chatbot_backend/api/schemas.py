"""Contratos HTTP da borda (request/response)."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class ChatRequest(BaseModel):
    """Mensagem recebida; `session_id` ausente ou vazio cria nova sessão."""

    session_id: str | None = None
    message: str

    @field_validator("message")
    @classmethod
    def _validate_message(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("message must not be empty")
        return stripped


class ChatResponse(BaseModel):
    session_id: str
    reply: str


class MetricsResponse(BaseModel):
    language_usage: dict[str, int] = Field(default_factory=dict)
    intent_usage: dict[str, int] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
