"""Modelos de domínio (contratos principais)."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from chatbot_backend.domain.enums import MessageRole

DEFAULT_LANGUAGE = "en"


class SessionData(BaseModel):
    """Dados acumulados durante a conversa (perfil do lead em construção).

    `budget` é texto livre: o valor é guardado exatamente como digitado.
    `detected_keywords` funciona como conjunto ordenado (ordem de primeira
    ocorrência, sem duplicatas).
    """

    language: str = DEFAULT_LANGUAGE
    name: str | None = None
    email: str | None = None
    budget: str | None = None
    detected_keywords: list[str] = Field(default_factory=list)

    def reset_keeping_language(self) -> SessionData:
        """Nova instância padrão preservando apenas o idioma."""
        return SessionData(language=self.language)


class Message(BaseModel):
    """Mensagem imutável do histórico."""

    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))


class MetricsData(BaseModel):
    """Snapshot dos contadores de uso."""

    language_usage: dict[str, int] = Field(default_factory=dict)
    intent_usage: dict[str, int] = Field(default_factory=dict)


class Lead(BaseModel):
    """Lead finalizado ao concluir a coleta de detalhes do projeto."""

    session_id: str
    language: str = DEFAULT_LANGUAGE
    name: str | None = None
    email: str | None = None
    budget: str | None = None
    detected_keywords: list[str] = Field(default_factory=list)
    report_url: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))

    @classmethod
    def from_session(
        cls, session_id: str, data: SessionData, report_url: str | None = None
    ) -> Lead:
        return cls(
            session_id=session_id,
            language=data.language,
            name=data.name,
            email=data.email,
            budget=data.budget,
            detected_keywords=list(data.detected_keywords),
            report_url=report_url,
        )
