"""Configurações da aplicação via variáveis de ambiente.

Todas as configurações são carregadas de env vars (ou arquivo .env em dev).
Nunca hardcode secrets ou chaves de API.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from chatbot_backend.observability.logging import get_logger

# -----------------------------------------------------------------------------
# Responder externo (API compatível com OpenAI; Mistral por padrão)
# -----------------------------------------------------------------------------
DEFAULT_RESPONDER_BASE_URL: str = "https://api.mistral.ai/v1"
DEFAULT_RESPONDER_MODEL: str = "mistral-small-latest"


class Settings(BaseSettings):
    """Configurações lidas do ambiente."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        extra="ignore",
    )

    # Aplicação
    service_name: str = "chatbot_backend"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"

    # Sessão
    session_ttl_seconds: int = 3600  # 1 hora de inatividade
    session_purge_interval_seconds: int = 300  # varredura a cada 5 minutos
    session_purge_enabled: bool = True

    # Responder livre (fallback de intenção desconhecida)
    responder_enabled: bool = False  # fail-safe: desabilitado
    responder_api_key: str | None = None
    responder_base_url: str = DEFAULT_RESPONDER_BASE_URL
    responder_model: str = DEFAULT_RESPONDER_MODEL
    responder_timeout_seconds: float = 10.0
    responder_history_limit: int = 10
    responder_temperature: float = 0.7
    responder_max_tokens: int = 300

    # Leads
    lead_store_backend: str = "memory"  # memory | jsonl
    leads_file: str = "data/leads.jsonl"

    # Relatórios de projeto
    reports_enabled: bool = True
    reports_dir: str = "public/reports"
    reports_url_prefix: str = "/reports"

    # Admin
    admin_api_key: str | None = None
    admin_key_header: str = "x-admin-key"

    # Borda HTTP
    max_message_length_chars: int = 4096

    def validate_responder_config(self) -> list[str]:
        """Valida configuração do responder externo.

        Se responder_enabled=True, exige RESPONDER_API_KEY.
        Retorna lista de erros (vazia = OK).
        """
        errors: list[str] = []
        if self.responder_enabled and not self.responder_api_key:
            errors.append("RESPONDER_ENABLED=true requires RESPONDER_API_KEY")
        if self.responder_timeout_seconds <= 0:
            errors.append("RESPONDER_TIMEOUT_SECONDS must be > 0")
        if self.responder_history_limit < 1:
            errors.append("RESPONDER_HISTORY_LIMIT must be >= 1")
        return errors

    def validate_session_config(self) -> list[str]:
        """Valida TTL e cadência de purge."""
        errors: list[str] = []
        if self.session_ttl_seconds <= 0:
            errors.append("SESSION_TTL_SECONDS must be > 0")
        if self.session_purge_interval_seconds <= 0:
            errors.append("SESSION_PURGE_INTERVAL_SECONDS must be > 0")
        return errors

    def validate_lead_store_config(self) -> list[str]:
        """Valida backend de persistência de leads."""
        errors: list[str] = []
        backend = self.lead_store_backend.lower()
        valid_backends = {"memory", "jsonl"}
        if backend not in valid_backends:
            errors.append(
                f"LEAD_STORE_BACKEND '{backend}' invalid. Valid values: {sorted(valid_backends)}"
            )
        if backend == "jsonl" and not self.leads_file:
            errors.append("LEAD_STORE_BACKEND=jsonl requires LEADS_FILE")

        # Em staging/prod, leads em memória se perdem a cada restart
        if backend == "memory" and (self.is_staging or self.is_production):
            errors.append("LEAD_STORE_BACKEND=memory is forbidden in staging/production")
        return errors

    def validate_admin_config(self) -> list[str]:
        """Em staging/prod, a chave de admin é obrigatória."""
        errors: list[str] = []
        if (self.is_staging or self.is_production) and not self.admin_api_key:
            errors.append("ADMIN_API_KEY is required in staging/production")
        return errors

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_staging(self) -> bool:
        """Retorna True se ambiente é staging."""
        return self.environment.lower() in ("staging", "stage")

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment.lower() in ("development", "dev", "local")

    def model_post_init(self, __context: Any) -> None:
        """Registra o ambiente carregado (sem expor secrets)."""
        logger: logging.Logger = get_logger(__name__)
        logger.info(
            "settings_loaded",
            extra={
                "environment": self.environment,
                "responder_enabled": self.responder_enabled,
                "lead_store_backend": self.lead_store_backend,
            },
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retorna uma instância cacheada de Settings.

    A cache garante que mesmo múltiplas injeções não criam novos objetos.
    """
    return Settings()
