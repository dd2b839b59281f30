"""Configurações centralizadas do chatbot_backend.

Este módulo exporta:
- Settings: classe de configuração via variáveis de ambiente
- get_settings: função cacheada para obter instância única

Uso típico:
    from chatbot_backend.config import get_settings
"""

from chatbot_backend.config.settings import (
    DEFAULT_RESPONDER_BASE_URL,
    DEFAULT_RESPONDER_MODEL,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "DEFAULT_RESPONDER_BASE_URL",
    "DEFAULT_RESPONDER_MODEL",
]
