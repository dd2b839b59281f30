"""Agregador de métricas de uso (idioma e intenção).

Contadores monotônicos em memória: sem decremento, sem reset, sem
persistência. Zeram apenas com o restart do processo.
"""

from __future__ import annotations

import threading

from chatbot_backend.domain.models import MetricsData


class MetricsAggregator:
    """Contadores por idioma e por intenção, seguros entre threads."""

    def __init__(self) -> None:
        self._language_usage: dict[str, int] = {}
        self._intent_usage: dict[str, int] = {}
        self._lock = threading.Lock()

    def increment_language(self, language: str) -> None:
        with self._lock:
            self._language_usage[language] = self._language_usage.get(language, 0) + 1

    def increment_intent(self, intent: str) -> None:
        with self._lock:
            self._intent_usage[intent] = self._intent_usage.get(intent, 0) + 1

    def snapshot(self) -> MetricsData:
        """Cópia independente dos dois mapas neste instante."""
        with self._lock:
            return MetricsData(
                language_usage=dict(self._language_usage),
                intent_usage=dict(self._intent_usage),
            )
