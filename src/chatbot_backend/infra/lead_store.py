"""Persistência append-only de leads finalizados.

Backends:
- "memory": lista em processo (dev/testes)
- "jsonl": um objeto JSON por linha em arquivo local

Leads carregam PII (nome, e-mail); nunca logar o conteúdo, apenas o
session_id truncado.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from pydantic import ValidationError

from chatbot_backend.config.settings import Settings
from chatbot_backend.domain.models import Lead
from chatbot_backend.domain.protocols.lead_store import LeadStoreError, LeadStoreProtocol
from chatbot_backend.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class InMemoryLeadStore(LeadStoreProtocol):
    """Leads em memória; zeram com o restart do processo."""

    def __init__(self) -> None:
        self._leads: list[Lead] = []
        self._lock = asyncio.Lock()

    async def append(self, lead: Lead) -> None:
        async with self._lock:
            self._leads.append(lead.model_copy(deep=True))
        logger.info("lead_saved", extra={"session_id": lead.session_id[:8] + "..."})

    async def list_leads(self) -> list[Lead]:
        return [lead.model_copy(deep=True) for lead in self._leads]


class JsonlLeadStore(LeadStoreProtocol):
    """Leads em arquivo JSON Lines (uma linha por lead, nunca reescrito)."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _write_line(self, line: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")

    def _read_lines(self) -> list[str]:
        if not self._path.exists():
            return []
        return self._path.read_text(encoding="utf-8").splitlines()

    async def append(self, lead: Lead) -> None:
        line = lead.model_dump_json()
        try:
            async with self._lock:
                await asyncio.to_thread(self._write_line, line)
        except OSError as e:
            logger.error(
                "lead_write_failed",
                extra={"error_type": type(e).__name__, "path": str(self._path)},
            )
            raise LeadStoreError(f"Falha ao gravar lead: {e}") from e

        logger.info("lead_saved", extra={"session_id": lead.session_id[:8] + "..."})

    async def list_leads(self) -> list[Lead]:
        try:
            async with self._lock:
                lines = await asyncio.to_thread(self._read_lines)
        except OSError as e:
            raise LeadStoreError(f"Falha ao ler leads: {e}") from e

        leads: list[Lead] = []
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                leads.append(Lead.model_validate_json(line))
            except ValidationError:
                logger.warning(
                    "lead_line_skipped",
                    extra={"path": str(self._path), "line": number},
                )
        return leads


def create_lead_store(settings: Settings) -> LeadStoreProtocol:
    """Factory para o store de leads conforme `settings.lead_store_backend`.

    Raises:
        ValueError: Se backend não reconhecido
    """
    backend = settings.lead_store_backend.lower()
    if backend == "memory":
        logger.info("Usando InMemoryLeadStore (apenas dev/testes)")
        return InMemoryLeadStore()

    if backend == "jsonl":
        logger.info("Usando JsonlLeadStore", extra={"path": settings.leads_file})
        return JsonlLeadStore(settings.leads_file)

    raise ValueError(f"Backend de leads não reconhecido: {backend}")
