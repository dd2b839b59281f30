"""Gravação dos relatórios de projeto em diretório servido estaticamente.

O relatório é HTML: o formato não é contrato da API e o arquivo é servido
pelo StaticFiles sem dependência extra de geração de PDF.
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path

from chatbot_backend.application.renderers.report_renderer import render_report_html
from chatbot_backend.domain.models import SessionData
from chatbot_backend.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

# session_id vira nome de arquivo; nada além disso é aceito
_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]+$")


class HtmlReportGenerator:
    """Escreve `<reports_dir>/<session_id>.html` e devolve a URL pública.

    A renderização é pura; apenas a escrita roda em thread separada para
    não bloquear o event loop.
    """

    def __init__(self, reports_dir: str | Path, url_prefix: str = "/reports") -> None:
        self._dir = Path(reports_dir)
        self._prefix = url_prefix.rstrip("/")

    def _write(self, path: Path, content: str) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    async def generate(self, session_id: str, data: SessionData) -> str:
        """Gera o relatório; OSError e ValueError propagam para o chamador."""
        if not _SAFE_ID.match(session_id):
            raise ValueError("session_id inválido para nome de arquivo")

        filename = f"{session_id}.html"
        content = render_report_html(session_id, data)
        await asyncio.to_thread(self._write, self._dir / filename, content)

        logger.info("report_generated", extra={"session_id": session_id[:8] + "..."})
        return f"{self._prefix}/{filename}"
