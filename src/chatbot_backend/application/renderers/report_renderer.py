"""Renderizador do relatório de pedido de projeto (HTML estático).

Responsabilidades:
- Montar os campos do lead com placeholders quando ausentes
- Formatar tópicos detectados (maiúsculas, separados por vírgula)
- Escapar todo conteúdo vindo do usuário

Função pura: não toca em disco.
"""

from __future__ import annotations

from html import escape

from chatbot_backend.domain.localization import FIELD_PLACEHOLDER, NAME_PLACEHOLDER
from chatbot_backend.domain.models import SessionData

REPORT_TITLE = "Project Request Report"
NO_TOPICS = "None"


def render_topics(keywords: list[str]) -> str:
    """Tópicos em maiúsculas separados por vírgula, ou "None"."""
    if not keywords:
        return NO_TOPICS
    return ", ".join(keywords).upper()


def render_fields(data: SessionData) -> list[tuple[str, str]]:
    return [
        ("Client Name", data.name or NAME_PLACEHOLDER),
        ("Email Address", data.email or FIELD_PLACEHOLDER),
        ("Budget Estimate", data.budget or FIELD_PLACEHOLDER),
    ]


def render_report_html(session_id: str, data: SessionData) -> str:
    """Documento HTML completo do relatório."""
    rows = "\n".join(
        f"      <tr><th>{escape(label)}</th><td>{escape(value)}</td></tr>"
        for label, value in render_fields(data)
    )
    topics = escape(render_topics(data.detected_keywords))

    return f"""<!DOCTYPE html>
<html lang="{escape(data.language)}">
  <head>
    <meta charset="utf-8">
    <title>{REPORT_TITLE}</title>
  </head>
  <body>
    <h1>{REPORT_TITLE}</h1>
    <table>
{rows}
    </table>
    <h2>Detected Topics:</h2>
    <p>{topics}</p>
    <footer>Session ID: {escape(session_id)}</footer>
  </body>
</html>
"""
