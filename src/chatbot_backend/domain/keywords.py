"""Extração de tópicos de projeto a partir de texto livre."""

from __future__ import annotations

import re
from collections.abc import Iterable

# Letras/dígitos unicode; underscore conta como separador
_TOKEN_PATTERN = re.compile(r"[^\W_]+")

TOPIC_VOCABULARY: frozenset[str] = frozenset({
    # Tipos de site
    "blog",
    "ecommerce",
    "shop",
    "store",
    "portfolio",
    "landing",
    "corporate",
    "marketplace",
    "forum",
    "booking",
    # Tecnologias
    "rust",
    "python",
    "javascript",
    "typescript",
    "react",
    "vue",
    "angular",
    "node",
    "django",
    "wordpress",
    "shopify",
    "php",
    "java",
    "api",
    "database",
    "sql",
    # Design
    "design",
    "ui",
    "ux",
    "logo",
    "branding",
    # Marketing
    "seo",
    "marketing",
    "ads",
    "analytics",
    # Mobile
    "mobile",
    "android",
    "ios",
    "app",
    # Backend / infra
    "backend",
    "frontend",
    "server",
    "cloud",
    "hosting",
    "payment",
    "payments",
})


def tokenize(text: str) -> list[str]:
    """Quebra o texto em tokens minúsculos nas fronteiras não alfanuméricas."""
    return _TOKEN_PATTERN.findall(text.lower())


def extract_keywords(text: str) -> list[str]:
    """Retorna os tópicos do vocabulário presentes em `text`.

    Ordem de aparição no texto, sem duplicatas.
    """
    return merge_keywords([], (tok for tok in tokenize(text) if tok in TOPIC_VOCABULARY))


def merge_keywords(existing: list[str], new: Iterable[str]) -> list[str]:
    """Anexa tópicos novos preservando a ordem de primeira ocorrência.

    Nunca remove nem reordena entradas existentes.
    """
    merged = list(existing)
    seen = set(merged)
    for keyword in new:
        if keyword not in seen:
            merged.append(keyword)
            seen.add(keyword)
    return merged
