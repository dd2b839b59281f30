"""Classificação determinística de intenção por palavras-chave.

Regras:
- Comparação case-insensitive por *substring* (não por token)
- Intenções avaliadas em ordem fixa de prioridade; a primeira que casa vence
- Nenhum casamento → Intent.UNKNOWN

O casamento por substring gera falsos positivos conhecidos (ex.: "hi" dentro
de "this").
"""

from __future__ import annotations

from chatbot_backend.domain.enums import Intent

# Ordem de inserção = ordem de prioridade
INTENT_KEYWORDS: dict[Intent, tuple[str, ...]] = {
    Intent.GREETING: (
        # en
        "hello",
        "hi",
        "hey",
        "good morning",
        # fr
        "bonjour",
        "salut",
        # pl
        "cześć",
        "czesc",
        "dzień dobry",
        # es
        "hola",
        "buenos días",
        "buenas",
    ),
    Intent.WEBSITE_REQUEST: (
        "website",
        "web site",
        "e-commerce",
        "ecommerce",
        "online shop",
        "landing page",
        "site web",
        "site internet",
        "strona",
        "stronę",
        "sitio web",
        "página web",
        "tienda online",
    ),
    Intent.PRICING: (
        "price",
        "pricing",
        "cost",
        "how much",
        "quote",
        "prix",
        "tarif",
        "combien",
        "coût",
        "cena",
        "ceny",
        "koszt",
        "ile kosztuje",
        "precio",
        "cuánto",
        "cuesta",
    ),
    Intent.CONTACT: (
        "contact",
        "email",
        "e-mail",
        "phone",
        "call you",
        "reach you",
        "téléphone",
        "joindre",
        "kontakt",
        "telefon",
        "contacto",
        "correo",
        "teléfono",
    ),
    Intent.HELP: (
        "help",
        "assist",
        "aide",
        "aider",
        "pomoc",
        "pomóż",
        "ayuda",
    ),
    Intent.SERVICES: (
        "service",
        "offer",
        "what do you do",
        "prestation",
        "usług",
        "oferta",
        "oferujecie",
        "servicio",
        "ofrecen",
    ),
}


def detect_intent(text: str) -> Intent:
    """Classifica a intenção de `text`.

    Retorna a primeira intenção (em ordem de prioridade) cuja lista de
    palavras-chave tem alguma ocorrência como substring do texto.
    """
    text_lower = text.lower()
    if not text_lower.strip():
        return Intent.UNKNOWN

    for intent, keywords in INTENT_KEYWORDS.items():
        if any(kw in text_lower for kw in keywords):
            return intent

    return Intent.UNKNOWN
