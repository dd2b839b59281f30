"""Inferência de idioma por palavras-marcador.

Idiomas suportados: en, fr, pl, es. A inferência compara *tokens* inteiros
com os marcadores de cada idioma, na ordem de SUPPORTED_LANGUAGES.
"""

from __future__ import annotations

from chatbot_backend.domain.keywords import tokenize
from chatbot_backend.domain.models import DEFAULT_LANGUAGE

SUPPORTED_LANGUAGES: tuple[str, ...] = ("en", "fr", "pl", "es")

# Saudação, ajuda, preço, contato e site em cada idioma
LANGUAGE_MARKERS: dict[str, frozenset[str]] = {
    "en": frozenset({
        "hello", "hi", "hey", "help", "price", "pricing", "cost",
        "contact", "website", "english",
    }),
    "fr": frozenset({
        "bonjour", "salut", "aide", "aider", "prix", "tarif", "combien",
        "contacter", "joindre", "français", "francais", "merci",
    }),
    "pl": frozenset({
        "cześć", "czesc", "hej", "dzień", "pomoc", "cena", "ceny", "koszt",
        "kontakt", "strona", "stronę", "polski", "dziękuję",
    }),
    "es": frozenset({
        "hola", "buenas", "ayuda", "precio", "cuánto", "cuanto", "contacto",
        "sitio", "página", "español", "espanol", "gracias",
    }),
}

# Nomes aceitos em qualquer posição da resposta
LANGUAGE_NAMES: dict[str, str] = {
    "english": "en",
    "français": "fr",
    "francais": "fr",
    "french": "fr",
    "polski": "pl",
    "polish": "pl",
    "español": "es",
    "espanol": "es",
    "spanish": "es",
}

# Códigos só valem como resposta inteira ("en" é preposição em francês)
LANGUAGE_CODES: frozenset[str] = frozenset(SUPPORTED_LANGUAGES)


def detect_language(text: str) -> str | None:
    """Retorna o código do primeiro idioma com marcador presente, ou None."""
    tokens = set(tokenize(text))
    if not tokens:
        return None
    for code in SUPPORTED_LANGUAGES:
        if tokens & LANGUAGE_MARKERS[code]:
            return code
    return None


def match_language_choice(text: str) -> str | None:
    """Casa a resposta do usuário com nome de idioma ou código isolado."""
    for token in tokenize(text):
        if token in LANGUAGE_NAMES:
            return LANGUAGE_NAMES[token]

    code = text.strip().lower()
    return code if code in LANGUAGE_CODES else None


def effective_language(code: str | None) -> str:
    """Normaliza idioma vazio/desconhecido para o padrão."""
    if code and code in SUPPORTED_LANGUAGES:
        return code
    return DEFAULT_LANGUAGE
