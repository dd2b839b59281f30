"""Tabela de localização: (idioma, chave) → texto exibido ao usuário.

Estrutura em dois níveis (idioma → chave → template), carregada uma vez como
dado somente leitura. Cadeia de fallback: idioma pedido → inglês.
Templates usam `str.format` com parâmetros nomeados.
"""

from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType
from typing import Any

from chatbot_backend.domain.enums import ConversationState
from chatbot_backend.domain.language import SUPPORTED_LANGUAGES
from chatbot_backend.domain.models import DEFAULT_LANGUAGE

# Marcador fixo (não traduzido) do resumo final; consumidores procuram por ele
REPORT_MARKER = "REPORT GENERATED"
NAME_PLACEHOLDER = "Unknown"
FIELD_PLACEHOLDER = "N/A"
TOPICS_PLACEHOLDER = "GENERAL INQUIRY"


class MessageKey(StrEnum):
    """Chaves de mensagem localizável."""

    CHOOSE_LANGUAGE = "choose_language"
    GREETING = "greeting"
    RESET = "reset"
    STATUS = "status"
    PRICING_INFO = "pricing_info"
    PRICING_PITCH = "pricing_pitch"
    CONTACT_INFO = "contact_info"
    HELP_TEXT = "help_text"
    SERVICES_LIST = "services_list"
    NOT_UNDERSTOOD = "not_understood"
    WEBSITE_START = "website_start"
    ASK_EMAIL = "ask_email"
    ASK_BUDGET = "ask_budget"
    ASK_PROJECT_DETAILS = "ask_project_details"
    INVALID_NAME = "invalid_name"
    INVALID_EMAIL = "invalid_email"
    INVALID_BUDGET = "invalid_budget"
    PROJECT_SUMMARY = "project_summary"
    ACKNOWLEDGE = "acknowledge"
    REPORT_LINK = "report_link"
    # Lembretes anexados às respostas de interrupção
    REMIND_LANGUAGE = "remind_language"
    REMIND_NAME = "remind_name"
    REMIND_EMAIL = "remind_email"
    REMIND_BUDGET = "remind_budget"
    REMIND_PROJECT_DETAILS = "remind_project_details"
    REMIND_PROJECT_CONFIRMATION = "remind_project_confirmation"
    # Descrição de cada etapa (comando status)
    STEP_ASKING_LANGUAGE = "step_asking_language"
    STEP_IDLE = "step_idle"
    STEP_ASKING_NAME = "step_asking_name"
    STEP_ASKING_EMAIL = "step_asking_email"
    STEP_ASKING_BUDGET = "step_asking_budget"
    STEP_ASKING_PROJECT_DETAILS = "step_asking_project_details"
    STEP_ASKING_PROJECT_CONFIRMATION = "step_asking_project_confirmation"


_EN: dict[MessageKey, str] = {
    MessageKey.CHOOSE_LANGUAGE: (
        "Please choose your language: English, Français, Polski, Español."
    ),
    MessageKey.GREETING: "Hello! How can I help you today?",
    MessageKey.RESET: "The conversation has been reset.",
    MessageKey.STATUS: "Current step: {step}.",
    MessageKey.PRICING_INFO: (
        "Our websites start at $1000, depending on features and complexity."
    ),
    MessageKey.PRICING_PITCH: (
        "Our websites start at $1000, depending on features and complexity. "
        "Would you like to start a project inquiry? (yes/no)"
    ),
    MessageKey.CONTACT_INFO: (
        "You can reach us at contact@webstudio.dev or by phone at +1 555 0100."
    ),
    MessageKey.HELP_TEXT: (
        "I can help you with: starting a website project, pricing, contact info "
        "and our services. Type 'status' to see where we are or 'reset' to start over."
    ),
    MessageKey.SERVICES_LIST: (
        "We offer: Web Development, E-commerce, Mobile Apps, UI/UX Design, "
        "SEO & Marketing and Hosting."
    ),
    MessageKey.NOT_UNDERSTOOD: (
        "I didn't quite catch that. You can ask about our services, pricing, "
        "or say 'website' to start a project."
    ),
    MessageKey.WEBSITE_START: (
        "Great, we'd love to help with your website! First, what is your name?"
    ),
    MessageKey.ASK_EMAIL: "Nice to meet you, {name}! What is your email address?",
    MessageKey.ASK_BUDGET: "Thanks! What is your budget for this project?",
    MessageKey.ASK_PROJECT_DETAILS: (
        "Got it. Please describe your project requirements "
        "(type of site, features, technologies...)."
    ),
    MessageKey.INVALID_NAME: (
        "Please enter a valid name (letters only, at least 2 characters)."
    ),
    MessageKey.INVALID_EMAIL: (
        "That doesn't look like a valid email address. Please try again."
    ),
    MessageKey.INVALID_BUDGET: "Please enter your budget as a number (for example: 5000).",
    MessageKey.PROJECT_SUMMARY: (
        "Thank you, {name}! Here is your project summary:\n"
        "- Email: {email}\n"
        "- Budget: {budget}\n"
        "- Topics: {topics}\n"
        "{marker}. Our team will get back to you shortly."
    ),
    MessageKey.ACKNOWLEDGE: "No problem! Let me know if there is anything else I can do.",
    MessageKey.REPORT_LINK: "Download your project report: {url}",
    MessageKey.REMIND_LANGUAGE: "Now, please choose your language.",
    MessageKey.REMIND_NAME: "Now, could you tell me your name?",
    MessageKey.REMIND_EMAIL: "Now, could you give me your email address?",
    MessageKey.REMIND_BUDGET: "Now, what is your budget for this project?",
    MessageKey.REMIND_PROJECT_DETAILS: "Now, please describe your project requirements.",
    MessageKey.REMIND_PROJECT_CONFIRMATION: (
        "Would you like to start a project inquiry? (yes/no)"
    ),
    MessageKey.STEP_ASKING_LANGUAGE: "choosing a language",
    MessageKey.STEP_IDLE: "waiting for your request",
    MessageKey.STEP_ASKING_NAME: "asking for your name",
    MessageKey.STEP_ASKING_EMAIL: "asking for your email address",
    MessageKey.STEP_ASKING_BUDGET: "asking for your budget",
    MessageKey.STEP_ASKING_PROJECT_DETAILS: "asking for your project details",
    MessageKey.STEP_ASKING_PROJECT_CONFIRMATION: "waiting for your confirmation",
}

_FR: dict[MessageKey, str] = {
    MessageKey.CHOOSE_LANGUAGE: "Choisissez votre langue : English, Français, Polski, Español.",
    MessageKey.GREETING: "Bonjour ! Comment puis-je vous aider aujourd'hui ?",
    MessageKey.RESET: "La conversation a été réinitialisée.",
    MessageKey.STATUS: "Étape actuelle : {step}.",
    MessageKey.PRICING_INFO: (
        "Nos sites web commencent à 1000 $, selon les fonctionnalités et la complexité."
    ),
    MessageKey.PRICING_PITCH: (
        "Nos sites web commencent à 1000 $, selon les fonctionnalités et la complexité. "
        "Voulez-vous démarrer une demande de projet ? (oui/non)"
    ),
    MessageKey.CONTACT_INFO: (
        "Vous pouvez nous joindre à contact@webstudio.dev ou au +1 555 0100."
    ),
    MessageKey.HELP_TEXT: (
        "Je peux vous aider pour : démarrer un projet de site web, les prix, nos "
        "coordonnées et nos services. Tapez 'status' pour voir l'étape ou 'reset' "
        "pour recommencer."
    ),
    MessageKey.SERVICES_LIST: (
        "Nous proposons : Développement Web, E-commerce, Applications Mobiles, "
        "Design UI/UX, SEO & Marketing et Hébergement."
    ),
    MessageKey.NOT_UNDERSTOOD: (
        "Je n'ai pas bien compris. Vous pouvez poser une question sur nos services, "
        "nos prix, ou écrire 'site web' pour démarrer un projet."
    ),
    MessageKey.WEBSITE_START: (
        "Avec plaisir, nous allons vous aider pour votre site ! D'abord, quel est votre nom ?"
    ),
    MessageKey.ASK_EMAIL: "Enchanté, {name} ! Quelle est votre adresse e-mail ?",
    MessageKey.ASK_BUDGET: "Merci ! Quel est votre budget pour ce projet ?",
    MessageKey.ASK_PROJECT_DETAILS: (
        "Parfait. Décrivez les besoins de votre projet "
        "(type de site, fonctionnalités, technologies...)."
    ),
    MessageKey.INVALID_NAME: (
        "Merci d'indiquer un nom valide (lettres uniquement, au moins 2 caractères)."
    ),
    MessageKey.INVALID_EMAIL: "Cette adresse e-mail ne semble pas valide. Réessayez.",
    MessageKey.INVALID_BUDGET: "Indiquez votre budget sous forme de nombre (par exemple : 5000).",
    MessageKey.PROJECT_SUMMARY: (
        "Merci, {name} ! Voici le résumé de votre projet :\n"
        "- E-mail : {email}\n"
        "- Budget : {budget}\n"
        "- Sujets : {topics}\n"
        "{marker}. Notre équipe vous recontactera rapidement."
    ),
    MessageKey.ACKNOWLEDGE: "Pas de souci ! Dites-moi si je peux faire autre chose.",
    MessageKey.REPORT_LINK: "Téléchargez le rapport de votre projet : {url}",
    MessageKey.REMIND_LANGUAGE: "Maintenant, choisissez votre langue.",
    MessageKey.REMIND_NAME: "Maintenant, pouvez-vous me donner votre nom ?",
    MessageKey.REMIND_EMAIL: "Maintenant, pouvez-vous me donner votre adresse e-mail ?",
    MessageKey.REMIND_BUDGET: "Maintenant, quel est votre budget pour ce projet ?",
    MessageKey.REMIND_PROJECT_DETAILS: "Maintenant, décrivez les besoins de votre projet.",
    MessageKey.REMIND_PROJECT_CONFIRMATION: (
        "Voulez-vous démarrer une demande de projet ? (oui/non)"
    ),
    MessageKey.STEP_ASKING_LANGUAGE: "choix de la langue",
    MessageKey.STEP_IDLE: "en attente de votre demande",
    MessageKey.STEP_ASKING_NAME: "demande de votre nom",
    MessageKey.STEP_ASKING_EMAIL: "demande de votre adresse e-mail",
    MessageKey.STEP_ASKING_BUDGET: "demande de votre budget",
    MessageKey.STEP_ASKING_PROJECT_DETAILS: "demande des détails du projet",
    MessageKey.STEP_ASKING_PROJECT_CONFIRMATION: "en attente de votre confirmation",
}

_PL: dict[MessageKey, str] = {
    MessageKey.CHOOSE_LANGUAGE: "Wybierz język: English, Français, Polski, Español.",
    MessageKey.GREETING: "Cześć! W czym mogę dziś pomóc?",
    MessageKey.RESET: "Rozmowa została zresetowana.",
    MessageKey.STATUS: "Obecny etap: {step}.",
    MessageKey.PRICING_INFO: (
        "Nasze strony zaczynają się od 1000 $, w zależności od funkcji i złożoności."
    ),
    MessageKey.PRICING_PITCH: (
        "Nasze strony zaczynają się od 1000 $, w zależności od funkcji i złożoności. "
        "Czy chcesz rozpocząć zapytanie o projekt? (tak/nie)"
    ),
    MessageKey.CONTACT_INFO: (
        "Możesz się z nami skontaktować pod adresem contact@webstudio.dev "
        "lub telefonicznie: +1 555 0100."
    ),
    MessageKey.HELP_TEXT: (
        "Mogę pomóc w: rozpoczęciu projektu strony, cenach, danych kontaktowych "
        "i naszych usługach. Wpisz 'status', aby zobaczyć etap, lub 'reset', "
        "aby zacząć od nowa."
    ),
    MessageKey.SERVICES_LIST: (
        "Oferujemy: tworzenie stron WWW, e-commerce, aplikacje mobilne, projektowanie "
        "UI/UX, SEO i marketing oraz hosting."
    ),
    MessageKey.NOT_UNDERSTOOD: (
        "Nie do końca rozumiem. Możesz zapytać o usługi, ceny albo napisać "
        "'strona', aby rozpocząć projekt."
    ),
    MessageKey.WEBSITE_START: (
        "Chętnie pomożemy przy Twojej stronie! Na początek: jak masz na imię?"
    ),
    MessageKey.ASK_EMAIL: "Miło Cię poznać, {name}! Jaki jest Twój adres e-mail?",
    MessageKey.ASK_BUDGET: "Dziękuję! Jaki jest Twój budżet na ten projekt?",
    MessageKey.ASK_PROJECT_DETAILS: (
        "Świetnie. Opisz wymagania projektu (rodzaj strony, funkcje, technologie...)."
    ),
    MessageKey.INVALID_NAME: (
        "Podaj poprawne imię (tylko litery, co najmniej 2 znaki)."
    ),
    MessageKey.INVALID_EMAIL: "To nie wygląda na poprawny adres e-mail. Spróbuj ponownie.",
    MessageKey.INVALID_BUDGET: "Podaj budżet jako liczbę (na przykład: 5000).",
    MessageKey.PROJECT_SUMMARY: (
        "Dziękuję, {name}! Oto podsumowanie projektu:\n"
        "- E-mail: {email}\n"
        "- Budżet: {budget}\n"
        "- Tematy: {topics}\n"
        "{marker}. Nasz zespół wkrótce się odezwie."
    ),
    MessageKey.ACKNOWLEDGE: "Nie ma problemu! Daj znać, jeśli mogę w czymś pomóc.",
    MessageKey.REPORT_LINK: "Pobierz raport projektu: {url}",
    MessageKey.REMIND_LANGUAGE: "A teraz wybierz język.",
    MessageKey.REMIND_NAME: "A teraz, jak masz na imię?",
    MessageKey.REMIND_EMAIL: "A teraz podaj swój adres e-mail.",
    MessageKey.REMIND_BUDGET: "A teraz, jaki jest Twój budżet na ten projekt?",
    MessageKey.REMIND_PROJECT_DETAILS: "A teraz opisz wymagania projektu.",
    MessageKey.REMIND_PROJECT_CONFIRMATION: (
        "Czy chcesz rozpocząć zapytanie o projekt? (tak/nie)"
    ),
    MessageKey.STEP_ASKING_LANGUAGE: "wybór języka",
    MessageKey.STEP_IDLE: "oczekiwanie na Twoją prośbę",
    MessageKey.STEP_ASKING_NAME: "pytanie o imię",
    MessageKey.STEP_ASKING_EMAIL: "pytanie o adres e-mail",
    MessageKey.STEP_ASKING_BUDGET: "pytanie o budżet",
    MessageKey.STEP_ASKING_PROJECT_DETAILS: "pytanie o szczegóły projektu",
    MessageKey.STEP_ASKING_PROJECT_CONFIRMATION: "oczekiwanie na potwierdzenie",
}

_ES: dict[MessageKey, str] = {
    MessageKey.CHOOSE_LANGUAGE: "Elige tu idioma: English, Français, Polski, Español.",
    MessageKey.GREETING: "¡Hola! ¿En qué puedo ayudarte hoy?",
    MessageKey.RESET: "La conversación se ha reiniciado.",
    MessageKey.STATUS: "Paso actual: {step}.",
    MessageKey.PRICING_INFO: (
        "Nuestros sitios web empiezan desde $1000, según las funciones y la complejidad."
    ),
    MessageKey.PRICING_PITCH: (
        "Nuestros sitios web empiezan desde $1000, según las funciones y la complejidad. "
        "¿Quieres iniciar una solicitud de proyecto? (sí/no)"
    ),
    MessageKey.CONTACT_INFO: (
        "Puedes escribirnos a contact@webstudio.dev o llamarnos al +1 555 0100."
    ),
    MessageKey.HELP_TEXT: (
        "Puedo ayudarte con: iniciar un proyecto web, precios, datos de contacto "
        "y nuestros servicios. Escribe 'status' para ver el paso actual o 'reset' "
        "para empezar de nuevo."
    ),
    MessageKey.SERVICES_LIST: (
        "Ofrecemos: Desarrollo Web, E-commerce, Apps Móviles, Diseño UI/UX, "
        "SEO y Marketing y Hosting."
    ),
    MessageKey.NOT_UNDERSTOOD: (
        "No te he entendido bien. Puedes preguntar por nuestros servicios, precios "
        "o escribir 'sitio web' para empezar un proyecto."
    ),
    MessageKey.WEBSITE_START: (
        "¡Con gusto te ayudamos con tu sitio web! Primero, ¿cuál es tu nombre?"
    ),
    MessageKey.ASK_EMAIL: "¡Encantado, {name}! ¿Cuál es tu correo electrónico?",
    MessageKey.ASK_BUDGET: "¡Gracias! ¿Cuál es tu presupuesto para este proyecto?",
    MessageKey.ASK_PROJECT_DETAILS: (
        "Perfecto. Describe los requisitos de tu proyecto "
        "(tipo de sitio, funciones, tecnologías...)."
    ),
    MessageKey.INVALID_NAME: (
        "Introduce un nombre válido (solo letras, al menos 2 caracteres)."
    ),
    MessageKey.INVALID_EMAIL: "Ese correo no parece válido. Inténtalo de nuevo.",
    MessageKey.INVALID_BUDGET: "Indica tu presupuesto como un número (por ejemplo: 5000).",
    MessageKey.PROJECT_SUMMARY: (
        "¡Gracias, {name}! Este es el resumen de tu proyecto:\n"
        "- Correo: {email}\n"
        "- Presupuesto: {budget}\n"
        "- Temas: {topics}\n"
        "{marker}. Nuestro equipo te contactará pronto."
    ),
    MessageKey.ACKNOWLEDGE: "¡Sin problema! Dime si puedo ayudarte en algo más.",
    MessageKey.REPORT_LINK: "Descarga el informe de tu proyecto: {url}",
    MessageKey.REMIND_LANGUAGE: "Ahora, elige tu idioma.",
    MessageKey.REMIND_NAME: "Ahora, ¿cuál es tu nombre?",
    MessageKey.REMIND_EMAIL: "Ahora, ¿cuál es tu correo electrónico?",
    MessageKey.REMIND_BUDGET: "Ahora, ¿cuál es tu presupuesto para este proyecto?",
    MessageKey.REMIND_PROJECT_DETAILS: "Ahora, describe los requisitos de tu proyecto.",
    MessageKey.REMIND_PROJECT_CONFIRMATION: (
        "¿Quieres iniciar una solicitud de proyecto? (sí/no)"
    ),
    MessageKey.STEP_ASKING_LANGUAGE: "elección de idioma",
    MessageKey.STEP_IDLE: "esperando tu solicitud",
    MessageKey.STEP_ASKING_NAME: "pidiendo tu nombre",
    MessageKey.STEP_ASKING_EMAIL: "pidiendo tu correo electrónico",
    MessageKey.STEP_ASKING_BUDGET: "pidiendo tu presupuesto",
    MessageKey.STEP_ASKING_PROJECT_DETAILS: "pidiendo los detalles del proyecto",
    MessageKey.STEP_ASKING_PROJECT_CONFIRMATION: "esperando tu confirmación",
}

LOCALIZATION: MappingProxyType[str, MappingProxyType[MessageKey, str]] = MappingProxyType({
    "en": MappingProxyType(_EN),
    "fr": MappingProxyType(_FR),
    "pl": MappingProxyType(_PL),
    "es": MappingProxyType(_ES),
})

STEP_KEYS: dict[ConversationState, MessageKey] = {
    ConversationState.ASKING_LANGUAGE: MessageKey.STEP_ASKING_LANGUAGE,
    ConversationState.IDLE: MessageKey.STEP_IDLE,
    ConversationState.ASKING_NAME: MessageKey.STEP_ASKING_NAME,
    ConversationState.ASKING_EMAIL: MessageKey.STEP_ASKING_EMAIL,
    ConversationState.ASKING_BUDGET: MessageKey.STEP_ASKING_BUDGET,
    ConversationState.ASKING_PROJECT_DETAILS: MessageKey.STEP_ASKING_PROJECT_DETAILS,
    ConversationState.ASKING_PROJECT_CONFIRMATION: MessageKey.STEP_ASKING_PROJECT_CONFIRMATION,
}

# Idle não tem lembrete: interrupções só acontecem fora dele
REMINDER_KEYS: dict[ConversationState, MessageKey] = {
    ConversationState.ASKING_LANGUAGE: MessageKey.REMIND_LANGUAGE,
    ConversationState.ASKING_NAME: MessageKey.REMIND_NAME,
    ConversationState.ASKING_EMAIL: MessageKey.REMIND_EMAIL,
    ConversationState.ASKING_BUDGET: MessageKey.REMIND_BUDGET,
    ConversationState.ASKING_PROJECT_DETAILS: MessageKey.REMIND_PROJECT_DETAILS,
    ConversationState.ASKING_PROJECT_CONFIRMATION: MessageKey.REMIND_PROJECT_CONFIRMATION,
}


def translate(language: str | None, key: MessageKey, **params: Any) -> str:
    """Resolve `key` no idioma pedido, caindo para inglês quando ausente."""
    table = LOCALIZATION.get(language or DEFAULT_LANGUAGE) or LOCALIZATION[DEFAULT_LANGUAGE]
    template = table.get(key) or LOCALIZATION[DEFAULT_LANGUAGE][key]
    return template.format(**params) if params else template


def language_prompt() -> str:
    """Pedido de escolha de idioma repetido em todos os idiomas suportados."""
    return "\n".join(translate(code, MessageKey.CHOOSE_LANGUAGE) for code in SUPPORTED_LANGUAGES)


def step_description(language: str | None, state: ConversationState) -> str:
    return translate(language, STEP_KEYS[state])


def reminder(language: str | None, state: ConversationState) -> str:
    key = REMINDER_KEYS.get(state)
    return translate(language, key) if key else ""
