"""Fábrica da aplicação FastAPI."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.staticfiles import StaticFiles

from chatbot_backend.ai.responder import create_responder
from chatbot_backend.api.routes import router
from chatbot_backend.application.chat_service import ChatService
from chatbot_backend.application.metrics import MetricsAggregator
from chatbot_backend.application.session_purger import SessionPurger
from chatbot_backend.config.settings import Settings, get_settings
from chatbot_backend.infra.lead_store import create_lead_store
from chatbot_backend.infra.report_generator import HtmlReportGenerator
from chatbot_backend.infra.session_store_memory import InMemorySessionStore
from chatbot_backend.observability.logging import configure_logging, get_logger
from chatbot_backend.observability.middleware import CorrelationIdMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Inicia o purger de sessões e libera recursos no shutdown."""
    settings: Settings = app.state.settings
    purger: SessionPurger | None = None
    if settings.session_purge_enabled:
        purger = SessionPurger(
            app.state.session_store, settings.session_purge_interval_seconds
        )
        purger.start()
    app.state.session_purger = purger

    try:
        yield
    finally:
        if purger is not None:
            await purger.stop()
        if app.state.responder is not None:
            await app.state.responder.aclose()
        logger.info("app_shutdown")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Cria a aplicação FastAPI."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.service_name)

    validation_errors: list[str] = []
    validation_errors.extend(settings.validate_session_config())
    validation_errors.extend(settings.validate_responder_config())
    validation_errors.extend(settings.validate_lead_store_config())
    validation_errors.extend(settings.validate_admin_config())

    if validation_errors:
        error_msg = "; ".join(validation_errors)
        raise ValueError(f"Configuração inválida: {error_msg}")

    app = FastAPI(title=settings.service_name, version=settings.version, lifespan=lifespan)
    app.add_middleware(CorrelationIdMiddleware, logger=logger)
    app.include_router(router)

    app.state.settings = settings
    app.state.session_store = InMemorySessionStore(ttl_seconds=settings.session_ttl_seconds)
    app.state.metrics = MetricsAggregator()
    app.state.responder = create_responder(settings)
    app.state.lead_store = create_lead_store(settings)

    report_generator: HtmlReportGenerator | None = None
    if settings.reports_enabled:
        report_generator = HtmlReportGenerator(
            settings.reports_dir, settings.reports_url_prefix
        )
        # Diretório criado sob demanda pelo gerador
        app.mount(
            settings.reports_url_prefix,
            StaticFiles(directory=settings.reports_dir, check_dir=False),
            name="reports",
        )
    app.state.report_generator = report_generator

    app.state.chat_service = ChatService(
        store=app.state.session_store,
        metrics=app.state.metrics,
        responder=app.state.responder,
        lead_store=app.state.lead_store,
        report_generator=report_generator,
        history_limit=settings.responder_history_limit,
    )

    return app


app = create_app()
