"""Re-exports dos Protocolos de domínio para uso por Application."""

from __future__ import annotations

from chatbot_backend.domain.protocols.lead_store import (
    LeadStoreError,
    LeadStoreProtocol,
    ReportGenerator,
)
from chatbot_backend.domain.protocols.responder import FreeFormResponder
from chatbot_backend.domain.protocols.session_store import SessionStoreProtocol

__all__ = [
    "FreeFormResponder",
    "LeadStoreError",
    "LeadStoreProtocol",
    "ReportGenerator",
    "SessionStoreProtocol",
]
