"""SessionStore em memória com expiração por inatividade (TTL).

Concorrência:
- Um único asyncio.Lock cobre todo o espaço de chaves (sem sharding)
- Mutações (create, ensure em miss, append, set_*, remove, purge) tomam o lock
- Leituras não tomam o lock: não têm ponto de suspensão, logo no event loop
  nunca observam uma mutação pela metade e podem intercalar entre si

Não há serialização por sessão: dois requests da mesma sessão podem
intercalar leitura e escrita (last-write-wins em state/data).
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

from chatbot_backend.domain.enums import ENTRY_STATE, ConversationState, MessageRole
from chatbot_backend.domain.models import Message, SessionData
from chatbot_backend.domain.protocols.session_store import SessionStoreProtocol
from chatbot_backend.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

DEFAULT_STATE_ON_MISS = ConversationState.IDLE


@dataclass(slots=True)
class Session:
    """Registro interno de sessão; nunca sai do store por referência."""

    session_id: str
    last_active: float
    state: ConversationState = ENTRY_STATE
    data: SessionData = field(default_factory=SessionData)
    messages: list[Message] = field(default_factory=list)


class InMemorySessionStore(SessionStoreProtocol):
    """Armazenamento em memória de sessões de conversa."""

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock or time.monotonic
        self._sessions: dict[str, Session] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def __repr__(self) -> str:
        return f"InMemorySessionStore(ttl_seconds={self._ttl}, sessions={len(self._sessions)})"

    def session_ids(self) -> list[str]:
        """Snapshot dos ids vivos (para observabilidade e testes)."""
        return list(self._sessions)

    def _new_session(self, session_id: str) -> Session:
        return Session(session_id=session_id, last_active=self._clock())

    async def create(self) -> str:
        async with self._lock:
            session_id = str(uuid.uuid4())
            while session_id in self._sessions:
                session_id = str(uuid.uuid4())
            self._sessions[session_id] = self._new_session(session_id)

        logger.info("session_created", extra={"session_id": session_id[:8] + "..."})
        return session_id

    async def ensure(self, session_id: str) -> str:
        if session_id in self._sessions:
            return session_id

        async with self._lock:
            # Outro request pode ter criado a sessão enquanto esperávamos o lock
            if session_id not in self._sessions:
                self._sessions[session_id] = self._new_session(session_id)
                logger.info(
                    "session_created",
                    extra={"session_id": session_id[:8] + "...", "external_id": True},
                )
        return session_id

    async def append_message(self, session_id: str, role: MessageRole, content: str) -> int:
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = self._new_session(session_id)
                self._sessions[session_id] = session
            session.messages.append(Message(role=role, content=content))
            session.last_active = self._clock()
            return len(session.messages)

    async def get_state(self, session_id: str) -> ConversationState:
        session = self._sessions.get(session_id)
        return session.state if session else DEFAULT_STATE_ON_MISS

    async def set_state(self, session_id: str, state: ConversationState) -> None:
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                logger.debug(
                    "set_state_discarded", extra={"session_id": session_id[:8] + "..."}
                )
                return
            session.state = state
            session.last_active = self._clock()

    async def get_data(self, session_id: str) -> SessionData:
        session = self._sessions.get(session_id)
        return session.data.model_copy(deep=True) if session else SessionData()

    async def set_data(self, session_id: str, data: SessionData) -> None:
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                logger.debug(
                    "set_data_discarded", extra={"session_id": session_id[:8] + "..."}
                )
                return
            session.data = data.model_copy(deep=True)
            session.last_active = self._clock()

    async def get_history(self, session_id: str) -> list[Message] | None:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        # Mensagens são imutáveis; basta copiar a lista
        return list(session.messages)

    async def remove(self, session_id: str) -> bool:
        async with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("session_removed", extra={"session_id": session_id[:8] + "..."})
        return removed

    async def purge_expired(self, now: float | None = None) -> int:
        async with self._lock:
            reference = self._clock() if now is None else now
            expired = [
                sid
                for sid, session in self._sessions.items()
                if reference - session.last_active >= self._ttl
            ]
            for sid in expired:
                del self._sessions[sid]

        if expired:
            logger.debug(
                "expired_sessions_removed",
                extra={"removed": len(expired), "remaining": len(self._sessions)},
            )
        return len(expired)
