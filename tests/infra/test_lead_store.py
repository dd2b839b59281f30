"""Testes dos stores de leads (memória e JSON Lines)."""

from __future__ import annotations

import pytest

from chatbot_backend.config.settings import Settings
from chatbot_backend.domain.models import Lead, SessionData
from chatbot_backend.domain.protocols.lead_store import LeadStoreError
from chatbot_backend.infra.lead_store import (
    InMemoryLeadStore,
    JsonlLeadStore,
    create_lead_store,
)


def _lead(session_id: str = "sess-1", **fields) -> Lead:
    data = SessionData(name="John", email="john@test.com", budget="5000", **fields)
    return Lead.from_session(session_id, data, report_url=f"/reports/{session_id}.html")


class TestInMemoryLeadStore:
    @pytest.mark.asyncio
    async def test_append_and_list_in_order(self):
        store = InMemoryLeadStore()
        await store.append(_lead("a"))
        await store.append(_lead("b"))

        leads = await store.list_leads()
        assert [lead.session_id for lead in leads] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_list_returns_copies(self):
        store = InMemoryLeadStore()
        await store.append(_lead("a"))
        (await store.list_leads())[0].detected_keywords.append("x")
        assert (await store.list_leads())[0].detected_keywords == []


class TestJsonlLeadStore:
    @pytest.mark.asyncio
    async def test_missing_file_lists_empty(self, tmp_path):
        store = JsonlLeadStore(tmp_path / "none.jsonl")
        assert await store.list_leads() == []

    @pytest.mark.asyncio
    async def test_appends_one_line_per_lead(self, tmp_path):
        path = tmp_path / "nested" / "leads.jsonl"
        store = JsonlLeadStore(path)
        await store.append(_lead("a", detected_keywords=["blog"]))
        await store.append(_lead("b"))

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2

        leads = await store.list_leads()
        assert [lead.session_id for lead in leads] == ["a", "b"]
        assert leads[0].detected_keywords == ["blog"]
        assert leads[0].report_url == "/reports/a.html"

    @pytest.mark.asyncio
    async def test_never_rewrites_previous_lines(self, tmp_path):
        path = tmp_path / "leads.jsonl"
        store = JsonlLeadStore(path)
        await store.append(_lead("a"))
        first = path.read_text(encoding="utf-8")
        await store.append(_lead("b"))
        assert path.read_text(encoding="utf-8").startswith(first)

    @pytest.mark.asyncio
    async def test_corrupt_lines_are_skipped(self, tmp_path):
        path = tmp_path / "leads.jsonl"
        store = JsonlLeadStore(path)
        await store.append(_lead("a"))
        with path.open("a", encoding="utf-8") as fh:
            fh.write("{not json\n\n")
        await store.append(_lead("b"))

        leads = await store.list_leads()
        assert [lead.session_id for lead in leads] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_write_failure_raises_lead_store_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not dir", encoding="utf-8")
        store = JsonlLeadStore(blocker / "leads.jsonl")

        with pytest.raises(LeadStoreError):
            await store.append(_lead("a"))


class TestFactory:
    def test_memory_backend(self):
        store = create_lead_store(Settings(lead_store_backend="memory"))
        assert isinstance(store, InMemoryLeadStore)

    def test_jsonl_backend(self, tmp_path):
        settings = Settings(lead_store_backend="jsonl", leads_file=str(tmp_path / "l.jsonl"))
        store = create_lead_store(settings)
        assert isinstance(store, JsonlLeadStore)
        assert store.path == tmp_path / "l.jsonl"

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_lead_store(Settings(lead_store_backend="sqlite"))
