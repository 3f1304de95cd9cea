"""Shared fixtures for the question browser tests."""

from __future__ import annotations

from datetime import datetime, timezone
import json
from typing import Any, Callable, Dict, List, Optional

import pytest

from auth import CredentialResolver
from config import Settings
from models import Question
from scrapers import SageScraper
from storage import MemoryStore


FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
JWT = "eyJhbGciOiJIUzI1NiJ9.payload.sig"


def make_question(
    qid: int,
    *,
    owner: Optional[str] = "alice",
    tags: Optional[List[str]] = None,
    answers: int = 0,
    accepted: Optional[int] = None,
    score: Optional[int] = 1,
    views: Optional[int] = 10,
    topic: Optional[int] = None,
) -> Question:
    payload: Dict[str, Any] = {
        "id": qid,
        "title": f"Question {qid}",
        "owner": {"displayname": owner} if owner is not None else None,
        "creation_date": "2026-10-01T08:30:00Z",
        "score": score,
        "view_count": views,
        "answers": [{"id": f"{qid}-{i}"} for i in range(answers)],
        "accepted_answer_id": accepted,
        "tags": [{"name": name} for name in (tags or [])],
        "topic_id": topic,
    }
    return Question.model_validate(payload)


def page_body(count: int, *, start: int = 0, total_pages: Optional[int] = None) -> bytes:
    payload: Dict[str, Any] = {
        "questions": [{"id": start + i, "title": f"Q{start + i}"} for i in range(count)],
    }
    if total_pages is not None:
        payload["total_pages"] = total_pages
    return json.dumps(payload).encode()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def resolver(settings: Settings, clock) -> CredentialResolver:
    store = MemoryStore({settings.sage.token_storage_key: JWT})
    return CredentialResolver(store=store, fallback_store=MemoryStore(), settings=settings.sage, clock=clock)


@pytest.fixture
def scraper(resolver: CredentialResolver, settings: Settings) -> SageScraper:
    return SageScraper(resolver, settings=settings)


class FakeTransport:
    """Replaces SageScraper._http_get; serves one canned response per page."""

    def __init__(self, responder: Callable[[int], Any]):
        self.responder = responder
        self.calls: List[Dict[str, Any]] = []

    async def __call__(self, url: str, *, params=None, headers=None):
        self.calls.append({"url": url, "params": dict(params or {}), "headers": dict(headers or {})})
        response = self.responder(int(params["page"]))
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def fake_transport(scraper: SageScraper, monkeypatch) -> Callable[[Callable[[int], Any]], FakeTransport]:
    def _install(responder: Callable[[int], Any]) -> FakeTransport:
        transport = FakeTransport(responder)
        monkeypatch.setattr(scraper, "_http_get", transport)
        return transport

    return _install
