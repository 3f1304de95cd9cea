"""Tests for ViewController run orchestration."""

from __future__ import annotations

import asyncio
from typing import List, Optional

import pytest

from conftest import make_question
from core import ViewController, ViewState, ViewStatus
from models import FetchResult
from utils.exceptions import AuthExpiredError


class _StubScraper:
    """fetch_all stand-in; each call waits on its own gate when one is given."""

    def __init__(self, results, gates: Optional[List[asyncio.Event]] = None):
        self.results = list(results)
        self.gates = list(gates or [])
        self.calls = []

    async def fetch_all(self, tag_id, unlimited=False, on_progress=None):
        index = len(self.calls)
        self.calls.append((tag_id, unlimited))
        if on_progress is not None:
            on_progress("Loading page 1/10...")
        if index < len(self.gates):
            await self.gates[index].wait()
        outcome = self.results[index]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def _collect():
    rendered: List[ViewState] = []
    return rendered, rendered.append


@pytest.mark.asyncio
async def test_load_renders_every_transition() -> None:
    rendered, sink = _collect()
    scraper = _StubScraper([FetchResult(questions=(make_question(1), make_question(2)), pages_loaded=1)])
    controller = ViewController(scraper, render=sink)

    state = await controller.load(" 9391 ", unlimited=True)

    assert scraper.calls == [("9391", True)]
    assert [s.status for s in rendered] == [ViewStatus.LOADING, ViewStatus.LOADING, ViewStatus.READY]
    assert rendered[1].progress == "Loading page 1/10..."
    assert state.status == ViewStatus.READY
    assert controller.state is state
    assert len(state.filtered) == 2


@pytest.mark.asyncio
async def test_load_failure_surfaces_message() -> None:
    rendered, sink = _collect()
    controller = ViewController(_StubScraper([AuthExpiredError()]), render=sink)

    state = await controller.load("9391")

    assert state.status == ViewStatus.ERROR
    assert "Token may be expired" in state.error
    assert state.questions == ()
    assert rendered[-1] is state


@pytest.mark.asyncio
async def test_load_requires_tag_id() -> None:
    controller = ViewController(_StubScraper([]), render=lambda state: None)

    with pytest.raises(ValueError):
        await controller.load("   ")


@pytest.mark.asyncio
async def test_stale_run_cannot_clobber_newer_run() -> None:
    gates = [asyncio.Event(), asyncio.Event()]
    old = FetchResult(questions=(make_question(1),), pages_loaded=1)
    new = FetchResult(questions=(make_question(2), make_question(3)), pages_loaded=1)
    controller = ViewController(_StubScraper([old, new], gates=gates), render=lambda state: None)

    first = asyncio.create_task(controller.load("old"))
    await asyncio.sleep(0)
    second = asyncio.create_task(controller.load("new"))
    await asyncio.sleep(0)

    gates[1].set()
    await second
    gates[0].set()
    await first

    state = controller.state
    assert state.status == ViewStatus.READY
    assert state.tag_id == "new"
    assert [q.id for q in state.questions] == ["2", "3"]


@pytest.mark.asyncio
async def test_facet_change_and_toggle_rerender() -> None:
    rendered, sink = _collect()
    result = FetchResult(
        questions=(make_question(1, owner="alice"), make_question(2, owner="bob")),
        pages_loaded=1,
    )
    controller = ViewController(_StubScraper([result]), render=sink)
    await controller.load("9391")
    before = len(rendered)

    state = controller.change_facet("owner", "bob")
    assert [q.id for q in state.filtered] == ["2"]

    state = controller.toggle_filters()
    assert state.filters_open is False

    controller.refresh()
    assert len(rendered) == before + 3
    assert rendered[-1] is rendered[-2]
