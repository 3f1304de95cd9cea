"""CLI parsing and load flow."""

from __future__ import annotations

import argparse

import pytest
from rich.console import Console

import main as cli
from conftest import page_body
from core import ViewStatus
from outputs import ConsoleRenderer
from scrapers import SageScraper


def test_parse_load_arguments() -> None:
    args = cli.build_parser().parse_args(
        ["load", "--tag", "42", "--all", "--yes", "--filter", "owner=alice", "--filter", "has_answer=No", "--stats"]
    )

    assert args.command == "load"
    assert args.tag == "42"
    assert args.load_all is True
    assert args.filters == [("owner", "alice"), ("has_answer", "No")]
    assert args.stats is True


def test_parse_filter_requires_equals() -> None:
    with pytest.raises(argparse.ArgumentTypeError):
        cli._parse_filter("owner")


def test_parse_header() -> None:
    assert cli._parse_header("Authorization: eyJabc") == ("Authorization", "eyJabc")


def test_token_status_line(resolver) -> None:
    assert cli.token_status_line(resolver).startswith("Token: ✓ Active")


@pytest.mark.asyncio
async def test_run_load_applies_filters(resolver, monkeypatch) -> None:
    async def _fake_get(self, url, *, params=None, headers=None):
        if params["page"] == 1:
            body = (
                b'{"questions": [{"id": 1, "title": "Alpha", "owner": {"displayname": "alice"}},'
                b' {"id": 2, "title": "Beta", "owner": {"displayname": "bob"}}]}'
            )
            return 200, "OK", body
        return 200, "OK", page_body(0)

    monkeypatch.setattr(SageScraper, "_http_get", _fake_get)
    console = Console(record=True, width=160)

    state = await cli.run_load(resolver, ConsoleRenderer(console=console), "9391", False, [("owner", "bob")])

    assert state.status == ViewStatus.READY
    assert [q.id for q in state.filtered] == ["2"]
    text = console.export_text()
    assert "Beta" in text
    assert "Alpha" not in text


@pytest.mark.asyncio
async def test_run_load_reports_auth_failure(resolver, monkeypatch) -> None:
    async def _fake_get(self, url, *, params=None, headers=None):
        return 401, "Unauthorized", b""

    monkeypatch.setattr(SageScraper, "_http_get", _fake_get)
    console = Console(record=True, width=160)

    state = await cli.run_load(resolver, ConsoleRenderer(console=console), "9391", False)

    assert state.status == ViewStatus.ERROR
    assert "Token may be expired" in console.export_text()
