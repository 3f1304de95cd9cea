"""CLI entrypoint for the Sage question browser."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from rich.prompt import Confirm

from auth import CredentialResolver, credential_trace_config
from config import get_settings
from core import ViewController, ViewState, ViewStatus
from outputs import ConsoleRenderer, render_statistics
from scrapers import SageScraper
from storage import JsonFileStore
from utils import FilterError, setup_logger


logger = logging.getLogger(__name__)


def _parse_filter(text: str) -> Tuple[str, str]:
    facet, sep, value = str(text or "").partition("=")
    if not sep or not facet.strip():
        raise argparse.ArgumentTypeError(f"expected facet=value, got {text!r}")
    return facet.strip(), value.strip()


def _parse_header(text: str) -> Tuple[str, str]:
    name, sep, value = str(text or "").partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected 'Name: value', got {text!r}")
    return name.strip(), value.strip()


def _cookie_source(cookie: Optional[str], cookie_file: Optional[str]):
    if cookie_file:
        path = Path(cookie_file)
        return lambda: path.read_text(encoding="utf-8").strip() if path.exists() else None
    if cookie:
        return lambda: cookie
    return None


def build_resolver(cookie: Optional[str] = None, cookie_file: Optional[str] = None) -> CredentialResolver:
    settings = get_settings()
    return CredentialResolver(
        store=JsonFileStore(settings.credentials.store_path),
        fallback_store=JsonFileStore(settings.credentials.fallback_store_path),
        cookie_source=_cookie_source(cookie, cookie_file),
        settings=settings.sage,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sage question browser CLI")
    parser.add_argument("--cookie", default=None, help="raw Cookie header of a sage.amazon.dev session")
    parser.add_argument("--cookie-file", default=None, help="file holding the raw Cookie header")
    sub = parser.add_subparsers(dest="command", required=True)

    load = sub.add_parser("load", help="load questions for a tag")
    load.add_argument("--tag", default=None, help="tag ID (defaults to SAGE_DEFAULT_TAG_ID)")
    load.add_argument("--all", dest="load_all", action="store_true", help="ignore the page limit")
    load.add_argument("--yes", action="store_true", help="skip the --all confirmation")
    load.add_argument("--filter", dest="filters", action="append", type=_parse_filter, default=[], metavar="FACET=VALUE")
    load.add_argument("--stats", action="store_true", help="print statistics after loading")
    load.add_argument("--collapse-filters", action="store_true")

    token = sub.add_parser("token", help="inspect or update the stored token")
    token_sub = token.add_subparsers(dest="token_command", required=True)
    token_sub.add_parser("status")
    token_set = token_sub.add_parser("set")
    token_set.add_argument("value")
    observe = token_sub.add_parser("observe", help="feed an outbound request through the capture port")
    observe.add_argument("--url", required=True)
    observe.add_argument("--header", dest="headers", action="append", type=_parse_header, default=[])
    watch = token_sub.add_parser("watch", help="rescan the cookie periodically")
    watch.add_argument("--interval", type=float, default=None)

    return parser


def token_status_line(resolver: CredentialResolver) -> str:
    if resolver.resolve() is None:
        return "Token: ✗ Missing - Visit sage.amazon.dev"
    hours = resolver.age_hours()
    return f"Token: ✓ Active ({hours}h old)" if hours else "Token: ✓ Active"


async def run_load(
    resolver: CredentialResolver,
    renderer: ConsoleRenderer,
    tag_id: str,
    load_all: bool,
    filters: Sequence[Tuple[str, str]] = (),
    collapse_filters: bool = False,
) -> ViewState:
    def sink(state: ViewState) -> None:
        # Ready states are printed once, after the CLI filters are applied.
        if state.status in (ViewStatus.LOADING, ViewStatus.ERROR):
            renderer(state)

    async with SageScraper(resolver, trace_configs=[credential_trace_config(resolver)]) as scraper:
        controller = ViewController(scraper, render=sink)
        state = await controller.load(tag_id, unlimited=load_all)

    if state.status != ViewStatus.READY:
        return state

    for facet, value in filters:
        state = controller.change_facet(facet, value)
    if collapse_filters:
        state = controller.toggle_filters()
    renderer(state)
    return state


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    # root logger, so every module logger goes through the rich handler
    setup_logger(level=settings.general.log_level)
    resolver = build_resolver(args.cookie, args.cookie_file)
    renderer = ConsoleRenderer(settings=settings.sage)

    if args.command == "token":
        if args.token_command == "set":
            resolver.persist(args.value)
        elif args.token_command == "observe":
            captured = resolver.observe(args.url, dict(args.headers))
            renderer.console.print("Captured new token" if captured else "No new token")
        elif args.token_command == "watch":
            try:
                asyncio.run(resolver.watch_cookie(interval=args.interval))
            except KeyboardInterrupt:
                pass
        renderer.console.print(token_status_line(resolver))
        return 0

    tag_id = args.tag or settings.sage.default_tag_id
    if args.load_all and not args.yes:
        confirmed = Confirm.ask(
            "You are about to load ALL pages until no results are returned.\n"
            "This may take a long time and load hundreds or thousands of questions.\n"
            "Continue?",
            console=renderer.console,
        )
        if not confirmed:
            return 1

    try:
        state = asyncio.run(
            run_load(resolver, renderer, tag_id, args.load_all, args.filters, args.collapse_filters)
        )
    except FilterError as e:
        logger.error(str(e))
        return 2

    if state.status == ViewStatus.ERROR:
        return 1
    if args.stats:
        renderer.console.print(render_statistics(state.stats))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
