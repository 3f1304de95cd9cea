"""Drives fetch runs and user input through the reducer into a render sink."""

from __future__ import annotations

from typing import Callable, Optional
import logging

from scrapers import SageScraper
from utils.exceptions import FetchError

from .view_state import (
    FacetChanged,
    FiltersToggled,
    LoadFailed,
    LoadProgressed,
    LoadRequested,
    LoadSucceeded,
    ViewEvent,
    ViewState,
    reduce,
)


logger = logging.getLogger(__name__)

RenderSink = Callable[[ViewState], None]


class ViewController:
    """Single owner of the view state; every transition is followed by a full render."""

    def __init__(
        self,
        scraper: SageScraper,
        render: RenderSink,
        initial_state: Optional[ViewState] = None,
    ) -> None:
        self.scraper = scraper
        self._render = render
        self._state = initial_state or ViewState()

    @property
    def state(self) -> ViewState:
        return self._state

    def dispatch(self, event: ViewEvent) -> ViewState:
        self._state = reduce(self._state, event)
        self._render(self._state)
        return self._state

    def refresh(self) -> None:
        self._render(self._state)

    async def load(self, tag_id: str, unlimited: bool = False) -> ViewState:
        """Run one fetch run for ``tag_id`` and commit its outcome.

        Fetch errors end in the ``error`` state rather than propagating. If another
        load started meanwhile, this run's outcome is discarded by the reducer.
        """
        tag_id = str(tag_id or "").strip()
        if not tag_id:
            raise ValueError("Please enter a tag ID")

        generation = self.dispatch(LoadRequested(tag_id=tag_id, unlimited=unlimited)).generation

        def _progress(message: str) -> None:
            self.dispatch(LoadProgressed(generation=generation, message=message))

        try:
            result = await self.scraper.fetch_all(tag_id, unlimited=unlimited, on_progress=_progress)
        except FetchError as e:
            logger.error(f"[Sage] Load for tag {tag_id} failed: {e}")
            return self.dispatch(LoadFailed(generation=generation, message=str(e)))

        if generation != self._state.generation:
            logger.info(f"[Sage] Discarding stale run {generation} (current {self._state.generation})")
        return self.dispatch(LoadSucceeded(generation=generation, result=result))

    def change_facet(self, facet: str, value: Optional[str]) -> ViewState:
        return self.dispatch(FacetChanged(facet=facet, value=value))

    def toggle_filters(self) -> ViewState:
        return self.dispatch(FiltersToggled())
