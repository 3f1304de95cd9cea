"""Immutable view state for the question browser and the reducer that drives it."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Mapping, Optional, Tuple, Union

from aggregator import QuestionStatistics, apply_filters, available_facets, compute_statistics, update_filter_spec
from models import FetchResult, Question


class ViewStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class ViewState:
    status: ViewStatus = ViewStatus.IDLE
    tag_id: Optional[str] = None
    unlimited: bool = False
    questions: Tuple[Question, ...] = ()
    filtered: Tuple[Question, ...] = ()
    filters: Mapping[str, str] = field(default_factory=dict)
    # Facet domains, derived once per successful load.
    facets: Mapping[str, List[str]] = field(default_factory=dict)
    stats: Optional[QuestionStatistics] = None
    pages_loaded: int = 0
    progress: str = ""
    error: Optional[str] = None
    filters_open: bool = True
    # Bumped on every LoadRequested; completions from older runs are dropped.
    generation: int = 0

    @property
    def loading(self) -> bool:
        return self.status == ViewStatus.LOADING

    @property
    def active_filter_count(self) -> int:
        return len(self.filters)


# --- events ---------------------------------------------------------------


@dataclass(frozen=True)
class LoadRequested:
    tag_id: str
    unlimited: bool = False


@dataclass(frozen=True)
class LoadProgressed:
    generation: int
    message: str


@dataclass(frozen=True)
class LoadSucceeded:
    generation: int
    result: FetchResult


@dataclass(frozen=True)
class LoadFailed:
    generation: int
    message: str


@dataclass(frozen=True)
class FacetChanged:
    facet: str
    value: Optional[str]


@dataclass(frozen=True)
class FiltersToggled:
    pass


ViewEvent = Union[LoadRequested, LoadProgressed, LoadSucceeded, LoadFailed, FacetChanged, FiltersToggled]


def reduce(state: ViewState, event: ViewEvent) -> ViewState:
    """Return the state that follows ``state`` after ``event``; never mutates."""
    if isinstance(event, LoadRequested):
        return replace(
            state,
            status=ViewStatus.LOADING,
            tag_id=event.tag_id,
            unlimited=event.unlimited,
            questions=(),
            filtered=(),
            filters={},
            facets={},
            stats=None,
            pages_loaded=0,
            progress="Starting...",
            error=None,
            generation=state.generation + 1,
        )

    if isinstance(event, (LoadProgressed, LoadSucceeded, LoadFailed)):
        if event.generation != state.generation or state.status != ViewStatus.LOADING:
            return state

    if isinstance(event, LoadProgressed):
        return replace(state, progress=event.message)

    if isinstance(event, LoadSucceeded):
        questions = tuple(event.result.questions)
        return replace(
            state,
            status=ViewStatus.READY,
            questions=questions,
            filtered=questions,
            filters={},
            facets=available_facets(questions),
            stats=compute_statistics(questions),
            pages_loaded=event.result.pages_loaded,
            progress="",
            error=None,
        )

    if isinstance(event, LoadFailed):
        return replace(
            state,
            status=ViewStatus.ERROR,
            questions=(),
            filtered=(),
            facets={},
            stats=None,
            pages_loaded=0,
            progress="",
            error=event.message,
        )

    if isinstance(event, FacetChanged):
        if state.status != ViewStatus.READY:
            return state
        filters = update_filter_spec(state.filters, event.facet, event.value)
        return replace(state, filters=filters, filtered=apply_filters(state.questions, filters))

    if isinstance(event, FiltersToggled):
        return replace(state, filters_open=not state.filters_open)

    raise TypeError(f"unsupported view event: {event!r}")
