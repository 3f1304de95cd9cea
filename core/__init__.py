"""View state, reducer and controller for the question browser."""

from .view_state import (
    FacetChanged,
    FiltersToggled,
    LoadFailed,
    LoadProgressed,
    LoadRequested,
    LoadSucceeded,
    ViewEvent,
    ViewState,
    ViewStatus,
    reduce,
)
from .controller import RenderSink, ViewController

__all__ = [
    "FacetChanged",
    "FiltersToggled",
    "LoadFailed",
    "LoadProgressed",
    "LoadRequested",
    "LoadSucceeded",
    "ViewEvent",
    "ViewState",
    "ViewStatus",
    "reduce",
    "RenderSink",
    "ViewController",
]
