"""
Aggregator Module
语料统计与过滤
"""
from .statistics import QuestionStatistics, compute_statistics, top_entries
from .filters import (
    BOOLEAN_DOMAIN,
    FilterSpec,
    apply_filters,
    available_facets,
    matches,
    update_filter_spec,
)

__all__ = [
    "QuestionStatistics",
    "compute_statistics",
    "top_entries",
    "BOOLEAN_DOMAIN",
    "FilterSpec",
    "apply_filters",
    "available_facets",
    "matches",
    "update_filter_spec",
]
