"""Facet discovery and filtering over a loaded question corpus."""

from __future__ import annotations

from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple
import logging

from models import Facet, Question
from utils.exceptions import FilterError


logger = logging.getLogger(__name__)

YES = "Yes"
NO = "No"
BOOLEAN_DOMAIN: Tuple[str, str] = (YES, NO)

FilterSpec = Dict[str, str]


def _owner_values(question: Question) -> List[str]:
    return [question.owner_name] if question.owner_name else []


def _tag_values(question: Question) -> List[str]:
    return list(question.tag_names)


def _topic_values(question: Question) -> List[str]:
    return [question.topic_id] if question.topic_id else []


# Facets whose value domain comes from the corpus, in display order.
_DISCOVERED_FACETS: Tuple[Tuple[Facet, Callable[[Question], List[str]]], ...] = (
    (Facet.OWNER, _owner_values),
    (Facet.TAG, _tag_values),
    (Facet.TOPIC, _topic_values),
)

# Always present, whatever the corpus holds.
_BOOLEAN_FACETS: Tuple[Facet, ...] = (Facet.HAS_ACCEPTED_ANSWER, Facet.HAS_ANSWERS)


def available_facets(questions: Sequence[Question]) -> Dict[str, List[str]]:
    """Map each filterable facet to its sorted distinct values."""
    facets: Dict[str, List[str]] = {}
    for facet, extract in _DISCOVERED_FACETS:
        values = {value for question in questions for value in extract(question)}
        if values:
            facets[facet.value] = sorted(values)
    for facet in _BOOLEAN_FACETS:
        facets[facet.value] = list(BOOLEAN_DOMAIN)
    return facets


def _matches_flag(flag: bool, value: str) -> bool:
    if value == YES:
        return flag
    if value == NO:
        return not flag
    return False


def matches(question: Question, facet: str, value: str) -> bool:
    """Whether ``question`` satisfies a single ``facet == value`` constraint."""
    if not value:
        return True
    if facet == Facet.OWNER.value:
        return question.owner_name == value
    if facet == Facet.TAG.value:
        return value in question.tag_names
    if facet == Facet.TOPIC.value:
        return question.topic_id == value
    if facet == Facet.HAS_ACCEPTED_ANSWER.value:
        return _matches_flag(question.has_accepted_answer, value)
    if facet == Facet.HAS_ANSWERS.value:
        return _matches_flag(question.has_answers, value)
    raise FilterError(f"Unknown filter facet: {facet}", {"facet": facet})


def apply_filters(questions: Sequence[Question], spec: Mapping[str, str]) -> Tuple[Question, ...]:
    """Keep the questions matching every active constraint, in corpus order."""
    active = [(facet, value) for facet, value in spec.items() if value]
    if not active:
        return tuple(questions)
    filtered = tuple(
        question
        for question in questions
        if all(matches(question, facet, value) for facet, value in active)
    )
    logger.debug(f"[Sage] Filters {dict(active)} kept {len(filtered)}/{len(questions)} questions")
    return filtered


def update_filter_spec(spec: Mapping[str, str], facet: str, value: Optional[str]) -> FilterSpec:
    """Return a new spec with ``facet`` set to ``value``, or removed when the value is empty."""
    known = {item.value for item in Facet}
    if facet not in known:
        raise FilterError(f"Unknown filter facet: {facet}", {"facet": facet})

    updated = dict(spec)
    text = (value or "").strip()
    if text:
        updated[facet] = text
    else:
        updated.pop(facet, None)
    return updated
