"""Aggregate statistics over a loaded question corpus."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from models import Question


TOP_K = 10


@dataclass(frozen=True)
class QuestionStatistics:
    total_questions: int
    with_answers: int
    total_answers: int
    with_accepted_answer: int
    total_views: int
    total_score: int
    unique_owners: int
    unique_tags: int
    avg_answers_per_question: float
    avg_views_per_question: float
    avg_score_per_question: float
    by_owner: Mapping[str, int] = field(default_factory=dict)
    by_tag: Mapping[str, int] = field(default_factory=dict)
    top_owners: Tuple[Tuple[str, int], ...] = ()
    top_tags: Tuple[Tuple[str, int], ...] = ()

    @property
    def answered_pct(self) -> float:
        return self.with_answers / self.total_questions * 100

    @property
    def accepted_pct(self) -> float:
        return self.with_accepted_answer / self.total_questions * 100


def top_entries(counts: Mapping[str, int], limit: int = TOP_K) -> Tuple[Tuple[str, int], ...]:
    """Highest counts first; ties keep insertion order (sorted() is stable)."""
    ranked = sorted(counts.items(), key=lambda entry: entry[1], reverse=True)
    return tuple(ranked[:limit])


def compute_statistics(questions: Sequence[Question]) -> Optional[QuestionStatistics]:
    """Compute the statistics snapshot for ``questions``; ``None`` when empty."""
    total = len(questions)
    if total == 0:
        return None

    with_answers = 0
    total_answers = 0
    with_accepted = 0
    total_views = 0
    total_score = 0
    by_owner: Dict[str, int] = {}
    by_tag: Dict[str, int] = {}

    for question in questions:
        if question.has_answers:
            with_answers += 1
            total_answers += len(question.answers)
        if question.has_accepted_answer:
            with_accepted += 1

        total_views += question.view_count or 0
        total_score += question.score or 0

        owner = question.owner_name
        if owner:
            by_owner[owner] = by_owner.get(owner, 0) + 1

        for name in question.tag_names:
            by_tag[name] = by_tag.get(name, 0) + 1

    return QuestionStatistics(
        total_questions=total,
        with_answers=with_answers,
        total_answers=total_answers,
        with_accepted_answer=with_accepted,
        total_views=total_views,
        total_score=total_score,
        unique_owners=len(by_owner),
        unique_tags=len(by_tag),
        avg_answers_per_question=total_answers / total,
        avg_views_per_question=total_views / total,
        avg_score_per_question=total_score / total,
        by_owner=by_owner,
        by_tag=by_tag,
        top_owners=top_entries(by_owner),
        top_tags=top_entries(by_tag),
    )


def format_ranking(entries: Sequence[Tuple[str, int]]) -> List[str]:
    return [f"{name}: {count} question{'s' if count != 1 else ''}" for name, count in entries]
