"""Tests for corpus statistics."""

from __future__ import annotations

import pytest

from aggregator import compute_statistics, top_entries
from aggregator.statistics import format_ranking
from conftest import make_question


def test_empty_corpus_has_no_statistics() -> None:
    assert compute_statistics([]) is None


def test_totals_and_averages() -> None:
    questions = [
        make_question(1, owner="alice", tags=["aws", "s3"], answers=2, accepted=11, score=3, views=100),
        make_question(2, owner="bob", tags=["aws"], answers=1, score=-1, views=50),
        make_question(3, owner="alice", tags=[], answers=0, score=None, views=None),
    ]

    stats = compute_statistics(questions)

    assert stats.total_questions == 3
    assert stats.with_answers == 2
    assert stats.total_answers == 3
    assert stats.with_accepted_answer == 1
    assert stats.total_views == 150
    assert stats.total_score == 2
    assert stats.unique_owners == 2
    assert stats.unique_tags == 2
    assert stats.by_owner == {"alice": 2, "bob": 1}
    assert stats.by_tag == {"aws": 2, "s3": 1}
    assert stats.avg_answers_per_question == pytest.approx(1.0)
    assert stats.avg_views_per_question == pytest.approx(50.0)
    assert stats.avg_score_per_question == pytest.approx(2 / 3)
    assert stats.answered_pct == pytest.approx(200 / 3)
    assert stats.accepted_pct == pytest.approx(100 / 3)


def test_bounds_hold() -> None:
    questions = [make_question(i, answers=i % 3, accepted=(i if i % 4 == 0 else None)) for i in range(1, 30)]

    stats = compute_statistics(questions)

    assert stats.with_answers <= stats.total_questions
    assert stats.with_accepted_answer <= stats.total_questions
    assert stats.avg_answers_per_question == pytest.approx(stats.total_answers / len(questions))


def test_missing_owner_and_unnamed_tags_are_ignored() -> None:
    questions = [
        make_question(1, owner=None, tags=["db"]),
        make_question(2, owner=""),
    ]

    stats = compute_statistics(questions)

    assert stats.unique_owners == 0
    assert stats.by_owner == {}
    assert stats.top_owners == ()
    assert stats.by_tag == {"db": 1}


def test_top_rankings_are_capped_and_stable() -> None:
    owners = [f"user{i:02d}" for i in range(12)]
    questions = []
    qid = 0
    for owner in owners:
        qid += 1
        questions.append(make_question(qid, owner=owner))
    # user05 and user07 become the most frequent, user07 first
    for owner in ("user07", "user07", "user05", "user05"):
        qid += 1
        questions.append(make_question(qid, owner=owner))

    stats = compute_statistics(questions)

    assert len(stats.top_owners) == 10
    assert stats.top_owners[0] == ("user05", 3)
    assert stats.top_owners[1] == ("user07", 3)
    # ties keep first-appearance order
    assert [name for name, _ in stats.top_owners[2:]] == [
        "user00", "user01", "user02", "user03", "user04", "user06", "user08", "user09",
    ]
    counts = [count for _, count in stats.top_owners]
    assert counts == sorted(counts, reverse=True)
    assert all(name in stats.by_owner for name, _ in stats.top_owners)


def test_top_entries_with_fewer_than_limit() -> None:
    assert top_entries({"a": 1, "b": 2}) == (("b", 2), ("a", 1))


def test_format_ranking_pluralizes() -> None:
    assert format_ranking([("aws", 2), ("s3", 1)]) == ["aws: 2 questions", "s3: 1 question"]
