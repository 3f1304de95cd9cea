"""
Data Models
"""
from .schemas import (
    Facet,
    Owner,
    Tag,
    Answer,
    Question,
    Credential,
    QuestionPage,
    FetchResult,
)

__all__ = [
    "Facet",
    "Owner",
    "Tag",
    "Answer",
    "Question",
    "Credential",
    "QuestionPage",
    "FetchResult",
]
