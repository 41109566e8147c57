# services/retrieval.py
"""Keyword retrieval: literal substring counting over the recent corpus."""
from typing import List, Sequence

from core.domain import Document, ScoredDocument

DEFAULT_TOP_K = 3


def count_occurrences(text: str, query: str) -> int:
    """Case-insensitive, non-overlapping count of `query` inside `text`."""
    if not query:
        return 0
    return (text or "").lower().count(query.lower())


def retrieve(query: str, corpus: Sequence[Document], limit: int = DEFAULT_TOP_K) -> List[ScoredDocument]:
    """
    Score every document against `query` and return the top `limit` matches.

    Matching is a plain substring count, not word-bounded: "the" matches inside
    "there". Documents scoring zero are dropped. Ties keep corpus order.
    """
    if not query or limit <= 0:
        return []

    scored = [
        ScoredDocument(document=doc, score=count_occurrences(doc.text, query))
        for doc in corpus
    ]
    scored = [s for s in scored if s.score > 0]
    # sorted() is stable
    scored = sorted(scored, key=lambda s: s.score, reverse=True)
    return scored[:limit]
