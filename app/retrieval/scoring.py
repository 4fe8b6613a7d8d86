from abc import ABC, abstractmethod

from app.database.models import DocumentRecord
from app.retrieval.models import ScoredDocument


class BaseRelevanceScorer(ABC):
    """Contract for ranking candidate documents against a query."""

    @abstractmethod
    def rank(self, query: str, candidates: list[DocumentRecord]) -> list[ScoredDocument]:
        """Return the relevant candidates, most relevant first."""


class SubstringRelevanceScorer(BaseRelevanceScorer):
    """Case-insensitive substring match with a fixed score.

    Stand-in for a real search backend: every matching document gets the
    same score and candidate order is kept.
    """

    MATCH_SCORE = 0.8
    DEFAULT_LIMIT = 8

    def __init__(self, limit: int = DEFAULT_LIMIT) -> None:
        self._limit = limit

    def rank(self, query: str, candidates: list[DocumentRecord]) -> list[ScoredDocument]:
        needle = query.lower()
        matches = [
            ScoredDocument(
                document_id=doc.id,
                title=doc.title,
                content=doc.content,
                score=self.MATCH_SCORE,
            )
            for doc in candidates
            if doc.content and needle in doc.content.lower()
        ]
        return matches[: self._limit]
