from dataclasses import dataclass, field


@dataclass(frozen=True)
class ContextSource:
    document_id: str
    title: str
    excerpt: str
    relevance_score: float

    def to_dict(self) -> dict[str, object]:
        return {
            "documentId": self.document_id,
            "documentTitle": self.title,
            "similarity": self.relevance_score,
            "content": self.excerpt,
        }


@dataclass(frozen=True)
class ContextBundle:
    context: str = ""
    sources: list[ContextSource] = field(default_factory=list)


@dataclass(frozen=True)
class ScoredDocument:
    document_id: str
    title: str
    content: str
    score: float
