import psycopg

from app.database.models import DocumentRecord
from app.database.repositories.documents_repository import DocumentsRepository
from app.logging.logger import Log
from app.retrieval.models import ContextBundle, ContextSource
from app.retrieval.scoring import BaseRelevanceScorer, SubstringRelevanceScorer

MAX_DOCUMENTS = 10
MIN_CONTENT_CHARS = 20
EXCERPT_CHARS = 300
FALLBACK_SCORE = 0.95
SEARCH_ERROR_SCORE = 0.9

ATTACHMENT_KEYWORDS = ("attachment", "document", "file", "pdf", "doc", "uploaded")
ATTACHMENT_PREFIX = (
    "The user has mentioned attachments or documents. "
    "Here is the relevant content from their uploaded documents:\n\n"
)


def mentions_attachment(query: str) -> bool:
    lowered = query.lower()
    return any(keyword in lowered for keyword in ATTACHMENT_KEYWORDS)


def excerpt(content: str) -> str:
    if len(content) > EXCERPT_CHARS:
        return content[:EXCERPT_CHARS] + "..."
    return content


def has_sufficient_content(doc: DocumentRecord) -> bool:
    return len((doc.content or "").strip()) > MIN_CONTENT_CHARS


class ContextAssembler:
    """Builds the per-turn context bundle from a set of selected documents.

    Every selected document with readable content is included in full, in
    the order the caller selected them. Source attribution is computed
    separately by the relevance scorer and never fails the turn.
    """

    def __init__(
        self,
        documents_repository: DocumentsRepository,
        scorer: BaseRelevanceScorer | None = None,
    ) -> None:
        self._documents = documents_repository
        self._scorer = scorer or SubstringRelevanceScorer()

    def assemble(self, query: str, document_ids: list[str]) -> ContextBundle:
        selected = list(dict.fromkeys(document_ids))[:MAX_DOCUMENTS]
        if not selected:
            return ContextBundle()

        try:
            documents = self._fetch_in_order(selected)
        except psycopg.Error as exc:
            Log.error("Failed to fetch documents for context", error=str(exc))
            return ContextBundle()

        if not documents:
            Log.info("No selected documents found", requested=len(selected))
            return ContextBundle()

        context = self._build_context(documents)
        sources = self._build_sources(query, documents)
        if context and mentions_attachment(query):
            context = ATTACHMENT_PREFIX + context

        Log.info(
            "Context assembled",
            documents=len(documents),
            context_chars=len(context),
            sources=len(sources),
        )
        return ContextBundle(context=context, sources=sources)

    def _fetch_in_order(self, document_ids: list[str]) -> list[DocumentRecord]:
        by_id = {doc.id: doc for doc in self._documents.find_many(document_ids)}
        return [by_id[doc_id] for doc_id in document_ids if doc_id in by_id]

    @staticmethod
    def _build_context(documents: list[DocumentRecord]) -> str:
        blocks = [
            f"=== DOCUMENT: {doc.title} ===\n\n{doc.content}\n\n=== END DOCUMENT ==="
            for doc in documents
            if has_sufficient_content(doc)
        ]
        notes = [
            f'Document "{doc.title}" was selected but contains no readable content.'
            for doc in documents
            if not has_sufficient_content(doc)
        ]
        parts = []
        if blocks:
            parts.append("\n\n".join(blocks))
        if notes:
            parts.append("\n".join(notes))
        return "\n\n".join(parts)

    def _build_sources(self, query: str, documents: list[DocumentRecord]) -> list[ContextSource]:
        try:
            ranked = self._scorer.rank(query, documents)
        except Exception as exc:
            Log.warning("Source search failed, attributing all documents", error=str(exc))
            return _attribute_all(documents, SEARCH_ERROR_SCORE)

        if not ranked:
            return _attribute_all(documents, FALLBACK_SCORE)
        return [
            ContextSource(
                document_id=match.document_id,
                title=match.title,
                excerpt=excerpt(match.content),
                relevance_score=match.score,
            )
            for match in ranked
        ]


def _attribute_all(documents: list[DocumentRecord], score: float) -> list[ContextSource]:
    return [
        ContextSource(
            document_id=doc.id,
            title=doc.title,
            excerpt=excerpt(doc.content),
            relevance_score=score,
        )
        for doc in documents
        if doc.content
    ]
