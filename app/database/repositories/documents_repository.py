from typing import Any

import psycopg
from psycopg.rows import dict_row

from app.database.connection import get_connection
from app.database.models import DocumentRecord, NewDocument
from app.documents.exceptions import DocumentNotFoundError
from app.ingestion.exceptions import MetadataPersistError

_COLUMNS = """
    id::text AS id, user_id::text AS user_id, title, content, file_path,
    file_size, file_type, is_company_wide, created_at
"""


def _to_record(row: dict[str, Any]) -> DocumentRecord:
    return DocumentRecord(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        content=row["content"] or "",
        file_path=row["file_path"],
        file_size=row["file_size"],
        file_type=row["file_type"],
        is_company_wide=bool(row["is_company_wide"]),
        created_at=row.get("created_at"),
    )


class DocumentsRepository:
    """Database operations for the documents table."""

    def insert(self, document: NewDocument) -> DocumentRecord:
        """Insert a document row and return it as stored.

        Raises:
            MetadataPersistError: if the database rejects the insert.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO documents
                        (user_id, title, content, file_path, file_size, file_type,
                         is_company_wide)
                        VALUES (%s::uuid, %s, %s, %s, %s, %s, %s)
                        RETURNING {_COLUMNS}
                        """,
                        (
                            document.user_id,
                            document.title,
                            document.content,
                            document.file_path,
                            document.file_size,
                            document.file_type,
                            document.is_company_wide,
                        ),
                    )
                    row = cur.fetchone()
                conn.commit()
        except psycopg.Error as exc:
            raise MetadataPersistError(f"Document insert failed: {exc}") from exc

        if row is None:
            raise MetadataPersistError("Document insert returned no row")
        return _to_record(row)

    def find_by_id(self, document_id: str) -> DocumentRecord:
        """Find a document by ID.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE id = %s::uuid",
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _to_record(row)

    def find_by_file_path(self, file_path: str) -> DocumentRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE file_path = %s LIMIT 1",
                    (file_path,),
                )
                row = cur.fetchone()

        return _to_record(row) if row is not None else None

    def find_many(self, document_ids: list[str]) -> list[DocumentRecord]:
        """Fetch documents by a membership filter on ID. Order is unspecified."""
        if not document_ids:
            return []
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE id = ANY(%s::uuid[])",
                    (list(document_ids),),
                )
                rows = cur.fetchall()

        return [_to_record(row) for row in rows]

    def list_documents(
        self,
        *,
        viewer_id: str,
        is_admin: bool,
        company_wide_only: bool = False,
        owner_id: str | None = None,
    ) -> list[DocumentRecord]:
        """List documents newest first.

        Filters: company-wide only, or a single owner. Non-admins only ever see
        their own documents plus company-wide ones.
        """
        clauses: list[str] = []
        params: list[Any] = []
        if company_wide_only:
            clauses.append("is_company_wide = TRUE")
        elif owner_id:
            clauses.append("user_id = %s::uuid")
            params.append(owner_id)
        if not is_admin and not company_wide_only:
            clauses.append("(user_id = %s::uuid OR is_company_wide = TRUE)")
            params.append(viewer_id)
        where = "WHERE " + " AND ".join(clauses) if clauses else ""

        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM documents {where} ORDER BY created_at DESC",
                    tuple(params),
                )
                rows = cur.fetchall()

        return [_to_record(row) for row in rows]

    def delete(self, document_id: str) -> None:
        """Delete a document row.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM documents WHERE id = %s::uuid",
                    (document_id,),
                )
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            conn.commit()
