from psycopg.rows import dict_row

from app.database.connection import get_connection
from app.database.models import ProfileRecord


class ProfilesRepository:
    """Read access to the profiles table (account status and role)."""

    def find_by_user_id(self, user_id: str) -> ProfileRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id::text AS id, status, role, email
                    FROM profiles
                    WHERE id = %s::uuid
                    """,
                    (user_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return ProfileRecord(
            id=row["id"],
            status=row["status"] or "",
            role=row["role"] or "",
            email=row["email"],
        )
