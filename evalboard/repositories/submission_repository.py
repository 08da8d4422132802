"""
Submission Repository - EvalBoard
evalboard/repositories/submission_repository.py

Data access layer for Submission entity operations.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence
from uuid import UUID, uuid4

from evalboard.models.enumerations import SubmissionStatus
from evalboard.repositories.base import BaseRepository

TERMINAL_STATUSES = [s.value for s in SubmissionStatus if s.is_terminal]

# Literals older records may still carry
_LEGACY_LITERALS = {
    SubmissionStatus.SUBMITTED: ["pending-assignment"],
    SubmissionStatus.UNDER_REVIEW: ["under_review"],
}


def status_literals(statuses: Iterable[SubmissionStatus]) -> List[str]:
    """Expand statuses to every stored literal that means the same thing."""
    literals: List[str] = []
    for status in statuses:
        status = SubmissionStatus(status)
        literals.append(status.value)
        literals.extend(_LEGACY_LITERALS.get(status, []))
    return literals


class SubmissionRepository(BaseRepository):
    """Repository for Submission CRUD operations."""

    TABLE_NAME = "SUBMISSIONS"

    _COLUMNS = """ID, TEAM_ID, PROJECT_TITLE, DESCRIPTION, LEARNING_OUTCOMES,
                  VIDEO_LINK, STATUS, CREATED_AT, UPDATED_AT"""

    def create_if_no_active(
        self,
        team_id: UUID,
        project_title: str,
        description: str,
        learning_outcomes: str,
        video_link: str,
        status: SubmissionStatus,
    ) -> Optional[Dict[str, Any]]:
        """
        Create a submission unless the team already has a non-terminal one.

        The existence check and the insert are a single statement, so two
        concurrent creates for one team cannot both succeed.

        Returns:
            Created submission dict, or None if an active submission exists
        """
        submission_id = uuid4()
        now = self.now()

        sql = f"""
            INSERT INTO SUBMISSIONS (ID, TEAM_ID, PROJECT_TITLE, DESCRIPTION, LEARNING_OUTCOMES,
                                     VIDEO_LINK, STATUS, CREATED_AT, UPDATED_AT)
            SELECT %s, %s, %s, %s, %s, %s, %s, %s, %s
            WHERE NOT EXISTS (
                SELECT 1 FROM SUBMISSIONS
                WHERE TEAM_ID = %s AND STATUS NOT IN ({self.placeholders(TERMINAL_STATUSES)})
            )
        """
        params = [
            str(submission_id),
            str(team_id),
            project_title,
            description,
            learning_outcomes,
            video_link,
            status.value,
            now,
            now,
            str(team_id),
            *TERMINAL_STATUSES,
        ]

        inserted = self.execute_query(sql, params, commit=True)
        if not inserted:
            return None
        return self.get_by_id(submission_id)

    def get_by_id(self, submission_id: UUID) -> Optional[Dict[str, Any]]:
        """
        Retrieve a submission by ID.

        Args:
            submission_id: UUID of the submission

        Returns:
            Submission dict or None if not found
        """
        sql = f"SELECT {self._COLUMNS} FROM SUBMISSIONS WHERE ID = %s"
        row = self.execute_query(sql, (str(submission_id),), fetch_one=True)
        return self._row_to_dict(row) if row else None

    def get_many(self, submission_ids: Iterable[UUID]) -> List[Dict[str, Any]]:
        """Retrieve the submissions with the given IDs (missing IDs are skipped)."""
        ids = sorted({str(s) for s in submission_ids})
        if not ids:
            return []
        sql = f"SELECT {self._COLUMNS} FROM SUBMISSIONS WHERE ID IN ({self.placeholders(ids)})"
        rows = self.execute_query(sql, ids, fetch_all=True) or []
        return [self._row_to_dict(row) for row in rows]

    def get_all(self, team_id: Optional[UUID] = None) -> List[Dict[str, Any]]:
        """
        Retrieve submissions, newest first, optionally for one team.
        """
        sql = f"SELECT {self._COLUMNS} FROM SUBMISSIONS"
        params: List[Any] = []
        if team_id:
            sql += " WHERE TEAM_ID = %s"
            params.append(str(team_id))
        sql += " ORDER BY CREATED_AT DESC, ID"
        rows = self.execute_query(sql, params, fetch_all=True) or []
        return [self._row_to_dict(row) for row in rows]

    def get_active_for_team(self, team_id: UUID) -> Optional[Dict[str, Any]]:
        """Return the team's non-terminal submission, if any."""
        sql = f"""
            SELECT {self._COLUMNS} FROM SUBMISSIONS
            WHERE TEAM_ID = %s AND STATUS NOT IN ({self.placeholders(TERMINAL_STATUSES)})
            ORDER BY CREATED_AT DESC
            LIMIT 1
        """
        row = self.execute_query(sql, [str(team_id), *TERMINAL_STATUSES], fetch_one=True)
        return self._row_to_dict(row) if row else None

    def update_if_status(
        self,
        submission_id: UUID,
        update_data: Dict[str, Any],
        allowed_statuses: Sequence[SubmissionStatus],
    ) -> bool:
        """
        Update fields only while the submission is in one of allowed_statuses.

        Returns:
            True if a row was updated
        """
        data = {
            k: (v.value if isinstance(v, SubmissionStatus) else v)
            for k, v in update_data.items()
        }
        sql, params = self.build_update_query(
            self.TABLE_NAME,
            data,
            "ID",
            str(submission_id),
            additional_set={"updated_at": self.now()},
            where_in=("status", status_literals(allowed_statuses)),
        )
        return bool(self.execute_query(sql, params, commit=True))

    def count(self) -> int:
        row = self.execute_query("SELECT COUNT(*) AS TOTAL FROM SUBMISSIONS", fetch_one=True)
        return row["TOTAL"] if row else 0

    def _row_to_dict(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Convert Snowflake row to submission dict."""
        return {
            "id": UUID(row["ID"]),
            "team_id": UUID(row["TEAM_ID"]),
            "project_title": row["PROJECT_TITLE"],
            "description": row["DESCRIPTION"],
            "learning_outcomes": row["LEARNING_OUTCOMES"],
            "video_link": row["VIDEO_LINK"],
            "status": row["STATUS"],
            "created_at": self.normalize_timestamp(row["CREATED_AT"]),
            "updated_at": self.normalize_timestamp(row["UPDATED_AT"]),
        }
