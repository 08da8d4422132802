"""
Leaderboard Repository - EvalBoard
evalboard/repositories/leaderboard_repository.py

Persisted (published) leaderboard. The table holds exactly one leaderboard;
publishing replaces every row in a single transaction.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from evalboard.models.leaderboard import LeaderboardEntry
from evalboard.repositories.base import BaseRepository


class LeaderboardRepository(BaseRepository):
    """Repository for the published leaderboard."""

    TABLE_NAME = "LEADERBOARD_ENTRIES"

    def get_all(self) -> List[Dict[str, Any]]:
        """Return the persisted leaderboard ordered by stored rank."""
        sql = """
            SELECT RANK, TEAM_ID, TEAM_NAME, TOTAL_SCORE, AVERAGE_SCORE, PROJECT_TITLE,
                   SUBMISSION_ID, EVALUATION_ID, PUBLISHED_AT
            FROM LEADERBOARD_ENTRIES
            ORDER BY RANK
        """
        rows = self.execute_query(sql, fetch_all=True) or []
        return [self._row_to_dict(row) for row in rows]

    def replace_all(self, entries: Sequence[LeaderboardEntry], published_at: datetime) -> None:
        """
        Atomically swap the persisted leaderboard for entries. On failure the
        previous leaderboard stays in place.
        """
        statements: List[Tuple[str, Sequence[Any]]] = [("DELETE FROM LEADERBOARD_ENTRIES", ())]
        insert_sql = """
            INSERT INTO LEADERBOARD_ENTRIES (RANK, TEAM_ID, TEAM_NAME, TOTAL_SCORE, AVERAGE_SCORE,
                                             PROJECT_TITLE, SUBMISSION_ID, EVALUATION_ID, PUBLISHED_AT)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        """
        for entry in entries:
            statements.append(
                (
                    insert_sql,
                    (
                        entry.rank,
                        str(entry.team_id),
                        entry.team_name,
                        entry.total_score,
                        entry.average_score,
                        entry.project_title,
                        self.uuid_to_str(entry.submission_id),
                        self.uuid_to_str(entry.evaluation_id),
                        published_at,
                    ),
                )
            )
        self.execute_transaction(statements)

    def _row_to_dict(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Convert Snowflake row to leaderboard entry dict."""
        return {
            "rank": int(row["RANK"]),
            "team_id": row["TEAM_ID"],
            "team_name": row["TEAM_NAME"],
            "total_score": float(row["TOTAL_SCORE"]) if row["TOTAL_SCORE"] is not None else None,
            "average_score": float(row["AVERAGE_SCORE"]) if row["AVERAGE_SCORE"] is not None else None,
            "project_title": row["PROJECT_TITLE"],
            "submission_id": self.str_to_uuid(row["SUBMISSION_ID"]),
            "evaluation_id": self.str_to_uuid(row["EVALUATION_ID"]),
            "published_at": self.normalize_timestamp(row["PUBLISHED_AT"]),
        }
