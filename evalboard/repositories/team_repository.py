"""
Team Repository - EvalBoard
evalboard/repositories/team_repository.py

Data access layer for teams and their member lists. Members are stored as a
VARIANT array; every write bumps VERSION and only applies when the caller
read the current VERSION.
"""

import json
from typing import Any, Dict, Iterable, List, Optional, Sequence
from uuid import UUID, uuid4

from evalboard.repositories.base import BaseRepository


class TeamRepository(BaseRepository):
    """Repository for Team CRUD operations."""

    TABLE_NAME = "TEAMS"

    _COLUMNS = "ID, NAME, LEADER_ID, MEMBERS, VERSION"

    def create(
        self,
        name: str,
        members: Sequence[Dict[str, Any]],
        leader_id: Optional[UUID] = None,
    ) -> Dict[str, Any]:
        """
        Create a team.

        Args:
            name: Team name
            members: JSON-ready member dicts (id, name, email)
            leader_id: One of the members, or None

        Returns:
            Created team dict
        """
        team_id = uuid4()
        # PARSE_JSON is not allowed inside VALUES
        sql = """
            INSERT INTO TEAMS (ID, NAME, LEADER_ID, MEMBERS, VERSION, CREATED_AT)
            SELECT %s, %s, %s, PARSE_JSON(%s), 1, %s
        """
        params = (
            str(team_id),
            name,
            self.uuid_to_str(leader_id),
            json.dumps(list(members)),
            self.now(),
        )
        self.execute_query(sql, params, commit=True)
        return self.get_by_id(team_id)

    def get_by_id(self, team_id: UUID) -> Optional[Dict[str, Any]]:
        """
        Retrieve a team by ID.

        Args:
            team_id: UUID of the team

        Returns:
            Team dict or None if not found
        """
        sql = f"SELECT {self._COLUMNS} FROM TEAMS WHERE ID = %s"
        row = self.execute_query(sql, (str(team_id),), fetch_one=True)
        return self._row_to_dict(row) if row else None

    def get_many(self, team_ids: Iterable[UUID]) -> List[Dict[str, Any]]:
        """Retrieve the teams with the given IDs (missing IDs are skipped)."""
        ids = sorted({str(t) for t in team_ids})
        if not ids:
            return []
        sql = f"SELECT {self._COLUMNS} FROM TEAMS WHERE ID IN ({self.placeholders(ids)})"
        rows = self.execute_query(sql, ids, fetch_all=True) or []
        return [self._row_to_dict(row) for row in rows]

    def get_all(self) -> List[Dict[str, Any]]:
        """Retrieve every team ordered by name."""
        sql = f"SELECT {self._COLUMNS} FROM TEAMS ORDER BY NAME"
        rows = self.execute_query(sql, fetch_all=True) or []
        return [self._row_to_dict(row) for row in rows]

    def update_if_version(
        self,
        team_id: UUID,
        expected_version: int,
        name: Optional[str] = None,
        leader_id: Optional[UUID] = None,
        members: Optional[Sequence[Dict[str, Any]]] = None,
    ) -> bool:
        """
        Apply the given fields only if VERSION still equals expected_version.

        Returns:
            True if the row was updated, False if it changed underneath
        """
        sets = ["VERSION = VERSION + 1"]
        params: List[Any] = []
        if name is not None:
            sets.append("NAME = %s")
            params.append(name)
        if leader_id is not None:
            sets.append("LEADER_ID = %s")
            params.append(str(leader_id))
        if members is not None:
            sets.append("MEMBERS = PARSE_JSON(%s)")
            params.append(json.dumps(list(members)))

        sql = f"UPDATE TEAMS SET {', '.join(sets)} WHERE ID = %s AND VERSION = %s"
        params.extend([str(team_id), expected_version])
        return self.execute_query(sql, params, commit=True) > 0

    def count(self) -> int:
        row = self.execute_query("SELECT COUNT(*) AS TOTAL FROM TEAMS", fetch_one=True)
        return row["TOTAL"] if row else 0

    def _row_to_dict(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Convert Snowflake row to team dict."""
        return {
            "id": UUID(row["ID"]),
            "name": row["NAME"],
            "leader_id": self.str_to_uuid(row["LEADER_ID"]),
            "members": row["MEMBERS"],
            "version": row["VERSION"],
        }
