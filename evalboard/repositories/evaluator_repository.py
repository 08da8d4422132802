"""
Evaluator Repository - EvalBoard
evalboard/repositories/evaluator_repository.py

Data access layer for Evaluator accounts and their approval state.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from evalboard.models.enumerations import EvaluatorStatus
from evalboard.repositories.base import BaseRepository


class EvaluatorRepository(BaseRepository):
    """Repository for Evaluator CRUD operations."""

    TABLE_NAME = "EVALUATORS"

    _COLUMNS = "ID, NAME, EMAIL, PHONE, QUALIFICATION, EXPERIENCE, STATUS, CREATED_AT"

    def create_if_email_free(
        self,
        name: str,
        email: str,
        phone: Optional[str] = None,
        qualification: Optional[str] = None,
        experience: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Register a pending evaluator unless the email is already taken.

        Returns:
            Created evaluator dict, or None for a duplicate email
        """
        evaluator_id = uuid4()
        sql = """
            INSERT INTO EVALUATORS (ID, NAME, EMAIL, PHONE, QUALIFICATION, EXPERIENCE, STATUS, CREATED_AT)
            SELECT %s, %s, %s, %s, %s, %s, %s, %s
            WHERE NOT EXISTS (SELECT 1 FROM EVALUATORS WHERE EMAIL = %s)
        """
        params = (
            str(evaluator_id),
            name,
            email,
            phone,
            qualification,
            experience,
            EvaluatorStatus.PENDING.value,
            self.now(),
            email,
        )
        inserted = self.execute_query(sql, params, commit=True)
        if not inserted:
            return None
        return self.get_by_id(evaluator_id)

    def get_by_id(self, evaluator_id: UUID) -> Optional[Dict[str, Any]]:
        """
        Retrieve an evaluator by ID.

        Args:
            evaluator_id: UUID of the evaluator

        Returns:
            Evaluator dict or None if not found
        """
        sql = f"SELECT {self._COLUMNS} FROM EVALUATORS WHERE ID = %s"
        row = self.execute_query(sql, (str(evaluator_id),), fetch_one=True)
        return self._row_to_dict(row) if row else None

    def get_all(self, status: Optional[EvaluatorStatus] = None) -> List[Dict[str, Any]]:
        """
        Retrieve evaluators ordered by name, optionally filtered by approval state.
        """
        sql = f"SELECT {self._COLUMNS} FROM EVALUATORS"
        params: List[Any] = []
        if status:
            sql += " WHERE STATUS = %s"
            params.append(status.value)
        sql += " ORDER BY NAME, ID"
        rows = self.execute_query(sql, params, fetch_all=True) or []
        return [self._row_to_dict(row) for row in rows]

    def update_status_if(
        self,
        evaluator_id: UUID,
        expected: EvaluatorStatus,
        new_status: EvaluatorStatus,
    ) -> bool:
        """
        Change the approval state only if it still equals expected.

        Returns:
            True if the row was updated
        """
        sql = """
            UPDATE EVALUATORS
            SET STATUS = %s
            WHERE ID = %s AND STATUS = %s
        """
        updated = self.execute_query(
            sql, (new_status.value, str(evaluator_id), expected.value), commit=True
        )
        return bool(updated)

    def count_by_status(self) -> Dict[str, int]:
        sql = "SELECT STATUS, COUNT(*) AS TOTAL FROM EVALUATORS GROUP BY STATUS"
        rows = self.execute_query(sql, fetch_all=True) or []
        return {row["STATUS"]: row["TOTAL"] for row in rows}

    def _row_to_dict(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Convert Snowflake row to evaluator dict."""
        return {
            "id": UUID(row["ID"]),
            "name": row["NAME"],
            "email": row["EMAIL"],
            "phone": row["PHONE"],
            "qualification": row["QUALIFICATION"],
            "experience": row["EXPERIENCE"],
            "status": EvaluatorStatus(row["STATUS"]),
            "created_at": self.normalize_timestamp(row["CREATED_AT"]),
        }
