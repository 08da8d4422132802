"""
Evaluation Repository - EvalBoard
evalboard/repositories/evaluation_repository.py

Data access layer for Evaluation entity operations.

Writes that depend on the current state are compare-and-set statements
(`... WHERE STATUS IN (...)`) so concurrent lifecycle moves serialise in the
database instead of in the application.
"""

import json
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID, uuid4

from evalboard.models.enumerations import EvaluationStatus
from evalboard.repositories.base import BaseRepository

# Literals older records may still carry for each status
_STATUS_LITERALS = {
    EvaluationStatus.DRAFT: ["draft", "pending"],
    EvaluationStatus.SUBMITTED: ["submitted", "completed"],
    EvaluationStatus.PUBLISHED: ["published"],
}


def status_literals(statuses: Iterable[EvaluationStatus]) -> List[str]:
    """Expand statuses to every stored literal that means the same thing."""
    literals: List[str] = []
    for status in statuses:
        literals.extend(_STATUS_LITERALS[EvaluationStatus(status)])
    return literals


class EvaluationRepository(BaseRepository):
    """Repository for Evaluation CRUD operations."""

    TABLE_NAME = "EVALUATIONS"

    _COLUMNS = """ID, SUBMISSION_ID, EVALUATOR_ID, SCORES, FEEDBACK, TOTAL_SCORE, AVERAGE_SCORE,
                  STATUS, CREATED_AT, UPDATED_AT, SUBMITTED_AT, PUBLISHED_AT"""

    def create_if_absent(self, submission_id: UUID, evaluator_id: UUID) -> Optional[Dict[str, Any]]:
        """
        Create a draft evaluation for (submission, evaluator) unless one exists.

        Snowflake does not enforce UNIQUE constraints, so uniqueness of the
        pair is guaranteed by doing the check and the insert in one MERGE.

        Returns:
            Created evaluation dict, or None if the pair is already assigned
        """
        evaluation_id = uuid4()
        now = self.now()
        sql = """
            MERGE INTO EVALUATIONS t
            USING (SELECT %s AS SUBMISSION_ID, %s AS EVALUATOR_ID) s
            ON t.SUBMISSION_ID = s.SUBMISSION_ID AND t.EVALUATOR_ID = s.EVALUATOR_ID
            WHEN NOT MATCHED THEN INSERT (
                ID, SUBMISSION_ID, EVALUATOR_ID, SCORES, FEEDBACK, TOTAL_SCORE, AVERAGE_SCORE,
                STATUS, CREATED_AT, UPDATED_AT
            ) VALUES (
                %s, s.SUBMISSION_ID, s.EVALUATOR_ID, PARSE_JSON('{}'), NULL, 0, 0,
                %s, %s, %s
            )
        """
        params = (
            str(submission_id),
            str(evaluator_id),
            str(evaluation_id),
            EvaluationStatus.DRAFT.value,
            now,
            now,
        )
        inserted = self.execute_query(sql, params, commit=True)
        if not inserted:
            return None
        return self.get_by_id(evaluation_id)

    def get_by_id(self, evaluation_id: UUID) -> Optional[Dict[str, Any]]:
        """
        Retrieve an evaluation by ID.

        Args:
            evaluation_id: UUID of the evaluation

        Returns:
            Evaluation dict or None if not found
        """
        sql = f"SELECT {self._COLUMNS} FROM EVALUATIONS WHERE ID = %s"
        row = self.execute_query(sql, (str(evaluation_id),), fetch_one=True)
        return self._row_to_dict(row) if row else None

    def get_all(
        self,
        submission_id: Optional[UUID] = None,
        evaluator_id: Optional[UUID] = None,
        statuses: Optional[Iterable[EvaluationStatus]] = None,
        submission_ids: Optional[Iterable[UUID]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Retrieve evaluations with optional filters, ordered by creation time
        then ID so that repeated reads of unchanged data come back in the
        same order.
        """
        where_clauses = ["1=1"]
        params: List[Any] = []

        if submission_id:
            where_clauses.append("SUBMISSION_ID = %s")
            params.append(str(submission_id))

        if submission_ids is not None:
            ids = sorted({str(s) for s in submission_ids})
            if not ids:
                return []
            where_clauses.append(f"SUBMISSION_ID IN ({self.placeholders(ids)})")
            params.extend(ids)

        if evaluator_id:
            where_clauses.append("EVALUATOR_ID = %s")
            params.append(str(evaluator_id))

        if statuses is not None:
            literals = status_literals(statuses)
            if not literals:
                return []
            where_clauses.append(f"STATUS IN ({self.placeholders(literals)})")
            params.extend(literals)

        sql = f"""
            SELECT {self._COLUMNS}
            FROM EVALUATIONS
            WHERE {' AND '.join(where_clauses)}
            ORDER BY CREATED_AT, ID
        """
        rows = self.execute_query(sql, params, fetch_all=True) or []
        return [self._row_to_dict(row) for row in rows]

    def update_draft(
        self,
        evaluation_id: UUID,
        scores: Optional[Dict[str, int]],
        total_score: Optional[int],
        average_score: Optional[float],
        feedback: Optional[str],
        new_status: EvaluationStatus,
    ) -> bool:
        """
        Write scores, feedback and status in one statement while the
        evaluation is still a draft. None for scores or feedback keeps the
        stored value.

        Returns:
            True if the row was updated (False: no longer a draft)
        """
        now = self.now()
        submitted_at = now if new_status is EvaluationStatus.SUBMITTED else None
        draft_literals = status_literals([EvaluationStatus.DRAFT])
        sql = f"""
            UPDATE EVALUATIONS
            SET SCORES = COALESCE(PARSE_JSON(%s), SCORES),
                TOTAL_SCORE = COALESCE(%s, TOTAL_SCORE),
                AVERAGE_SCORE = COALESCE(%s, AVERAGE_SCORE),
                FEEDBACK = COALESCE(%s, FEEDBACK),
                STATUS = %s,
                UPDATED_AT = %s,
                SUBMITTED_AT = COALESCE(%s, SUBMITTED_AT)
            WHERE ID = %s AND STATUS IN ({self.placeholders(draft_literals)})
        """
        params = [
            json.dumps(scores) if scores is not None else None,
            total_score,
            average_score,
            feedback,
            new_status.value,
            now,
            submitted_at,
            str(evaluation_id),
            *draft_literals,
        ]
        return bool(self.execute_query(sql, params, commit=True))

    def transition(
        self,
        evaluation_id: UUID,
        expected: EvaluationStatus,
        target: EvaluationStatus,
    ) -> bool:
        """
        Compare-and-set a lifecycle move. Stamps SUBMITTED_AT or PUBLISHED_AT
        for the target state; re-entering the same state only refreshes
        UPDATED_AT.

        Returns:
            True if the row was updated (False: status changed concurrently)
        """
        now = self.now()
        additional = {}
        if expected is not target:
            additional["status"] = target.value
            if target is EvaluationStatus.SUBMITTED:
                additional["submitted_at"] = now
            elif target is EvaluationStatus.PUBLISHED:
                additional["published_at"] = now

        sql, params = self.build_update_query(
            self.TABLE_NAME,
            {"updated_at": now},
            "ID",
            str(evaluation_id),
            additional_set=additional,
            where_in=("status", status_literals([expected])),
        )
        return bool(self.execute_query(sql, params, commit=True))

    def _row_to_dict(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Convert Snowflake row to evaluation dict. SCORES is a VARIANT (JSON text)."""
        return {
            "id": UUID(row["ID"]),
            "submission_id": UUID(row["SUBMISSION_ID"]),
            "evaluator_id": UUID(row["EVALUATOR_ID"]),
            "scores": row["SCORES"],
            "feedback": row["FEEDBACK"],
            "total_score": int(row["TOTAL_SCORE"] or 0),
            "average_score": float(row["AVERAGE_SCORE"] or 0),
            "status": row["STATUS"],
            "created_at": self.normalize_timestamp(row["CREATED_AT"]),
            "updated_at": self.normalize_timestamp(row["UPDATED_AT"]),
            "submitted_at": self.normalize_timestamp(row["SUBMITTED_AT"]),
            "published_at": self.normalize_timestamp(row["PUBLISHED_AT"]),
        }
