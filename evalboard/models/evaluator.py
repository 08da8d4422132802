from pydantic import BaseModel, ConfigDict, Field, field_validator
from uuid import UUID, uuid4
from datetime import datetime, timezone
from typing import Optional

from evalboard.models.enumerations import EvaluatorStatus


class EvaluatorBase(BaseModel):
    """
    Base Pydantic model for Evaluator.
    """

    name: str = Field(..., min_length=1, max_length=255, description="Full name")

    email: str = Field(
        ...,
        min_length=3,
        max_length=255,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        description="Contact email (unique)"
    )

    phone: Optional[str] = Field(default=None, max_length=50)

    qualification: Optional[str] = Field(default=None, max_length=255)

    experience: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class EvaluatorCreate(EvaluatorBase):
    """
    Model for registering an evaluator. New evaluators start pending.
    """
    pass


class Evaluator(EvaluatorBase):
    """
    Model returned in API responses.
    """

    id: UUID = Field(default_factory=uuid4, description="Unique evaluator identifier")

    status: EvaluatorStatus = Field(
        default=EvaluatorStatus.PENDING,
        description="Approval state (pending, active, rejected)"
    )

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(from_attributes=True)

    def matches(self, search: Optional[str]) -> bool:
        """Case-insensitive free-text match on name, email and qualification."""
        if not search:
            return True
        needle = search.strip().lower()
        haystack = (self.name, self.email, self.qualification or "")
        return any(needle in field.lower() for field in haystack)
