import json
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TeamMember(BaseModel):
    id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(
        ...,
        min_length=3,
        max_length=255,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
    )

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class Team(BaseModel):
    """
    A registered team. The leader, when set, is always one of the members.
    """

    id: UUID = Field(..., description="Unique team identifier")

    name: str = Field(..., min_length=1, max_length=255, description="Team name")

    leader_id: Optional[UUID] = Field(default=None, description="Team leader user id")

    members: List[TeamMember] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @field_validator("members", mode="before")
    @classmethod
    def decode_members(cls, value: Any) -> Any:
        if value is None or value == "":
            return []
        if isinstance(value, (str, bytes)):
            return json.loads(value)
        return value

    def has_member(self, user_id: UUID) -> bool:
        return any(member.id == user_id for member in self.members)


class TeamCreate(BaseModel):
    """
    Model for registering a team with its initial members.
    """

    name: str = Field(..., min_length=1, max_length=255, description="Team name")

    leader_id: Optional[UUID] = Field(default=None, description="Must be one of the members")

    members: List[TeamMember] = Field(..., min_length=1)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def check_members(self) -> "TeamCreate":
        ids = [member.id for member in self.members]
        if len(set(ids)) != len(ids):
            raise ValueError("Member ids must be unique")
        emails = [member.email for member in self.members]
        if len(set(emails)) != len(emails):
            raise ValueError("Member emails must be unique")
        if self.leader_id is not None and self.leader_id not in ids:
            raise ValueError("Leader must be one of the members")
        return self


class TeamUpdate(BaseModel):
    """
    Model for renaming a team or handing leadership to another member.
    Omitted fields are left unchanged.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)

    leader_id: Optional[UUID] = Field(default=None)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value
