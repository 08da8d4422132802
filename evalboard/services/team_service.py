"""
Team Service - EvalBoard
evalboard/services/team_service.py

Team registration and membership changes. A team's leader is always one of
its members, and no two members share an id or an email.

Membership edits are read-modify-write on the stored member list; the write
only lands if the team's version is unchanged since the read.
"""

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

import structlog

from evalboard.core.exceptions import (
    ConcurrentModificationException,
    DuplicateEntityException,
    EntityNotFoundException,
    LeaderNotMemberException,
    NotTeamMemberException,
)
from evalboard.models.team import Team, TeamCreate, TeamMember, TeamUpdate
from evalboard.repositories.team_repository import TeamRepository

logger = structlog.get_logger(__name__)


def _member_dicts(members: List[TeamMember]) -> List[Dict[str, Any]]:
    return [member.model_dump(mode="json") for member in members]


class TeamService:
    """Create teams and manage their members and leader."""

    def __init__(self, team_repo: Optional[TeamRepository] = None):
        self.team_repo = team_repo or TeamRepository()

    def get(self, team_id: UUID) -> Team:
        return self._load(team_id)[0]

    def list(self) -> List[Team]:
        return [Team(**row) for row in self.team_repo.get_all()]

    def ensure_member(self, team_id: UUID, user_id: UUID) -> Team:
        """Return the team, or raise NotTeamMemberException if user_id is not on it."""
        team = self.get(team_id)
        if not team.has_member(user_id):
            raise NotTeamMemberException(team_id, user_id)
        return team

    def create(self, payload: TeamCreate) -> Team:
        row = self.team_repo.create(
            name=payload.name,
            members=_member_dicts(payload.members),
            leader_id=payload.leader_id,
        )
        team = Team(**row)
        logger.info("team_created", team_id=str(team.id), members=len(team.members))
        return team

    def update(self, team_id: UUID, payload: TeamUpdate) -> Team:
        """
        Rename a team and/or hand leadership to another member.

        Raises:
            EntityNotFoundException: team does not exist
            LeaderNotMemberException: new leader is not a member
        """
        team, version = self._load(team_id)
        if payload.leader_id is not None and not team.has_member(payload.leader_id):
            raise LeaderNotMemberException(team_id, payload.leader_id)
        if payload.name is None and payload.leader_id is None:
            return team

        self._write(team_id, version, name=payload.name, leader_id=payload.leader_id)
        logger.info("team_updated", team_id=str(team_id))
        return self.get(team_id)

    def add_member(self, team_id: UUID, member: TeamMember) -> Team:
        """
        Raises:
            EntityNotFoundException: team does not exist
            DuplicateEntityException: id or email already on the team
        """
        team, version = self._load(team_id)
        for existing in team.members:
            if existing.id == member.id or existing.email == member.email:
                raise DuplicateEntityException(f"Member {member.id} is already on team {team_id}")

        self._write(team_id, version, members=_member_dicts(team.members + [member]))
        logger.info("team_member_added", team_id=str(team_id), member_id=str(member.id))
        return self.get(team_id)

    def remove_member(self, team_id: UUID, member_id: UUID) -> Team:
        """
        Raises:
            EntityNotFoundException: team or member does not exist
            LeaderNotMemberException: member is the leader
        """
        team, version = self._load(team_id)
        if not team.has_member(member_id):
            raise EntityNotFoundException("Member", member_id)
        if team.leader_id == member_id:
            raise LeaderNotMemberException(team_id, member_id)

        remaining = [m for m in team.members if m.id != member_id]
        self._write(team_id, version, members=_member_dicts(remaining))
        logger.info("team_member_removed", team_id=str(team_id), member_id=str(member_id))
        return self.get(team_id)

    def _load(self, team_id: UUID) -> Tuple[Team, int]:
        row = self.team_repo.get_by_id(team_id)
        if row is None:
            raise EntityNotFoundException("Team", team_id)
        return Team(**row), row["version"]

    def _write(self, team_id: UUID, version: int, **fields: Any) -> None:
        if not self.team_repo.update_if_version(team_id, version, **fields):
            logger.warning("team_write_conflict", team_id=str(team_id), version=version)
            raise ConcurrentModificationException("Team", team_id)
