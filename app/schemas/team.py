"""Schemas for teams, memberships and invitations."""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime
import uuid

from app.models.team import TeamRole
from app.schemas.common import ORMModel
from app.schemas.user import UserSummary


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Dhaka Sales"])
    timezone: Optional[str] = Field(None, max_length=64, examples=["Asia/Dhaka"])
    language: Optional[str] = Field(None, max_length=16, examples=["en"])

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    timezone: Optional[str] = Field(None, max_length=64)
    language: Optional[str] = Field(None, max_length=16)


class TeamMemberAdd(BaseModel):
    email: EmailStr
    role: TeamRole = TeamRole.MEMBER

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()


class TeamMemberRoleUpdate(BaseModel):
    role: TeamRole

    @field_validator('role')
    @classmethod
    def validate_role(cls, v):
        """Editors are only assigned when adding a member."""
        if v not in (TeamRole.MEMBER, TeamRole.ADMIN):
            raise ValueError("Role must be member or admin")
        return v


class TeamInvitationCreate(BaseModel):
    email: EmailStr
    role: TeamRole = TeamRole.MEMBER

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()

    @field_validator('role')
    @classmethod
    def validate_role(cls, v):
        if v not in (TeamRole.MEMBER, TeamRole.ADMIN):
            raise ValueError("Role must be member or admin")
        return v


class TeamMemberResponse(ORMModel):
    id: uuid.UUID
    user: UserSummary
    role: str
    created_at: datetime


class TeamInvitationResponse(ORMModel):
    id: uuid.UUID
    team_id: uuid.UUID
    email: str
    role: str
    created_at: datetime


class TeamResponse(ORMModel):
    id: uuid.UUID
    name: str
    personal_team: bool
    timezone: Optional[str] = None
    language: Optional[str] = None
    owner: UserSummary
    created_at: datetime
    updated_at: datetime


class TeamDetailResponse(TeamResponse):
    memberships: List[TeamMemberResponse] = Field(default_factory=list)
    invitations: List[TeamInvitationResponse] = Field(default_factory=list)
