from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MembershipField(str, Enum):
    """The two independent set-valued fields on a group"""
    USERS = "users"
    MEMBERS = "members"


class Group(BaseModel):
    """A group as read from the groups table or from the gateway's JSON.

    ``users`` and ``members`` are always lists, whatever the stored shape.
    """
    id: str
    name: str
    users: List[str] = Field(default_factory=list)
    members: List[str] = Field(default_factory=list)
    created: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("users", "members", mode="before")
    @classmethod
    def _as_list(cls, value: Any) -> List[str]:
        if not isinstance(value, list):
            return []
        return [str(item) for item in value if item is not None]

    @field_validator("created", mode="before")
    @classmethod
    def _created_as_text(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat()
        return value


class AddMemberRequest(BaseModel):
    """Request bodies pass values through unchecked; bad input fails in the database"""
    group_id: Optional[Any] = Field(None, alias="groupId")
    new_member: Optional[Any] = Field(None, alias="newMember")

    model_config = ConfigDict(populate_by_name=True)


class MemberRequest(BaseModel):
    """Body for the permcloud and deletemember2 endpoints"""
    group_id: Optional[Any] = Field(None, alias="groupId")
    member: Optional[Any] = None

    model_config = ConfigDict(populate_by_name=True)


class DeleteUserRequest(BaseModel):
    group_id: Optional[Any] = Field(None, alias="groupId")
    user: Optional[Any] = None

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str = "Internal Server Error"
    details: str
