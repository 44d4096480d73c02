"""
Request / Response schemas

欄位名稱沿用舊版前端：
- created_by_openid / open_id 仍可使用，對應 created_by_identity / identity
"""
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field

from models import Role, RoundStatus


# ============ Room ============

class RoomCreate(BaseModel):
    room_name: str = Field(..., min_length=1)
    created_by_identity: Optional[str] = Field(
        None, validation_alias=AliasChoices("created_by_identity", "created_by_openid")
    )
    user_name: str = Field(..., min_length=1)
    avatar_url: Optional[str] = None


class RoomCreateResponse(BaseModel):
    room_id: int
    user_id: int


class RoomRef(BaseModel):
    room_id: int


# ============ User ============

class RoomJoin(BaseModel):
    room_id: int
    user_name: str = Field(..., min_length=1)
    avatar_url: Optional[str] = None
    role: Role = Role.ESTIMATOR
    identity: Optional[str] = Field(
        None, validation_alias=AliasChoices("identity", "open_id")
    )


class UserIdResponse(BaseModel):
    user_id: int


class ProfileEdit(BaseModel):
    user_id: int
    role: Optional[Role] = None
    user_name: Optional[str] = Field(None, min_length=1)
    avatar_url: Optional[str] = None


class RoleChange(BaseModel):
    user_id: int
    role: Role


# ============ Round / Vote ============

class VoteSubmit(BaseModel):
    user_id: int
    vote_value: Any


class RoundRef(BaseModel):
    round_id: int


class EmptyResponse(BaseModel):
    pass


# ============ Status ============

class RoomDescriptor(BaseModel):
    room_id: int
    room_name: str
    current_round_name: str
    current_round_id: int
    current_round_status: RoundStatus


class UserStatus(BaseModel):
    user_id: int
    user_name: str
    avatar_url: Optional[str] = None
    role: int
    vote: Any


class RoomStatusResponse(BaseModel):
    room: RoomDescriptor
    users: List[UserStatus]
