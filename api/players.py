"""
Player API Endpoints

職責：
1. 加入房間
2. 修改個人資料
3. 變更角色

錯誤由 api/error_handlers.py 統一轉成 {"error": ...}
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas import RoomJoin, UserIdResponse, ProfileEdit, RoleChange, EmptyResponse
from core.membership_manager import MembershipManager

router = APIRouter(tags=["players"])


@router.post("/joinroom", response_model=UserIdResponse)
def join_room(data: RoomJoin, db: Session = Depends(get_db)):
    """
    加入房間

    同一個 identity 可以重複加入，每次都會建立新的 user
    """
    user = MembershipManager.join_room(
        db,
        data.room_id,
        data.user_name,
        data.avatar_url,
        data.role,
        identity=data.identity
    )
    return UserIdResponse(user_id=user.user_id)


@router.post("/editprofile", response_model=EmptyResponse)
def edit_profile(data: ProfileEdit, db: Session = Depends(get_db)):
    """
    修改個人資料（role / user_name / avatar_url 任選）

    有帶 role 時會清除該使用者的所有投票
    """
    MembershipManager.edit_profile(
        db,
        data.user_id,
        role=data.role,
        username=data.user_name,
        avatar_url=data.avatar_url
    )
    return EmptyResponse()


@router.post("/changerole", response_model=EmptyResponse)
def change_role(data: RoleChange, db: Session = Depends(get_db)):
    """變更角色並清除該使用者的所有投票"""
    MembershipManager.change_role(db, data.user_id, data.role)
    return EmptyResponse()
