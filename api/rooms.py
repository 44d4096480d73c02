"""
Room API Endpoints

職責：
1. 建立房間（含建立者與 Round 1）
2. 查詢房間狀態（目前回合 + 每位成員的投票）
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas import RoomCreate, RoomCreateResponse, RoomRef, RoomStatusResponse
from core.room_manager import RoomManager
from services.status_service import fetch_status

router = APIRouter(tags=["rooms"])


@router.post("/createroom", response_model=RoomCreateResponse)
def create_room(data: RoomCreate, db: Session = Depends(get_db)):
    """
    建立房間

    返回：
        - room_id: 新房間 ID
        - user_id: 建立者的 user ID
    """
    room, creator = RoomManager.create_room(
        db,
        data.room_name,
        data.created_by_identity,
        data.user_name,
        data.avatar_url
    )
    return RoomCreateResponse(room_id=room.room_id, user_id=creator.user_id)


@router.post("/votestatus", response_model=RoomStatusResponse)
def vote_status(data: RoomRef, db: Session = Depends(get_db)):
    """
    取得房間狀態

    沒投票的成員 vote 為 -1
    """
    return fetch_status(db, data.room_id)
