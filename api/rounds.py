"""
Round API Endpoints

重點：
1. nextround 不是冪等的：結果不明時不要盲目重試
2. vote / reveal 冪等，可以安全重試
3. 所有業務邏輯集中在 RoundManager / VoteLedger
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas import RoomRef, VoteSubmit, RoundRef, EmptyResponse
from core.round_manager import RoundManager
from core.vote_ledger import VoteLedger

router = APIRouter(tags=["rounds"])


@router.post("/nextround", response_model=EmptyResponse)
def next_round(data: RoomRef, db: Session = Depends(get_db)):
    """
    開始下一回合（關閉目前回合 + 開新回合）
    """
    RoundManager.next_round(db, data.room_id)
    return EmptyResponse()


@router.post("/vote", response_model=EmptyResponse)
def cast_vote(data: VoteSubmit, db: Session = Depends(get_db)):
    """
    投票到使用者所在房間的目前回合

    重複投票會覆蓋舊值；回合公布後仍會記錄
    """
    VoteLedger.cast_vote(db, data.user_id, data.vote_value)
    return EmptyResponse()


@router.post("/reveal", response_model=EmptyResponse)
def reveal_round(data: RoundRef, db: Session = Depends(get_db)):
    """公布回合（冪等）"""
    VoteLedger.reveal_round(db, data.round_id)
    return EmptyResponse()
