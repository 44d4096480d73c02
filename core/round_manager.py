"""
Round Manager：管理回合的推進

職責：
1. 開新回合（關閉目前回合 + 計算下一個 round_number + 建立新回合）
2. 查詢目前回合 / 所有回合

不變量：
- 每個房間同時只有一個 open 的回合，也就是 round_number 最大的那一個
- round_number 從 1 開始，每個房間內嚴格遞增，不跳號、不重複

並發：
- next_round 先鎖住 Room（SELECT ... FOR UPDATE），同一房間的呼叫會排隊，
  不會兩個請求讀到同一個 MAX(round_number)
- (room_id, round_number) 另有 unique constraint，
  萬一仍有競態，會變成 StorageError 而不是重複的回合
- 失敗時整個 transaction rollback，舊回合保持 open，不會自動重試
"""
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from models import Round, RoundStatus
from core.locks import with_room_lock
from core.exceptions import RoomNotFound
from database import transactional

logger = logging.getLogger(__name__)


class RoundManager:
    """Round 推進管理器"""

    @staticmethod
    @transactional
    def next_round(db: Session, room_id: int) -> Round:
        """
        關閉目前回合並開啟下一回合

        流程（同一個 transaction）：
        1. 鎖定 Room
        2. 把房間內 open 的回合改成 revealed
        3. 計算 next round_number = MAX(round_number) + 1
        4. 建立新回合（status=open）

        參數：
            db: SQLAlchemy Session
            room_id: Room ID

        返回：
            新建立的 Round

        異常：
            RoomNotFound: Room 不存在
            StorageError: 資料庫寫入失敗（整個操作 rollback）

        注意：
            呼叫者若在結果不明時重試，需先確認上一次是否已成功，
            否則會多開一個回合
        """
        # 1. 取得並鎖定 Room
        room = with_room_lock(room_id, db).first()
        if not room:
            raise RoomNotFound(room_id)

        # 2. 關閉目前回合
        closed = db.query(Round).filter(
            Round.room_id == room_id,
            Round.status == RoundStatus.OPEN
        ).update(
            {Round.status: RoundStatus.REVEALED},
            synchronize_session="fetch"
        )

        # 3. 計算下一個 round_number
        max_number = db.query(func.max(Round.round_number)).filter(
            Round.room_id == room_id
        ).scalar()
        next_number = (max_number or 0) + 1

        # 4. 建立新回合
        new_round = Round(
            room_id=room_id,
            round_number=next_number,
            status=RoundStatus.OPEN
        )
        db.add(new_round)
        db.flush()

        logger.info(
            f"Room {room_id}: closed {closed} open round(s), "
            f"opened round {next_number} (round_id={new_round.round_id})"
        )
        return new_round

    @staticmethod
    def get_current_round(db: Session, room_id: int) -> Optional[Round]:
        """
        取得房間目前的回合（round_number 最大的那一個）

        返回：
            Round，房間沒有任何回合時返回 None
        """
        return db.query(Round).filter(
            Round.room_id == room_id
        ).order_by(Round.round_number.desc()).first()

    @staticmethod
    def list_rounds(db: Session, room_id: int) -> List[Round]:
        """依 round_number 列出房間內所有回合"""
        return db.query(Round).filter(
            Round.room_id == room_id
        ).order_by(Round.round_number).all()
