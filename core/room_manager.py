"""
Room Manager：管理 Room 的建立與查詢

職責：
1. 建立 Room（含第一位成員與 Round 1）
2. 查詢 Room 資訊

原則：
- 單一職責：只管 Room，不管之後的回合推進
- Room 建立後不可修改，沒有刪除操作
- 房間名稱不需唯一，Room 只透過自動產生的 room_id 定位
"""
from sqlalchemy.orm import Session
from typing import Optional, Tuple
import logging

from models import Room, User, Round, Role, RoundStatus
from core.exceptions import RoomNotFound, ValidationError
from database import transactional

logger = logging.getLogger(__name__)


class RoomManager:
    """Room 生命週期管理器"""

    @staticmethod
    @transactional
    def create_room(
        db: Session,
        room_name: str,
        creator_identity: Optional[str],
        creator_name: str,
        creator_avatar: Optional[str]
    ) -> Tuple[Room, User]:
        """
        建立新房間（含建立者與 Round 1）

        流程：
        1. 驗證輸入
        2. 建立 Room
        3. 建立者以 estimator 角色成為第一位成員
        4. 建立 Round 1（status=open）

        參數：
            db: SQLAlchemy Session
            room_name: 房間名稱
            creator_identity: 建立者的外部身分（可為 None）
            creator_name: 建立者顯示名稱
            creator_avatar: 建立者頭像 URL

        返回：
            (Room, 建立者 User) tuple

        異常：
            ValidationError: room_name 或 creator_name 為空

        注意：
            - 使用 @transactional，三筆寫入一起 commit 或一起 rollback，
              不會留下只有一半的房間
        """
        # 1. 驗證輸入
        if not room_name:
            raise ValidationError("room_name is required")
        if not creator_name:
            raise ValidationError("user_name is required")

        # 2. 建立 Room
        room = Room(room_name=room_name, created_by=creator_identity)
        db.add(room)
        db.flush()  # 取得 room.room_id

        # 3. 建立第一位成員
        creator = User(
            room_id=room.room_id,
            username=creator_name,
            identity=creator_identity,
            avatar_url=creator_avatar,
            role=Role.ESTIMATOR
        )
        db.add(creator)

        # 4. 建立 Round 1
        first_round = Round(
            room_id=room.room_id,
            round_number=1,
            status=RoundStatus.OPEN
        )
        db.add(first_round)
        db.flush()  # 取得 creator.user_id

        logger.info(
            f"Created room {room.room_id} ({room_name!r}) with creator user {creator.user_id}"
        )

        # transactional decorator 會自動 commit
        return room, creator

    @staticmethod
    def get_room(db: Session, room_id: int) -> Room:
        """
        透過 ID 取得 Room

        異常：
            RoomNotFound: Room 不存在
        """
        room = db.query(Room).filter(Room.room_id == room_id).first()
        if not room:
            raise RoomNotFound(room_id)
        return room
