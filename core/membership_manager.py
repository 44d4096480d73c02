"""
Membership Manager：成員加入與個人資料修改

職責：
1. 加入房間
2. 修改個人資料（部分欄位更新）
3. 變更角色

不變量：
- 角色變更會刪除該使用者的所有投票，和角色更新在同一個 transaction 內
- 只要有更新角色就刪票，不比較新舊值是否相同

設計決定：
- 加入房間不檢查重複：同一個外部身分加入兩次會產生兩個 user
"""
from typing import Optional

from sqlalchemy import delete, update
from sqlalchemy.orm import Session
import logging

from models import User, Vote, Role
from core.locks import with_user_lock
from core.exceptions import UserNotFound, ValidationError
from core.room_manager import RoomManager
from services.profile_fields import build_profile_changes, touches_role
from database import transactional

logger = logging.getLogger(__name__)


def _delete_votes(db: Session, user_id: int) -> int:
    result = db.execute(delete(Vote).where(Vote.user_id == user_id))
    return result.rowcount


class MembershipManager:
    """成員與個人資料管理器"""

    @staticmethod
    @transactional
    def join_room(
        db: Session,
        room_id: int,
        username: str,
        avatar_url: Optional[str],
        role: int,
        identity: Optional[str] = None
    ) -> User:
        """
        加入房間

        參數：
            db: SQLAlchemy Session
            room_id: Room ID
            username: 顯示名稱
            avatar_url: 頭像 URL
            role: 角色（1=estimator, 2=observer）
            identity: 外部身分（可選）

        返回：
            新建立的 User

        異常：
            ValidationError: username 為空或 role 不合法
            RoomNotFound: Room 不存在
        """
        if not username:
            raise ValidationError("user_name is required")
        try:
            role = Role(role)
        except ValueError:
            raise ValidationError(f"Invalid role: {role}")

        RoomManager.get_room(db, room_id)

        user = User(
            room_id=room_id,
            username=username,
            identity=identity,
            avatar_url=avatar_url,
            role=int(role)
        )
        db.add(user)
        db.flush()

        logger.info(f"User {user.user_id} ({username}) joined room {room_id} as {role.name}")
        return user

    @staticmethod
    @transactional
    def edit_profile(
        db: Session,
        user_id: int,
        role: Optional[int] = None,
        username: Optional[str] = None,
        avatar_url: Optional[str] = None
    ) -> User:
        """
        修改個人資料（只寫入有提供的欄位）

        流程：
        1. 組出 (column, value) 列表，沒有任何欄位就直接失敗
        2. 鎖定使用者
        3. 更新欄位
        4. 如果包含角色，刪除該使用者的所有投票

        異常：
            ValidationError: 沒有任何可更新的欄位（不會有任何寫入）
            UserNotFound: 使用者不存在
        """
        # 1. 組出變更
        try:
            changes = build_profile_changes(role=role, user_name=username, avatar_url=avatar_url)
        except ValueError:
            raise ValidationError(f"Invalid role: {role}")
        if not changes:
            raise ValidationError("No fields to update")

        # 2. 鎖定使用者
        user = with_user_lock(user_id, db).first()
        if not user:
            raise UserNotFound(user_id)

        # 3. 更新欄位
        db.execute(
            update(User)
            .where(User.user_id == user_id)
            .values({getattr(User, column): value for column, value in changes})
        )

        # 4. 角色變更時刪票
        if touches_role(changes):
            deleted = _delete_votes(db, user_id)
            logger.info(f"Role changed for user {user_id}, deleted {deleted} vote(s)")

        db.refresh(user)
        logger.info(
            f"Updated profile for user {user_id}: {', '.join(column for column, _ in changes)}"
        )
        return user

    @staticmethod
    @transactional
    def change_role(db: Session, user_id: int, role: int) -> User:
        """
        變更角色，並刪除該使用者的所有投票

        即使新角色和舊角色相同也會刪票

        異常：
            ValidationError: role 不合法
            UserNotFound: 使用者不存在
        """
        try:
            role = Role(role)
        except ValueError:
            raise ValidationError(f"Invalid role: {role}")

        user = with_user_lock(user_id, db).first()
        if not user:
            raise UserNotFound(user_id)

        user.role = int(role)
        db.flush()
        deleted = _delete_votes(db, user_id)

        logger.info(f"User {user_id} is now {role.name}, deleted {deleted} vote(s)")
        return user
