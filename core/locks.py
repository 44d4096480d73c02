"""
並發控制工具

提供 Database-level 的鎖定機制，防止競態條件（Race Condition）

主要使用 SELECT ... FOR UPDATE 來實現悲觀鎖（Pessimistic Locking）。
PostgreSQL / MySQL 會真正鎖住該列；SQLite 不支援 FOR UPDATE，
會忽略這個子句，改由 SQLite 本身「同時只有一個 writer」來序列化寫入。
"""
from sqlalchemy.orm import Session, Query

from models import Room, Round, User


def with_room_lock(room_id: int, db: Session) -> Query:
    """
    鎖定一個 Room（行級鎖）

    使用場景：
    - 開新回合時（next_round），確保同一房間的 round_number 計算被序列化

    範例：
        room = with_room_lock(room_id, db).first()
        if not room:
            raise RoomNotFound(room_id)

    參數：
        room_id: Room 的 ID
        db: SQLAlchemy Session

    返回：
        Query object（需要呼叫 .first() 或 .one() 來取得結果）

    注意：
        - nowait=False 表示如果鎖被佔用，會等待
        - 必須在 transaction 內使用（確保有 commit 或 rollback）
    """
    return db.query(Room).filter(
        Room.room_id == room_id
    ).with_for_update(nowait=False)


def with_round_lock(round_id: int, db: Session) -> Query:
    """
    鎖定一個 Round（行級鎖）

    使用場景：
    - 公布回合（reveal_round）
    """
    return db.query(Round).filter(
        Round.round_id == round_id
    ).with_for_update(nowait=False)


def with_user_lock(user_id: int, db: Session) -> Query:
    """
    鎖定一個 User（行級鎖）

    使用場景：
    - 修改個人資料 / 角色時，確保欄位更新與刪除投票之間沒有其他請求插入新投票
    """
    return db.query(User).filter(
        User.user_id == user_id
    ).with_for_update(nowait=False)
