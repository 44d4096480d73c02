"""
資料模型

四張表：rooms / users / rounds / votes
- Room 建立後不可修改，也沒有刪除操作
- Round 以 (room_id, round_number) 唯一，round_number 從 1 開始遞增
- Vote 以 (user_id, round_id) 為複合主鍵，每人每回合最多一票
"""
import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    JSON,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from database import Base


# 沒有投票時 fetch_status 回傳的值
NO_VOTE = -1


def _utcnow():
    return datetime.now(timezone.utc)


class RoundStatus(str, enum.Enum):
    OPEN = "open"
    REVEALED = "revealed"


class Role(enum.IntEnum):
    ESTIMATOR = 1
    OBSERVER = 2


class Room(Base):
    __tablename__ = "rooms"

    room_id = Column(Integer, primary_key=True, autoincrement=True)
    room_name = Column(String(255), nullable=False)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    users = relationship("User", back_populates="room", order_by="User.user_id")
    rounds = relationship("Round", back_populates="room", order_by="Round.round_number")


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False)
    identity = Column(String(255), nullable=True, index=True)
    avatar_url = Column(String(1024), nullable=True)
    role = Column(Integer, nullable=False, default=Role.ESTIMATOR)
    room_id = Column(Integer, ForeignKey("rooms.room_id"), nullable=False, index=True)

    room = relationship("Room", back_populates="users")


class Round(Base):
    __tablename__ = "rounds"
    __table_args__ = (
        UniqueConstraint("room_id", "round_number", name="uq_round_room_number"),
    )

    round_id = Column(Integer, primary_key=True, autoincrement=True)
    room_id = Column(Integer, ForeignKey("rooms.room_id"), nullable=False, index=True)
    round_number = Column(Integer, nullable=False)
    status = Column(
        Enum(RoundStatus, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
        default=RoundStatus.OPEN,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    room = relationship("Room", back_populates="rounds")


class Vote(Base):
    __tablename__ = "votes"

    user_id = Column(Integer, ForeignKey("users.user_id"), primary_key=True)
    round_id = Column(Integer, ForeignKey("rounds.round_id"), primary_key=True)
    vote_value = Column(JSON, nullable=False)
