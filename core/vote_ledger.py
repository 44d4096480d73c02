"""
Vote Ledger：投票與公布回合

職責：
1. 投票：每位使用者在每個回合最多一票，重複投票會覆蓋舊值（upsert）
2. 公布回合：open -> revealed

設計決定：
- 回合公布後仍可投票（late vote 會被記錄，不會被拒絕）
- 公布回合不刪除任何投票，歷史資料保留
- 公布不產生任何統計結果，統計交給前端
"""
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session
import logging

from models import Round, RoundStatus, Vote
from core.locks import with_round_lock, with_user_lock
from core.exceptions import RoundNotFound, StorageError, UserNotFound, ValidationError
from database import transactional

logger = logging.getLogger(__name__)


def _upsert_vote(db: Session, user_id: int, round_id: int, vote_value: Any) -> None:
    """
    以資料庫原生 upsert 寫入投票

    - SQLite / PostgreSQL: INSERT ... ON CONFLICT DO UPDATE
    - MySQL: INSERT ... ON DUPLICATE KEY UPDATE
    - 其他資料庫不支援，拋出 StorageError
    """
    dialect = db.get_bind().dialect.name
    values = {"user_id": user_id, "round_id": round_id, "vote_value": vote_value}

    if dialect in ("sqlite", "postgresql"):
        insert = sqlite_insert if dialect == "sqlite" else pg_insert
        stmt = insert(Vote).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Vote.user_id, Vote.round_id],
            set_={"vote_value": stmt.excluded.vote_value}
        )
        db.execute(stmt)
    elif dialect in ("mysql", "mariadb"):
        stmt = mysql_insert(Vote).values(**values)
        stmt = stmt.on_duplicate_key_update(vote_value=stmt.inserted.vote_value)
        db.execute(stmt)
    else:
        raise StorageError(f"Vote upsert is not supported on dialect {dialect!r}")


class VoteLedger:
    """投票管理器"""

    @staticmethod
    @transactional
    def cast_vote(db: Session, user_id: int, vote_value: Any) -> Vote:
        """
        投票（冪等 upsert）

        流程：
        1. 找到使用者（鎖定，避免和角色變更交錯）
        2. 找到使用者所在房間的目前回合（round_number 最大）
        3. upsert (user_id, round_id) 的投票

        參數：
            db: SQLAlchemy Session
            user_id: 使用者 ID
            vote_value: 任意可序列化的值（例如 "5"、13、"?"）

        返回：
            寫入後的 Vote

        異常：
            ValidationError: vote_value 為 None
            UserNotFound: 使用者不存在
            RoundNotFound: 房間內沒有任何回合
        """
        if vote_value is None:
            raise ValidationError("vote_value is required")

        # 1. 找到使用者
        user = with_user_lock(user_id, db).first()
        if not user:
            raise UserNotFound(user_id)

        # 2. 找到目前回合
        current_round = db.execute(
            select(Round)
            .where(Round.room_id == user.room_id)
            .order_by(Round.round_number.desc())
            .limit(1)
        ).scalar_one_or_none()
        if not current_round:
            raise RoundNotFound(room_id=user.room_id)

        if current_round.status == RoundStatus.REVEALED:
            logger.info(
                f"Late vote from user {user_id} on revealed round {current_round.round_id}"
            )

        # 3. upsert
        _upsert_vote(db, user_id, current_round.round_id, vote_value)

        vote = db.get(Vote, (user_id, current_round.round_id), populate_existing=True)
        logger.info(f"User {user_id} voted in round {current_round.round_id}")
        return vote

    @staticmethod
    @transactional
    def reveal_round(db: Session, round_id: int) -> Round:
        """
        公布回合（open -> revealed）

        冪等：已經 revealed 的回合再呼叫一次直接成功

        異常：
            RoundNotFound: 回合不存在
        """
        round_obj = with_round_lock(round_id, db).first()
        if not round_obj:
            raise RoundNotFound(round_id)

        if round_obj.status == RoundStatus.REVEALED:
            logger.info(f"Round {round_id} already revealed, skipping")
            return round_obj

        round_obj.status = RoundStatus.REVEALED
        logger.info(f"Revealed round {round_id} (round_number={round_obj.round_number})")
        return round_obj
