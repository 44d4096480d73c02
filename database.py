from typing import Optional, List

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache, wraps
import logging

from core.exceptions import PlanningPokerException, StorageError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    database_url: str = "sqlite:///./planning_poker.db"
    # 例如 "SERIALIZABLE"；None 表示沿用資料庫預設
    database_isolation_level: Optional[str] = None
    sql_echo: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]


@lru_cache()
def get_settings():
    return Settings()


Base = declarative_base()


def build_engine(settings: Settings) -> Engine:
    """
    建立 Engine（服務啟動時呼叫一次，關閉時 dispose）

    SQLite 需要特殊設定：connect_args={"check_same_thread": False}
    這允許多執行緒存取同一個 SQLite 連線（FastAPI 的多執行緒環境需要）
    """
    kwargs = {}
    if settings.database_isolation_level:
        kwargs["isolation_level"] = settings.database_isolation_level

    return create_engine(
        settings.database_url,
        echo=settings.sql_echo,
        connect_args={"check_same_thread": False} if settings.database_url.startswith("sqlite") else {},
        pool_pre_ping=True,
        **kwargs
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    """
    FastAPI dependency：提供 Database Session

    Session factory 在 lifespan 中建立並放在 app.state 上，
    使用 yield 確保 session 在請求結束後會被關閉
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def transactional(func):
    """
    Transaction decorator：確保資料庫操作的原子性

    使用方式：
        @transactional
        def some_business_logic(db: Session, ...):
            # 所有 DB 操作都在一個 transaction 內
            room = Room(...)
            db.add(room)
            # 不需要手動 commit，decorator 會處理

    如果函式內發生異常：
        - 自動 rollback
        - SQLAlchemy 的錯誤會包成 StorageError 重新拋出
        - 其他異常（例如 NotFoundError）原樣重新拋出

    注意：
        - 第一個參數必須是 db: Session
        - 不要在函式內手動 commit（decorator 會處理）
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        # 找出 db session（可能在 args 或 kwargs）
        db = None
        if args and isinstance(args[0], Session):
            db = args[0]
        elif 'db' in kwargs:
            db = kwargs['db']

        if db is None:
            raise ValueError(
                f"@transactional requires 'db: Session' as first argument, "
                f"but got args={args}, kwargs={kwargs}"
            )

        try:
            result = func(*args, **kwargs)
            db.commit()
            return result
        except SQLAlchemyError as e:
            logger.error(f"Transaction failed in {func.__name__}: {e}", exc_info=True)
            db.rollback()
            raise StorageError(f"{func.__name__} failed: {e}") from e
        except PlanningPokerException as e:
            logger.warning(f"Transaction aborted in {func.__name__}: {e}")
            db.rollback()
            raise
        except Exception as e:
            logger.error(f"Transaction failed in {func.__name__}: {e}", exc_info=True)
            db.rollback()
            raise

    return wrapper
