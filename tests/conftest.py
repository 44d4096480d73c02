import os

# main.py 在 import 時讀取設定，測試不要碰到真正的資料庫檔案
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from database import Base, build_session_factory, get_db
from main import app


# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. 每個測試一個新的 sqlite:///:memory: engine，ID 從 1 開始
# 2. StaticPool：所有 session 共用同一條連線，看得到同一個資料庫
# 3. check_same_thread=False：TestClient 會在其他執行緒執行 endpoint
@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session_factory")
def session_factory_fixture(engine):
    return build_session_factory(engine)


@pytest.fixture(name="session")
def session_fixture(session_factory):
    """提供測試用的 Database Session"""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(name="client")
def client_fixture(session_factory):
    """
    提供 TestClient，get_db 改用測試 engine

    Override 必須在建立 TestClient 之前設定
    """
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
