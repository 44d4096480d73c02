from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

import models  # noqa: F401  註冊所有資料表
from database import Base, get_settings, build_engine, build_session_factory
from api import rooms, players, rounds, dispatch
from api.error_handlers import register_error_handlers

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: 建立 engine / session factory，並建立資料庫表
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    engine = build_engine(settings)
    Base.metadata.create_all(bind=engine)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    logging.getLogger(__name__).info("Database ready")
    yield
    # Shutdown: 釋放連線池
    engine.dispose()


app = FastAPI(
    title="Planning Poker API",
    description="Backend API for collaborative planning poker estimation",
    version="1.0.0",
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.get("/")
def root():
    return {"message": "Planning Poker API", "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}


# Include routers（dispatch 必須最後，負責未知操作）
app.include_router(rooms.router)
app.include_router(players.router)
app.include_router(rounds.router)
app.include_router(dispatch.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
