import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from walktrack.core.config import settings

logger = logging.getLogger(__name__)

# DB_URL 우선, 없으면 DB_* 로 조립한 MySQL URL
DATABASE_URL = settings.DATABASE_URL


def _connect_args(url: str) -> dict:
    # SQLite는 요청 스레드(threadpool)가 달라도 같은 연결을 쓸 수 있어야 함
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    DATABASE_URL,
    connect_args=_connect_args(DATABASE_URL),
    pool_pre_ping=True,
    echo=False
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

logger.debug("Database engine ready (%s)", engine.url.render_as_string(hide_password=True))


def get_db():
    """요청당 세션 1개 (walk 행 갱신은 version_id로 충돌 감지)"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
