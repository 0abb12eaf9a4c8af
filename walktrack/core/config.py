from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Walk Tracking API"
    LOG_LEVEL: str = "INFO"

    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "walktrack"
    DB_PASSWORD: str = ""
    DB_NAME: str = "walktrack"
    # 전체 URL 지정 시 DB_* 값보다 우선 (예: sqlite:///./walktrack.db)
    DB_URL: Optional[str] = None

    # 동시 update 충돌(version 불일치) 시 재적용 횟수
    TRACKING_UPDATE_MAX_RETRIES: int = 3

    # 강아지 표시 정보 캐시
    DOG_CACHE_TTL_SECONDS: float = 60.0
    DOG_CACHE_MAX_SIZE: int = 256
    DOG_CACHE_EVICTION: str = "lru"

    class Config:
        env_file = ".env"     # 프로젝트 루트에 있는 .env 자동 로딩

    @property
    def DATABASE_URL(self) -> str:
        """SQLAlchemy에서 사용할 연결 URL 생성"""
        if self.DB_URL:
            return self.DB_URL
        return (
            f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

# settings 객체를 import하면 바로 사용할 수 있음
settings = Settings()
