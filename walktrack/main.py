from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from walktrack.core.config import settings
from walktrack.core.error_handler import validation_exception_handler
from walktrack.core.logging_config import setup_logging
from walktrack import models  # noqa: F401  전체 테이블 메타데이터 등록 (FK 대상 포함)
from walktrack.domains.walk.router.tracking_router import router as walk_tracking_router
from walktrack.domains.walk.router.group_walk_router import router as group_walk_router
from walktrack.domains.walk.router.walk_router import router as walk_router
from walktrack.domains.dogs.router.dog_router import router as dog_router


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        description="Backend API for dog walk booking and live walk tracking",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        openapi_tags=[
            {"name": "Tracking", "description": "산책 위치 트래킹 API (pickup/start/update/end/dropoff)"},
            {"name": "Group Walk", "description": "그룹 산책 세션 조회 API"},
            {"name": "Walk", "description": "산책 예약/조회/상태 변경 API"},
            {"name": "Dog", "description": "강아지/평가 API"},
        ]
    )

    # 422 → 400 공통 에러 응답
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # 🟢 라우터 등록 (/api/walks/{walk_id} 보다 고정 경로를 먼저 등록)
    app.include_router(walk_tracking_router)
    app.include_router(group_walk_router)
    app.include_router(walk_router)

    app.include_router(dog_router)


    @app.get("/")
    def root():
        return {"message": "🐾 Walk Tracking API is running successfully"}

    return app


app = create_app()

# 🟢 로컬 실행용 entry point
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "walktrack.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
