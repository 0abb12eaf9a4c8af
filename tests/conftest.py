"""
pytest 설정

인메모리 SQLite(StaticPool) 하나를 모든 세션이 공유하도록 하고
get_db 의존성을 테스트용 세션으로 교체합니다.
"""
import os

# walktrack import 전에 설정되어야 MySQL 드라이버를 찾지 않음
os.environ.setdefault("DB_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from walktrack.db import get_db
from walktrack.domains.dogs.repository.dog_repository import dog_display_cache
from walktrack.main import app
from walktrack.models import Base
from walktrack.models.assessment import Assessment, AssessmentStatus, AssessmentResult
from walktrack.models.dog import Dog, DogSize
from walktrack.models.owner import Owner
from walktrack.models.user import User, UserRole
from walktrack.models.walk import Walk, WalkStatus, TimeSlot
from walktrack.models.walker import Walker

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database():
    """테스트마다 테이블을 새로 만들고 캐시를 비움"""
    Base.metadata.create_all(bind=engine)
    dog_display_cache.clear()
    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    """FastAPI 테스트 클라이언트"""
    return TestClient(app)


@pytest.fixture
def seed(db_session):
    """
    워커 1명, 보호자 1명, 강아지 3마리를 만들고
    Luna/Bori는 평가 승인, Coco는 평가 미완료 상태로 둡니다.
    """
    owner_user = User(name="Owner", email="owner@example.com", role=UserRole.OWNER)
    walker_user = User(name="Walker", email="walker@example.com", role=UserRole.WALKER)
    db_session.add_all([owner_user, walker_user])
    db_session.flush()

    owner = Owner(user_id=owner_user.user_id, address="서울시 마포구")
    walker = Walker(user_id=walker_user.user_id, bio="주말 산책 전문", max_dogs=3)
    db_session.add_all([owner, walker])
    db_session.flush()

    luna = Dog(owner_id=owner.owner_id, name="Luna", breed="Poodle", size=DogSize.SMALL,
               image_url="https://img.example.com/luna.png")
    bori = Dog(owner_id=owner.owner_id, name="Bori", breed="Jindo", size=DogSize.MEDIUM)
    coco = Dog(owner_id=owner.owner_id, name="Coco", breed="Beagle", size=DogSize.MEDIUM)
    db_session.add_all([luna, bori, coco])
    db_session.flush()

    for dog in (luna, bori):
        db_session.add(Assessment(
            dog_id=dog.dog_id,
            walker_id=walker.walker_id,
            status=AssessmentStatus.COMPLETED,
            result=AssessmentResult.APPROVED,
        ))
    db_session.add(Assessment(dog_id=coco.dog_id, status=AssessmentStatus.PENDING))
    db_session.commit()

    return {
        "walker_id": walker.walker_id,
        "owner_id": owner.owner_id,
        "luna_id": luna.dog_id,
        "bori_id": bori.dog_id,
        "coco_id": coco.dog_id,
    }


@pytest.fixture
def make_walk(db_session, seed):
    """예정 산책 생성 헬퍼"""
    def _make(dog_id=None, date="2025-01-01", start_time="09:00", time_slot=TimeSlot.AM,
              status=WalkStatus.SCHEDULED, walker_id=None, **kwargs):
        walk = Walk(
            dog_id=dog_id or seed["luna_id"],
            walker_id=walker_id or seed["walker_id"],
            date=date,
            start_time=start_time,
            time_slot=time_slot,
            duration=60,
            status=status,
            route_coordinates=[],
            is_tracking_active=False,
            **kwargs,
        )
        db_session.add(walk)
        db_session.commit()
        return walk.walk_id

    return _make


@pytest.fixture
def walk_id(make_walk):
    return make_walk()


