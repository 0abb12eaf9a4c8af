import logging
from datetime import datetime
from typing import Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from walktrack.domains.dogs.repository.dog_repository import DogRepository
from walktrack.domains.walk.exception import walk_error
from walktrack.domains.walk.repository.walk_repository import WalkRepository
from walktrack.models.walk import Walk, WalkStatus, TimeSlot
from walktrack.schemas.walk.walk_schema import WalkCreateRequest, WalkStatusUpdateRequest

logger = logging.getLogger(__name__)


def _valid_date(value: str) -> bool:
    try:
        datetime.strptime(value, "%Y-%m-%d")
        return True
    except (TypeError, ValueError):
        return False


def _valid_time(value: str) -> bool:
    try:
        datetime.strptime(value, "%H:%M")
        return len(value) == 5
    except (TypeError, ValueError):
        return False


def time_slot_for(start_time: str) -> TimeSlot:
    """HH:MM → 오전(AM)/오후(PM) 구분"""
    return TimeSlot.AM if int(start_time.split(":")[0]) < 12 else TimeSlot.PM


def serialize_walk(walk: Walk) -> dict:
    return {
        "walk_id": walk.walk_id,
        "dog_id": walk.dog_id,
        "walker_id": walk.walker_id,
        "date": walk.date,
        "start_time": walk.start_time,
        "time_slot": walk.time_slot.value if walk.time_slot else None,
        "duration": walk.duration,
        "status": walk.status.value if walk.status else None,
        "notes": walk.notes,
        "is_tracking_active": bool(walk.is_tracking_active),
    }


class WalkService:
    def __init__(self, db: Session):
        self.db = db
        self.walk_repo = WalkRepository(db)
        self.dog_repo = DogRepository(db)

    def _ok(self, path: str, status: int = 200, **payload):
        response_content = {
            "success": True,
            "status": status,
            **payload,
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=status, content=jsonable_encoder(response_content))

    # ============================================
    # 예약 (산책 생성)
    # ============================================
    def create_walk(self, request: Request, body: WalkCreateRequest):
        path = request.url.path

        if not _valid_date(body.date):
            return walk_error("WALK_400_1", path)
        if not _valid_time(body.start_time):
            return walk_error("WALK_400_2", path)

        if body.time_slot is None:
            time_slot = time_slot_for(body.start_time)
        else:
            try:
                time_slot = TimeSlot(body.time_slot.upper())
            except ValueError:
                return walk_error("WALK_400_3", path)
            if time_slot != time_slot_for(body.start_time):
                return walk_error("WALK_400_5", path)

        try:
            if self.dog_repo.get_by_id(body.dog_id) is None:
                return walk_error("WALK_404_2", path)
            if self.walk_repo.get_walker(body.walker_id) is None:
                return walk_error("WALK_404_3", path)

            # 평가 승인 완료된 강아지만 예약 가능
            if not self.dog_repo.has_approved_assessment(body.dog_id):
                return walk_error("WALK_409_1", path)

            walk = self.walk_repo.create_walk(
                dog_id=body.dog_id,
                walker_id=body.walker_id,
                date=body.date,
                start_time=body.start_time,
                time_slot=time_slot,
                duration=body.duration,
                status=WalkStatus.SCHEDULED,
                notes=body.notes,
                route_coordinates=[],
                is_tracking_active=False,
            )
            self.db.commit()
            self.db.refresh(walk)
        except Exception:
            self.db.rollback()
            logger.exception("Error creating walk (dog_id=%s, walker_id=%s)", body.dog_id, body.walker_id)
            return walk_error("WALK_500_1", path)

        logger.info("Walk booked (walk_id=%s, dog_id=%s, %s %s)", walk.walk_id, walk.dog_id, walk.date, walk.start_time)
        return self._ok(path, status=201, walk=serialize_walk(walk))

    # ============================================
    # 조회
    # ============================================
    def list_walks(
        self,
        request: Request,
        walker_id: Optional[int] = None,
        dog_id: Optional[int] = None,
        status: Optional[str] = None,
        date: Optional[str] = None,
    ):
        path = request.url.path

        walk_status = None
        if status is not None:
            try:
                walk_status = WalkStatus(status)
            except ValueError:
                return walk_error("WALK_400_4", path)

        if date is not None and not _valid_date(date):
            return walk_error("WALK_400_1", path)

        try:
            walks = self.walk_repo.list_walks(
                walker_id=walker_id,
                dog_id=dog_id,
                status=walk_status,
                date=date,
            )
        except Exception:
            logger.exception("Error listing walks")
            return walk_error("WALK_500_1", path)

        return self._ok(path, walks=[serialize_walk(w) for w in walks])

    def get_walk(self, request: Request, walk_id: str):
        path = request.url.path

        walk = self.walk_repo.get_by_id(walk_id)
        if walk is None:
            return walk_error("WALK_404_1", path)

        return self._ok(path, walk=serialize_walk(walk))

    # ============================================
    # 상태 변경 / 삭제
    # ============================================
    def update_status(self, request: Request, walk_id: str, body: WalkStatusUpdateRequest):
        path = request.url.path

        try:
            new_status = WalkStatus(body.status)
        except ValueError:
            return walk_error("WALK_400_4", path)

        walk = self.walk_repo.get_by_id(walk_id)
        if walk is None:
            return walk_error("WALK_404_1", path)

        if walk.status == WalkStatus.CANCELLED and new_status != WalkStatus.CANCELLED:
            return walk_error("WALK_409_2", path)

        try:
            updates = {"status": new_status}
            # 완료/취소된 산책은 트래킹도 종료
            if new_status != WalkStatus.SCHEDULED:
                updates["is_tracking_active"] = False
            self.walk_repo.update_fields(walk, **updates)
            self.db.commit()
            self.db.refresh(walk)
        except Exception:
            self.db.rollback()
            logger.exception("Error updating walk status (walk_id=%s)", walk_id)
            return walk_error("WALK_500_1", path)

        logger.info("Walk %s status → %s", walk_id, new_status.value)
        return self._ok(path, walk=serialize_walk(walk))

    def delete_walk(self, request: Request, walk_id: str):
        path = request.url.path

        walk = self.walk_repo.get_by_id(walk_id)
        if walk is None:
            return walk_error("WALK_404_1", path)

        try:
            self.walk_repo.delete_walk(walk)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Error deleting walk (walk_id=%s)", walk_id)
            return walk_error("WALK_500_1", path)

        return self._ok(path, message="산책이 삭제되었습니다.", walk_id=walk_id)
