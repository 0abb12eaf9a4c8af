import enum
import logging
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from walktrack.core.config import settings
from walktrack.domains.dogs.repository.dog_repository import DogRepository
from walktrack.domains.walk.exception import walk_error
from walktrack.domains.walk.repository.walk_repository import WalkRepository
from walktrack.models.walk import Walk
from walktrack.schemas.tracking.tracking_schema import WalkTrackingRequest, LocationPoint

logger = logging.getLogger(__name__)


class TrackingAction(str, enum.Enum):
    START = "start"
    UPDATE = "update"
    END = "end"
    PICKUP = "pickup"
    DROPOFF = "dropoff"


# 좌표 배치 없이는 의미가 없는 action
ROUTE_REQUIRED = {TrackingAction.UPDATE}


def _point(p: Optional[LocationPoint]) -> Optional[Dict]:
    return p.model_dump() if p is not None else None


def _points(points: Optional[List[LocationPoint]]) -> List[Dict]:
    return [p.model_dump() for p in points or []]


def _in_range(p: LocationPoint) -> bool:
    return -90 <= p.lat <= 90 and -180 <= p.lng <= 180


def all_points_in_range(body: WalkTrackingRequest) -> bool:
    singles = [
        body.pickup_location,
        body.dropoff_location,
        body.walk_start_location,
        body.walk_end_location,
    ]
    points = [p for p in singles if p is not None] + list(body.route_coordinates or [])
    return all(_in_range(p) for p in points)


def build_tracking_update(action: TrackingAction, body: WalkTrackingRequest, walk: Walk) -> Dict:
    """
    action에 따라 walk 행에 덮어쓸 필드를 계산합니다.

    - start: 트래킹 활성화, 경로를 seed 좌표로 초기화 (시작 위치는 있을 때만 기록)
    - update: 기존 경로 뒤에 좌표 추가 (append-only)
    - end: 종료 위치 기록, 트래킹 비활성화, 마지막 좌표가 있으면 추가
    - pickup / dropoff: 단일 위치 기록 (dropoff는 트래킹 비활성화)

    body에 없는 위치 필드는 기존 값을 그대로 둡니다.
    """
    existing = list(walk.route_coordinates or [])

    if action == TrackingAction.START:
        updates = {
            "is_tracking_active": True,
            "route_coordinates": _points(body.route_coordinates),
        }
        if body.walk_start_location is not None:
            updates["walk_start_location"] = _point(body.walk_start_location)
        return updates

    if action == TrackingAction.UPDATE:
        return {"route_coordinates": existing + _points(body.route_coordinates)}

    if action == TrackingAction.END:
        updates = {"is_tracking_active": False}
        if body.walk_end_location is not None:
            updates["walk_end_location"] = _point(body.walk_end_location)
        if body.route_coordinates:
            updates["route_coordinates"] = existing + _points(body.route_coordinates)
        return updates

    if action == TrackingAction.PICKUP:
        if body.pickup_location is None:
            return {}
        return {"pickup_location": _point(body.pickup_location)}

    # DROPOFF
    updates = {"is_tracking_active": False}
    if body.dropoff_location is not None:
        updates["dropoff_location"] = _point(body.dropoff_location)
    return updates


def serialize_tracking(walk: Walk, dog: Optional[Dict] = None) -> Dict:
    return {
        "id": walk.walk_id,
        "dogId": walk.dog_id,
        "pickupLocation": walk.pickup_location,
        "dropoffLocation": walk.dropoff_location,
        "walkStartLocation": walk.walk_start_location,
        "walkEndLocation": walk.walk_end_location,
        "routeCoordinates": list(walk.route_coordinates or []),
        "isTrackingActive": bool(walk.is_tracking_active),
        "dog": dog,
    }


class TrackingService:
    def __init__(self, db: Session, max_retries: Optional[int] = None):
        self.db = db
        self.walk_repo = WalkRepository(db)
        self.dog_repo = DogRepository(db)
        self.max_retries = settings.TRACKING_UPDATE_MAX_RETRIES if max_retries is None else max_retries

    def update_tracking(self, request: Request, body: WalkTrackingRequest):
        path = request.url.path

        # ============================================
        # 1) Body 유효성 검사 (DB 접근 전)
        # ============================================
        if not body.walk_id:
            return walk_error("WALK_TRACK_400_1", path)

        try:
            action = TrackingAction(body.action)
        except ValueError:
            return walk_error("WALK_TRACK_400_2", path)

        if not all_points_in_range(body):
            return walk_error("WALK_TRACK_400_4", path)

        # ============================================
        # 2) 조회 → 병합 → 저장 (version 충돌 시 재적용)
        # ============================================
        walk = None
        for attempt in range(1, self.max_retries + 2):
            try:
                walk = self.walk_repo.get_by_id(body.walk_id)
                if walk is None:
                    return walk_error("WALK_TRACK_404_1", path)

                if action in ROUTE_REQUIRED and body.route_coordinates is None:
                    return walk_error("WALK_TRACK_400_3", path)

                # 드롭오프 이후에는 dropoff 재기록만 허용
                if walk.dropoff_location is not None and action != TrackingAction.DROPOFF:
                    return walk_error("WALK_TRACK_409_1", path)

                updates = build_tracking_update(action, body, walk)
                self.walk_repo.update_fields(walk, **updates)
                self.db.commit()
                self.db.refresh(walk)
                break

            except StaleDataError:
                self.db.rollback()
                logger.warning(
                    "Stale walk row on tracking %s (walk_id=%s, attempt=%d)",
                    action.value, body.walk_id, attempt,
                )
                walk = None

            except Exception:
                self.db.rollback()
                logger.exception("Error updating walk tracking (walk_id=%s, action=%s)", body.walk_id, action.value)
                return walk_error("WALK_TRACK_500_1", path)

        if walk is None:
            return walk_error("WALK_TRACK_409_2", path)

        logger.info("Walk tracking %s recorded (walk_id=%s)", action.value, walk.walk_id)

        # ============================================
        # 3) 응답 생성
        # ============================================
        response_content = {
            "success": True,
            "status": 200,
            "walk": serialize_tracking(walk),
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }

        encoded = jsonable_encoder(response_content)
        return JSONResponse(status_code=200, content=encoded)

    def get_tracking(self, request: Request, walk_id: Optional[str]):
        path = request.url.path

        if not walk_id:
            return walk_error("WALK_TRACK_400_1", path)

        try:
            walk = self.walk_repo.get_by_id(walk_id)
            if walk is None:
                return walk_error("WALK_TRACK_404_1", path)

            dog = self.dog_repo.get_display(walk.dog_id)
        except Exception:
            logger.exception("Error fetching walk tracking (walk_id=%s)", walk_id)
            return walk_error("WALK_TRACK_500_2", path)

        response_content = {
            "success": True,
            "status": 200,
            "walk": serialize_tracking(walk, dog),
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }

        encoded = jsonable_encoder(response_content)
        return JSONResponse(status_code=200, content=encoded)
