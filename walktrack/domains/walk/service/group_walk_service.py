"""
그룹 산책 묶음

한 워커의 예정 산책을 (date, start_time, time_slot) 기준으로 묶어 2마리 이상인
세션만 그룹 산책으로 노출합니다. 세션과 강아지별 상태(pending/picked_up/
dropped_off/absent)는 DB에 저장되지 않는 파생 데이터이며, GroupWalkBoard가
메모리에서 관리합니다.
"""
import enum
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from walktrack.domains.dogs.repository.dog_repository import DogRepository
from walktrack.domains.walk.exception import walk_error
from walktrack.domains.walk.repository.walk_repository import WalkRepository

logger = logging.getLogger(__name__)


class DogWalkStatus(str, enum.Enum):
    PENDING = "pending"
    PICKED_UP = "picked_up"
    DROPPED_OFF = "dropped_off"
    ABSENT = "absent"


class GroupSessionStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


# 강아지별 상태 전이 (같은 상태 재선택은 항상 허용)
ALLOWED_DOG_TRANSITIONS = {
    DogWalkStatus.PENDING: {DogWalkStatus.PICKED_UP, DogWalkStatus.ABSENT},
    DogWalkStatus.PICKED_UP: {DogWalkStatus.DROPPED_OFF, DogWalkStatus.ABSENT, DogWalkStatus.PENDING},
    DogWalkStatus.ABSENT: {DogWalkStatus.PENDING, DogWalkStatus.PICKED_UP},
    DogWalkStatus.DROPPED_OFF: {DogWalkStatus.PICKED_UP},
}

READY_TO_START = {DogWalkStatus.PICKED_UP, DogWalkStatus.ABSENT}
READY_TO_END = {DogWalkStatus.DROPPED_OFF, DogWalkStatus.ABSENT}


class GroupWalkError(Exception):
    pass


class GroupWalkNotFoundError(GroupWalkError):
    pass


class InvalidDogStatusError(GroupWalkError):
    pass


class GroupWalkBlockedError(GroupWalkError):
    """시작/종료 조건 미충족 (세션 상태는 변경되지 않음)"""


@dataclass
class GroupWalkDog:
    walk_id: str
    dog_id: int
    dog_name: Optional[str] = None
    image_url: Optional[str] = None
    walk_status: DogWalkStatus = DogWalkStatus.PENDING


@dataclass
class GroupWalkSession:
    date: str
    start_time: str
    time_slot: str
    dogs: List[GroupWalkDog] = field(default_factory=list)
    status: GroupSessionStatus = GroupSessionStatus.PENDING

    @property
    def key(self) -> str:
        return session_key(self.date, self.start_time, self.time_slot)

    def find_dog(self, walk_id: str) -> Optional[GroupWalkDog]:
        for dog in self.dogs:
            if dog.walk_id == walk_id:
                return dog
        return None

    def count(self, status: DogWalkStatus) -> int:
        return sum(1 for d in self.dogs if d.walk_status == status)

    def to_dict(self) -> Dict:
        return {
            "session_key": self.key,
            "date": self.date,
            "start_time": self.start_time,
            "time_slot": self.time_slot,
            "status": self.status.value,
            "dogs": [
                {
                    "walk_id": d.walk_id,
                    "dog_id": d.dog_id,
                    "dog_name": d.dog_name,
                    "image_url": d.image_url,
                    "walk_status": d.walk_status.value,
                }
                for d in self.dogs
            ],
        }


def session_key(date: str, start_time: str, time_slot: str) -> str:
    return f"{date}_{start_time}_{time_slot}"


def _slot_value(time_slot) -> str:
    return time_slot.value if isinstance(time_slot, enum.Enum) else str(time_slot)


def _minutes(start_time: str) -> int:
    hours, minutes = start_time.split(":")
    return int(hours) * 60 + int(minutes)


def group_walks(
    walks: Iterable,
    dogs: Optional[Dict[int, Dict]] = None,
    walker_id: Optional[int] = None,
) -> List[GroupWalkSession]:
    """
    walks를 (date, start_time, time_slot)으로 묶어 2개 이상인 세션만 반환합니다.

    - walks: walk_id, dog_id, walker_id, date, start_time, time_slot 속성을 가진 객체
    - dogs: dog_id → {"name", "imageUrl"} 표시 정보 (선택)
    - walker_id: 지정 시 해당 워커의 산책만 대상
    - 정렬: 날짜 → 시작 시간(자정 기준 분) 순
    """
    dogs = dogs or {}
    buckets: "OrderedDict[Tuple[str, str, str], list]" = OrderedDict()

    for walk in walks:
        if walker_id is not None and walk.walker_id != walker_id:
            continue
        key = (walk.date, walk.start_time, _slot_value(walk.time_slot))
        buckets.setdefault(key, []).append(walk)

    sessions = []
    for (date, start_time, time_slot), grouped in buckets.items():
        if len(grouped) < 2:
            continue

        session = GroupWalkSession(date=date, start_time=start_time, time_slot=time_slot)
        for walk in grouped:
            display = dogs.get(walk.dog_id, {})
            session.dogs.append(GroupWalkDog(
                walk_id=walk.walk_id,
                dog_id=walk.dog_id,
                dog_name=display.get("name"),
                image_url=display.get("imageUrl"),
            ))
        sessions.append(session)

    sessions.sort(key=lambda s: (s.date, _minutes(s.start_time)))
    return sessions


class GroupWalkBoard:
    """
    그룹 산책 세션의 강아지별 상태를 메모리에서 관리합니다.
    상태는 저장되지 않으며 보드 인스턴스의 수명 동안만 유지됩니다.
    """

    def __init__(self, sessions: Iterable[GroupWalkSession]):
        self.sessions: "OrderedDict[str, GroupWalkSession]" = OrderedDict(
            (s.key, s) for s in sessions
        )

    def get(self, key: str) -> GroupWalkSession:
        session = self.sessions.get(key)
        if session is None:
            raise GroupWalkNotFoundError(f"Group walk session not found: {key}")
        return session

    def set_dog_status(self, key: str, walk_id: str, status) -> GroupWalkDog:
        session = self.get(key)
        new_status = DogWalkStatus(status)

        if session.status == GroupSessionStatus.COMPLETED:
            raise InvalidDogStatusError("Group walk is already completed.")

        dog = session.find_dog(walk_id)
        if dog is None:
            raise GroupWalkNotFoundError(f"Walk {walk_id} is not part of session {key}")

        if new_status != dog.walk_status and new_status not in ALLOWED_DOG_TRANSITIONS[dog.walk_status]:
            raise InvalidDogStatusError(
                f"Cannot change dog status from {dog.walk_status.value} to {new_status.value}"
            )

        dog.walk_status = new_status
        return dog

    def start(self, key: str) -> GroupWalkSession:
        session = self.get(key)
        if session.status != GroupSessionStatus.PENDING:
            raise GroupWalkBlockedError("Group walk has already been started.")
        if not all(d.walk_status in READY_TO_START for d in session.dogs):
            raise GroupWalkBlockedError(
                "All dogs must be picked up or marked as absent before starting the walk."
            )
        session.status = GroupSessionStatus.IN_PROGRESS
        logger.info("Group walk %s started (%d dogs)", key, len(session.dogs))
        return session

    def end(self, key: str) -> GroupWalkSession:
        session = self.get(key)
        if session.status != GroupSessionStatus.IN_PROGRESS:
            raise GroupWalkBlockedError("Group walk has not been started.")
        if not all(d.walk_status in READY_TO_END for d in session.dogs):
            raise GroupWalkBlockedError(
                "All dogs must be dropped off or marked as absent before ending the walk."
            )
        session.status = GroupSessionStatus.COMPLETED
        logger.info("Group walk %s completed", key)
        return session


class GroupWalkService:
    def __init__(self, db: Session):
        self.db = db
        self.walk_repo = WalkRepository(db)
        self.dog_repo = DogRepository(db)

    def list_group_walks(self, request: Request, walker_id: Optional[int]):
        path = request.url.path

        if walker_id is None:
            return walk_error("WALK_GROUP_400_1", path)

        try:
            if self.walk_repo.get_walker(walker_id) is None:
                return walk_error("WALK_GROUP_404_1", path)

            walks = self.walk_repo.get_scheduled_walks_for_walker(walker_id)
            dogs = self.dog_repo.get_displays([w.dog_id for w in walks])
            sessions = group_walks(walks, dogs=dogs, walker_id=walker_id)
        except Exception:
            logger.exception("Error grouping walks (walker_id=%s)", walker_id)
            return walk_error("WALK_GROUP_500_1", path)

        response_content = {
            "success": True,
            "status": 200,
            "walker_id": walker_id,
            "sessions": [s.to_dict() for s in sessions],
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }

        encoded = jsonable_encoder(response_content)
        return JSONResponse(status_code=200, content=encoded)
