from sqlalchemy.orm import Session
from typing import Optional, List

from walktrack.models.walk import Walk, WalkStatus
from walktrack.models.walker import Walker


class WalkRepository:
    def __init__(self, db: Session):
        self.db = db

    # -------------------------------
    # WALK: 조회
    # -------------------------------
    def get_by_id(self, walk_id: str) -> Optional[Walk]:
        return self.db.get(Walk, walk_id)

    def list_walks(
        self,
        walker_id: Optional[int] = None,
        dog_id: Optional[int] = None,
        status: Optional[WalkStatus] = None,
        date: Optional[str] = None,
    ) -> List[Walk]:
        query = self.db.query(Walk)

        if walker_id is not None:
            query = query.filter(Walk.walker_id == walker_id)
        if dog_id is not None:
            query = query.filter(Walk.dog_id == dog_id)
        if status is not None:
            query = query.filter(Walk.status == status)
        if date is not None:
            query = query.filter(Walk.date == date)

        return query.order_by(Walk.date.asc(), Walk.start_time.asc()).all()

    def get_scheduled_walks_for_walker(self, walker_id: int) -> List[Walk]:
        """그룹 산책 묶음 대상: 해당 워커의 예정(scheduled) 산책"""
        return self.list_walks(walker_id=walker_id, status=WalkStatus.SCHEDULED)

    def get_walker(self, walker_id: int) -> Optional[Walker]:
        return self.db.get(Walker, walker_id)

    # -------------------------------
    # WALK: 생성/수정/삭제
    # -------------------------------
    def create_walk(self, **kwargs) -> Walk:
        walk = Walk(**kwargs)
        self.db.add(walk)
        self.db.flush()  # walk.walk_id 사용 가능
        return walk

    def update_fields(self, walk: Walk, **kwargs) -> Walk:
        """
        주어진 필드를 그대로 덮어씁니다 (None 포함).
        flush 시 version_id가 다르면 StaleDataError가 발생합니다.
        """
        for k, v in kwargs.items():
            setattr(walk, k, v)
        self.db.flush()
        return walk

    def delete_walk(self, walk: Walk) -> None:
        self.db.delete(walk)
        self.db.flush()
