import enum
import uuid

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Enum, JSON, ForeignKey
from sqlalchemy.sql import func
from walktrack.models.base import Base


class WalkStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class TimeSlot(str, enum.Enum):
    AM = "AM"
    PM = "PM"


def _new_walk_id() -> str:
    return uuid.uuid4().hex


class Walk(Base):
    __tablename__ = "walks"

    walk_id = Column(String(36), primary_key=True, default=_new_walk_id)
    dog_id = Column(Integer, ForeignKey("dogs.dog_id"), nullable=False)
    walker_id = Column(Integer, ForeignKey("walkers.walker_id"), nullable=False)

    date = Column(String(10), nullable=False)        # YYYY-MM-DD
    start_time = Column(String(5), nullable=False)   # HH:MM (24h)
    time_slot = Column(Enum(TimeSlot), nullable=False)
    duration = Column(Integer, nullable=False, default=60)  # 분
    status = Column(Enum(WalkStatus), default=WalkStatus.SCHEDULED, nullable=False)
    notes = Column(Text)

    # 위치 트래킹: {"lat": float, "lng": float, "timestamp": str}
    pickup_location = Column(JSON)
    dropoff_location = Column(JSON)
    walk_start_location = Column(JSON)
    walk_end_location = Column(JSON)
    route_coordinates = Column(JSON)
    is_tracking_active = Column(Boolean, default=False, nullable=False)

    # 낙관적 동시성 제어 (UPDATE ... WHERE version_id = ?)
    version_id = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version_id}
