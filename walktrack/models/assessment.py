from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, ForeignKey
from sqlalchemy.sql import func
from walktrack.models.base import Base
import enum

class AssessmentStatus(str, enum.Enum):
    PENDING = "pending"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class AssessmentResult(str, enum.Enum):
    APPROVED = "approved"
    DENIED = "denied"

class Assessment(Base):
    __tablename__ = "assessments"

    assessment_id = Column(Integer, primary_key=True, autoincrement=True)
    dog_id = Column(Integer, ForeignKey("dogs.dog_id"), nullable=False)
    walker_id = Column(Integer, ForeignKey("walkers.walker_id"), nullable=True)

    status = Column(Enum(AssessmentStatus), default=AssessmentStatus.PENDING, nullable=False)
    result = Column(Enum(AssessmentResult), nullable=True)
    scheduled_date = Column(String(10))  # YYYY-MM-DD
    notes = Column(Text)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
