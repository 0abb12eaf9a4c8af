from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from walktrack.models.base import Base

class Walker(Base):
    __tablename__ = "walkers"

    walker_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), unique=True, nullable=False)

    bio = Column(Text)
    max_dogs = Column(Integer, default=4)  # 그룹 산책 시 동시에 맡을 수 있는 최대 마리 수

    created_at = Column(DateTime, default=func.now())
