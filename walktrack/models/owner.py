from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from walktrack.models.base import Base

class Owner(Base):
    __tablename__ = "owners"

    owner_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), unique=True, nullable=False)

    address = Column(String(255))

    created_at = Column(DateTime, default=func.now())
