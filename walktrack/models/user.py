from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
from walktrack.models.base import Base
import enum

class UserRole(str, enum.Enum):
    ADMIN = "admin"
    OWNER = "owner"
    WALKER = "walker"

class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(30))
    role = Column(Enum(UserRole), default=UserRole.OWNER, nullable=False)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
