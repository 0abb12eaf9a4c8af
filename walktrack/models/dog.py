from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey
from sqlalchemy.sql import func
from walktrack.models.base import Base
import enum

class DogSize(str, enum.Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

class Dog(Base):
    __tablename__ = "dogs"

    dog_id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("owners.owner_id"), nullable=False)

    name = Column(String(50), nullable=False)
    breed = Column(String(50))
    size = Column(Enum(DogSize), nullable=True)
    temperament = Column(String(255))
    image_url = Column(String(255))

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
