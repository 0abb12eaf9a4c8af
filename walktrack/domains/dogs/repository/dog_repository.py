from sqlalchemy.orm import Session
from typing import Optional, List, Dict

from walktrack.core.cache import TTLCache, make_eviction_policy
from walktrack.core.config import settings
from walktrack.models.dog import Dog
from walktrack.models.assessment import Assessment, AssessmentStatus, AssessmentResult


# 트래킹 조회 시 매번 dogs 테이블을 읽지 않도록 표시용 정보(name, imageUrl)만 캐시
dog_display_cache = TTLCache(
    ttl_seconds=settings.DOG_CACHE_TTL_SECONDS,
    max_size=settings.DOG_CACHE_MAX_SIZE,
    policy=make_eviction_policy(settings.DOG_CACHE_EVICTION),
)


class DogRepository:
    def __init__(self, db: Session, cache: TTLCache = dog_display_cache):
        self.db = db
        self.cache = cache

    # -------------------------------
    # DOG
    # -------------------------------
    def get_by_id(self, dog_id: int) -> Optional[Dog]:
        return self.db.get(Dog, dog_id)

    def get_display(self, dog_id: int) -> Optional[Dict]:
        def load():
            dog = self.get_by_id(dog_id)
            if dog is None:
                return None
            return {"name": dog.name, "imageUrl": dog.image_url}

        return self.cache.get_or_load(("dog", dog_id), load)

    def get_displays(self, dog_ids: List[int]) -> Dict[int, Dict]:
        displays = {}
        for dog_id in set(dog_ids):
            display = self.get_display(dog_id)
            if display is not None:
                displays[dog_id] = display
        return displays

    # -------------------------------
    # ASSESSMENT
    # -------------------------------
    def get_assessment(self, assessment_id: int) -> Optional[Assessment]:
        return self.db.get(Assessment, assessment_id)

    def get_assessments(self, dog_id: int) -> List[Assessment]:
        return (
            self.db.query(Assessment)
            .filter(Assessment.dog_id == dog_id)
            .order_by(Assessment.assessment_id.asc())
            .all()
        )

    def has_approved_assessment(self, dog_id: int) -> bool:
        return (
            self.db.query(Assessment)
            .filter(
                Assessment.dog_id == dog_id,
                Assessment.status == AssessmentStatus.COMPLETED,
                Assessment.result == AssessmentResult.APPROVED,
            )
            .first()
            is not None
        )

    def create_assessment(self, dog_id: int, **kwargs) -> Assessment:
        assessment = Assessment(dog_id=dog_id, **kwargs)
        self.db.add(assessment)
        self.db.flush()
        return assessment

    def update_assessment(self, assessment: Assessment, **kwargs) -> Assessment:
        for k, v in kwargs.items():
            if v is not None:
                setattr(assessment, k, v)
        self.db.flush()
        return assessment
