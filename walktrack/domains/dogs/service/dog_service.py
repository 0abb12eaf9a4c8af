import logging
from datetime import datetime

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from walktrack.domains.dogs.exception import dog_error
from walktrack.domains.dogs.repository.dog_repository import DogRepository
from walktrack.models.assessment import Assessment, AssessmentStatus, AssessmentResult
from walktrack.models.walker import Walker
from walktrack.schemas.dogs.dog_schema import AssessmentCreateRequest, AssessmentUpdateRequest

logger = logging.getLogger(__name__)


def serialize_assessment(a: Assessment) -> dict:
    return {
        "assessment_id": a.assessment_id,
        "dog_id": a.dog_id,
        "walker_id": a.walker_id,
        "status": a.status.value if a.status else None,
        "result": a.result.value if a.result else None,
        "scheduled_date": a.scheduled_date,
        "notes": a.notes,
    }


class DogService:
    def __init__(self, db: Session):
        self.db = db
        self.dog_repo = DogRepository(db)

    def _ok(self, path: str, status: int = 200, **payload):
        response_content = {
            "success": True,
            "status": status,
            **payload,
            "timeStamp": datetime.utcnow().isoformat(),
            "path": path,
        }
        return JSONResponse(status_code=status, content=jsonable_encoder(response_content))

    def get_dog(self, request: Request, dog_id: int):
        path = request.url.path

        dog = self.dog_repo.get_by_id(dog_id)
        if dog is None:
            return dog_error("DOG_404_1", path)

        assessments = self.dog_repo.get_assessments(dog_id)

        return self._ok(path, dog={
            "dog_id": dog.dog_id,
            "owner_id": dog.owner_id,
            "name": dog.name,
            "breed": dog.breed,
            "size": dog.size.value if dog.size else None,
            "temperament": dog.temperament,
            "image_url": dog.image_url,
            "bookable": self.dog_repo.has_approved_assessment(dog_id),
            "assessments": [serialize_assessment(a) for a in assessments],
        })

    def create_assessment(self, request: Request, dog_id: int, body: AssessmentCreateRequest):
        path = request.url.path

        if self.dog_repo.get_by_id(dog_id) is None:
            return dog_error("DOG_404_1", path)

        if body.walker_id is not None and self.db.get(Walker, body.walker_id) is None:
            return dog_error("DOG_404_3", path)

        status = AssessmentStatus.SCHEDULED if body.scheduled_date else AssessmentStatus.PENDING

        try:
            assessment = self.dog_repo.create_assessment(
                dog_id=dog_id,
                walker_id=body.walker_id,
                status=status,
                scheduled_date=body.scheduled_date,
                notes=body.notes,
            )
            self.db.commit()
            self.db.refresh(assessment)
        except Exception:
            self.db.rollback()
            logger.exception("Error creating assessment (dog_id=%s)", dog_id)
            return dog_error("DOG_500_1", path)

        return self._ok(path, status=201, assessment=serialize_assessment(assessment))

    def update_assessment(self, request: Request, assessment_id: int, body: AssessmentUpdateRequest):
        path = request.url.path

        try:
            status = AssessmentStatus(body.status)
        except ValueError:
            return dog_error("DOG_400_1", path)

        result = None
        if body.result is not None:
            try:
                result = AssessmentResult(body.result)
            except ValueError:
                return dog_error("DOG_400_2", path)

        if status == AssessmentStatus.COMPLETED and result is None:
            return dog_error("DOG_400_3", path)

        assessment = self.dog_repo.get_assessment(assessment_id)
        if assessment is None:
            return dog_error("DOG_404_2", path)

        try:
            self.dog_repo.update_assessment(
                assessment,
                status=status,
                result=result,
                scheduled_date=body.scheduled_date,
                notes=body.notes,
            )
            self.db.commit()
            self.db.refresh(assessment)
        except Exception:
            self.db.rollback()
            logger.exception("Error updating assessment (assessment_id=%s)", assessment_id)
            return dog_error("DOG_500_1", path)

        logger.info("Assessment %s → %s", assessment_id, status.value)
        return self._ok(path, assessment=serialize_assessment(assessment))
