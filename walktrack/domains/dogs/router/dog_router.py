from fastapi import APIRouter, Request, Depends, Path
from sqlalchemy.orm import Session

from walktrack.db import get_db
from walktrack.domains.dogs.service.dog_service import DogService
from walktrack.domains.dogs.exception import DOG_RESPONSES
from walktrack.schemas.dogs.dog_schema import (
    AssessmentCreateRequest,
    AssessmentUpdateRequest,
    AssessmentResponse,
    DogResponse,
)


router = APIRouter(
    prefix="/api",
    tags=["Dog"]
)


@router.get(
    "/dogs/{dog_id}",
    summary="강아지 조회",
    description="강아지 정보와 평가 목록, 예약 가능 여부를 조회합니다.",
    status_code=200,
    response_model=DogResponse,
    responses=DOG_RESPONSES,
)
def get_dog(
    request: Request,
    dog_id: int = Path(..., description="강아지 ID"),
    db: Session = Depends(get_db),
):
    service = DogService(db)
    return service.get_dog(request=request, dog_id=dog_id)


@router.post(
    "/dogs/{dog_id}/assessments",
    summary="평가 등록",
    description="강아지 평가를 등록합니다. scheduled_date가 있으면 scheduled, 없으면 pending 상태로 생성됩니다.",
    status_code=201,
    response_model=AssessmentResponse,
    responses=DOG_RESPONSES,
)
def create_assessment(
    request: Request,
    dog_id: int = Path(..., description="강아지 ID"),
    body: AssessmentCreateRequest = ...,
    db: Session = Depends(get_db),
):
    service = DogService(db)
    return service.create_assessment(request=request, dog_id=dog_id, body=body)


@router.patch(
    "/assessments/{assessment_id}",
    summary="평가 상태 변경",
    description="평가를 진행/완료 처리합니다. completed + approved 인 평가가 있어야 산책 예약이 가능합니다.",
    status_code=200,
    response_model=AssessmentResponse,
    responses=DOG_RESPONSES,
)
def update_assessment(
    request: Request,
    assessment_id: int = Path(..., description="평가 ID"),
    body: AssessmentUpdateRequest = ...,
    db: Session = Depends(get_db),
):
    service = DogService(db)
    return service.update_assessment(request=request, assessment_id=assessment_id, body=body)
