from pydantic import BaseModel, Field
from typing import Optional, List


class AssessmentCreateRequest(BaseModel):
    """평가 등록 요청"""
    walker_id: Optional[int] = Field(None, description="평가 담당 워커 ID")
    scheduled_date: Optional[str] = Field(None, description="평가 예정일 (YYYY-MM-DD)")
    notes: Optional[str] = Field(None, description="메모")


class AssessmentUpdateRequest(BaseModel):
    """평가 상태 변경 요청"""
    status: str = Field(..., description="pending | scheduled | completed | cancelled")
    result: Optional[str] = Field(None, description="approved | denied (completed 일 때 필수)")
    scheduled_date: Optional[str] = Field(None, description="평가 예정일 (YYYY-MM-DD)")
    notes: Optional[str] = Field(None, description="메모")


class AssessmentItem(BaseModel):
    assessment_id: int = Field(..., description="평가 ID")
    dog_id: int = Field(..., description="강아지 ID")
    walker_id: Optional[int] = Field(None, description="워커 ID")
    status: str = Field(..., description="평가 상태")
    result: Optional[str] = Field(None, description="평가 결과")
    scheduled_date: Optional[str] = Field(None, description="평가 예정일")
    notes: Optional[str] = Field(None, description="메모")


class DogDetail(BaseModel):
    dog_id: int = Field(..., description="강아지 ID")
    owner_id: int = Field(..., description="보호자 ID")
    name: str = Field(..., description="이름")
    breed: Optional[str] = Field(None, description="견종")
    size: Optional[str] = Field(None, description="크기 (small | medium | large)")
    temperament: Optional[str] = Field(None, description="성격")
    image_url: Optional[str] = Field(None, description="이미지 URL")
    bookable: bool = Field(False, description="예약 가능 여부 (평가 승인 완료)")
    assessments: List[AssessmentItem] = Field(default_factory=list, description="평가 목록")


class DogResponse(BaseModel):
    success: bool = Field(True, description="성공 여부")
    status: int = Field(200, description="HTTP 상태 코드")
    dog: DogDetail = Field(..., description="강아지 정보")
    timeStamp: str = Field(..., description="응답 시간 (ISO 형식)")
    path: str = Field(..., description="요청 경로")


class AssessmentResponse(BaseModel):
    success: bool = Field(True, description="성공 여부")
    status: int = Field(200, description="HTTP 상태 코드")
    assessment: AssessmentItem = Field(..., description="평가 정보")
    timeStamp: str = Field(..., description="응답 시간 (ISO 형식)")
    path: str = Field(..., description="요청 경로")
