from pydantic import BaseModel, Field
from typing import Optional, List


class WalkCreateRequest(BaseModel):
    """산책 예약 요청"""
    dog_id: int = Field(..., description="강아지 ID")
    walker_id: int = Field(..., description="워커 ID")
    date: str = Field(..., description="산책 날짜 (YYYY-MM-DD)")
    start_time: str = Field(..., description="시작 시간 (HH:MM, 24시간제)")
    duration: int = Field(60, gt=0, description="산책 시간 (분)")
    time_slot: Optional[str] = Field(None, description="AM | PM (생략 시 start_time 기준 자동 결정)")
    notes: Optional[str] = Field(None, description="메모")


class WalkStatusUpdateRequest(BaseModel):
    """산책 상태 변경 요청"""
    status: str = Field(..., description="scheduled | completed | cancelled")


class WalkItem(BaseModel):
    """산책 정보"""
    walk_id: str = Field(..., description="산책 ID")
    dog_id: int = Field(..., description="강아지 ID")
    walker_id: int = Field(..., description="워커 ID")
    date: str = Field(..., description="산책 날짜 (YYYY-MM-DD)")
    start_time: str = Field(..., description="시작 시간 (HH:MM)")
    time_slot: str = Field(..., description="AM | PM")
    duration: int = Field(..., description="산책 시간 (분)")
    status: str = Field(..., description="scheduled | completed | cancelled")
    notes: Optional[str] = Field(None, description="메모")
    is_tracking_active: bool = Field(False, description="트래킹 활성 여부")


class WalkResponse(BaseModel):
    """산책 단건 응답"""
    success: bool = Field(True, description="성공 여부")
    status: int = Field(200, description="HTTP 상태 코드")
    walk: WalkItem = Field(..., description="산책 정보")
    timeStamp: str = Field(..., description="응답 시간 (ISO 형식)")
    path: str = Field(..., description="요청 경로")


class WalkListResponse(BaseModel):
    """산책 목록 응답"""
    success: bool = Field(True, description="성공 여부")
    status: int = Field(200, description="HTTP 상태 코드")
    walks: List[WalkItem] = Field(default_factory=list, description="산책 목록")
    timeStamp: str = Field(..., description="응답 시간 (ISO 형식)")
    path: str = Field(..., description="요청 경로")
