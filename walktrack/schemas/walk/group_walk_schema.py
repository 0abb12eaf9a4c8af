from pydantic import BaseModel, Field
from typing import Optional, List


class GroupWalkDog(BaseModel):
    """그룹 산책에 포함된 강아지"""
    walk_id: str = Field(..., description="산책 ID")
    dog_id: int = Field(..., description="강아지 ID")
    dog_name: Optional[str] = Field(None, description="강아지 이름")
    image_url: Optional[str] = Field(None, description="이미지 URL")
    walk_status: str = Field("pending", description="pending | picked_up | dropped_off | absent")


class GroupWalkSessionItem(BaseModel):
    """그룹 산책 세션 (저장되지 않는 파생 데이터)"""
    session_key: str = Field(..., description="세션 키 (date_startTime_timeSlot)")
    date: str = Field(..., description="산책 날짜 (YYYY-MM-DD)")
    start_time: str = Field(..., description="시작 시간 (HH:MM)")
    time_slot: str = Field(..., description="AM | PM")
    status: str = Field("pending", description="pending | in_progress | completed")
    dogs: List[GroupWalkDog] = Field(default_factory=list, description="강아지 목록")


class GroupWalkListResponse(BaseModel):
    """그룹 산책 목록 응답"""
    success: bool = Field(True, description="성공 여부")
    status: int = Field(200, description="HTTP 상태 코드")
    walker_id: int = Field(..., description="워커 ID")
    sessions: List[GroupWalkSessionItem] = Field(default_factory=list, description="그룹 산책 세션 목록")
    timeStamp: str = Field(..., description="응답 시간 (ISO 형식)")
    path: str = Field(..., description="요청 경로")
