from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List


class LocationPoint(BaseModel):
    """위치 샘플 (위도/경도/타임스탬프)"""
    lat: float = Field(..., description="위도 (-90 ~ 90)")
    lng: float = Field(..., description="경도 (-180 ~ 180)")
    timestamp: str = Field(..., description="측정 시각 (ISO 8601 형식)")


class WalkTrackingRequest(BaseModel):
    """
    산책 트래킹 업데이트 요청

    walkId/action은 서비스 단에서 검증하여 400 코드로 응답하기 위해 Optional로 받습니다.
    """
    model_config = ConfigDict(populate_by_name=True)

    walk_id: Optional[str] = Field(None, alias="walkId", description="산책 ID")
    action: Optional[str] = Field(None, description="start | update | end | pickup | dropoff")
    pickup_location: Optional[LocationPoint] = Field(None, alias="pickupLocation", description="픽업 위치")
    dropoff_location: Optional[LocationPoint] = Field(None, alias="dropoffLocation", description="드롭오프 위치")
    walk_start_location: Optional[LocationPoint] = Field(None, alias="walkStartLocation", description="산책 시작 위치")
    walk_end_location: Optional[LocationPoint] = Field(None, alias="walkEndLocation", description="산책 종료 위치")
    route_coordinates: Optional[List[LocationPoint]] = Field(None, alias="routeCoordinates", description="경로 좌표 목록")
    is_tracking_active: Optional[bool] = Field(None, alias="isTrackingActive", description="트래킹 활성 여부 (무시됨, 서버가 action 기준으로 결정)")


class DogBrief(BaseModel):
    """강아지 표시 정보"""
    name: Optional[str] = Field(None, description="강아지 이름")
    imageUrl: Optional[str] = Field(None, description="이미지 URL")


class WalkTrackingDetail(BaseModel):
    """산책 트래킹 상태"""
    id: str = Field(..., description="산책 ID")
    dogId: int = Field(..., description="강아지 ID")
    pickupLocation: Optional[LocationPoint] = Field(None, description="픽업 위치")
    dropoffLocation: Optional[LocationPoint] = Field(None, description="드롭오프 위치")
    walkStartLocation: Optional[LocationPoint] = Field(None, description="산책 시작 위치")
    walkEndLocation: Optional[LocationPoint] = Field(None, description="산책 종료 위치")
    routeCoordinates: List[LocationPoint] = Field(default_factory=list, description="경로 좌표 목록")
    isTrackingActive: bool = Field(False, description="트래킹 활성 여부")
    dog: Optional[DogBrief] = Field(None, description="강아지 정보")


class WalkTrackingResponse(BaseModel):
    """산책 트래킹 응답"""
    success: bool = Field(True, description="성공 여부")
    status: int = Field(200, description="HTTP 상태 코드")
    walk: WalkTrackingDetail = Field(..., description="산책 트래킹 정보")
    timeStamp: str = Field(..., description="응답 시간 (ISO 형식)")
    path: str = Field(..., description="요청 경로")
