from fastapi import APIRouter, Request, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from walktrack.db import get_db
from walktrack.domains.walk.service.tracking_service import TrackingService
from walktrack.schemas.tracking.tracking_schema import WalkTrackingRequest, WalkTrackingResponse
from walktrack.domains.walk.exception import (
    TRACKING_UPDATE_RESPONSES,
    TRACKING_GET_RESPONSES,
)


router = APIRouter(
    prefix="/api/walks",
    tags=["Tracking"]
)


@router.post(
    "/tracking",
    summary="산책 트래킹 업데이트",
    description="픽업/시작/경로 업데이트/종료/드롭오프 위치를 산책 기록에 반영합니다.",
    status_code=200,
    response_model=WalkTrackingResponse,
    responses=TRACKING_UPDATE_RESPONSES,
)
def update_tracking(
    request: Request,
    body: WalkTrackingRequest = ...,
    db: Session = Depends(get_db),
):
    """
    산책 트래킹 정보를 갱신합니다.

    - body: walkId, action (start | update | end | pickup | dropoff) 및 action별 위치 정보
    - start: 시작 위치 기록, 트래킹 활성화, routeCoordinates를 seed 좌표로 초기화
    - update: 기존 routeCoordinates 뒤에 좌표 추가
    - end: 종료 위치 기록, 트래킹 비활성화 (마지막 좌표 추가 가능)
    - pickup / dropoff: 픽업/드롭오프 위치 기록 (dropoff는 트래킹 비활성화)
    - 드롭오프 이후에는 dropoff 외 action 불가 (409)
    """
    service = TrackingService(db)
    return service.update_tracking(
        request=request,
        body=body,
    )


@router.get(
    "/tracking",
    summary="산책 트래킹 조회",
    description="산책의 현재 트래킹 정보와 강아지 표시 정보를 조회합니다.",
    status_code=200,
    response_model=WalkTrackingResponse,
    responses=TRACKING_GET_RESPONSES,
)
def get_tracking(
    request: Request,
    walk_id: Optional[str] = Query(None, alias="walkId", description="산책 ID"),
    db: Session = Depends(get_db),
):
    service = TrackingService(db)
    return service.get_tracking(
        request=request,
        walk_id=walk_id,
    )
