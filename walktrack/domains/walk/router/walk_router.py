from fastapi import APIRouter, Request, Depends, Query, Path
from sqlalchemy.orm import Session
from typing import Optional

from walktrack.db import get_db
from walktrack.domains.walk.service.walk_service import WalkService
from walktrack.schemas.walk.walk_schema import (
    WalkCreateRequest,
    WalkStatusUpdateRequest,
    WalkResponse,
    WalkListResponse,
)
from walktrack.domains.walk.exception import WALK_RESPONSES


router = APIRouter(
    prefix="/api/walks",
    tags=["Walk"]
)


@router.post(
    "",
    summary="산책 예약",
    description="강아지와 워커를 지정해 산책을 예약합니다. 평가 승인이 완료된 강아지만 예약할 수 있습니다.",
    status_code=201,
    response_model=WalkResponse,
    responses=WALK_RESPONSES,
)
def create_walk(
    request: Request,
    body: WalkCreateRequest = ...,
    db: Session = Depends(get_db),
):
    service = WalkService(db)
    return service.create_walk(request=request, body=body)


@router.get(
    "",
    summary="산책 목록 조회",
    description="워커/강아지/상태/날짜로 산책 목록을 필터링합니다.",
    status_code=200,
    response_model=WalkListResponse,
    responses=WALK_RESPONSES,
)
def list_walks(
    request: Request,
    walker_id: Optional[int] = Query(None, alias="walkerId", description="워커 ID"),
    dog_id: Optional[int] = Query(None, alias="dogId", description="강아지 ID"),
    status: Optional[str] = Query(None, description="scheduled | completed | cancelled"),
    date: Optional[str] = Query(None, description="산책 날짜 (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
):
    service = WalkService(db)
    return service.list_walks(
        request=request,
        walker_id=walker_id,
        dog_id=dog_id,
        status=status,
        date=date,
    )


@router.get(
    "/{walk_id}",
    summary="산책 상세 조회",
    status_code=200,
    response_model=WalkResponse,
    responses=WALK_RESPONSES,
)
def get_walk(
    request: Request,
    walk_id: str = Path(..., description="산책 ID"),
    db: Session = Depends(get_db),
):
    service = WalkService(db)
    return service.get_walk(request=request, walk_id=walk_id)


@router.patch(
    "/{walk_id}/status",
    summary="산책 상태 변경",
    description="산책을 완료 또는 취소 처리합니다. 완료/취소 시 트래킹도 비활성화됩니다.",
    status_code=200,
    response_model=WalkResponse,
    responses=WALK_RESPONSES,
)
def update_walk_status(
    request: Request,
    walk_id: str = Path(..., description="산책 ID"),
    body: WalkStatusUpdateRequest = ...,
    db: Session = Depends(get_db),
):
    service = WalkService(db)
    return service.update_status(request=request, walk_id=walk_id, body=body)


@router.delete(
    "/{walk_id}",
    summary="산책 삭제",
    status_code=200,
    responses=WALK_RESPONSES,
)
def delete_walk(
    request: Request,
    walk_id: str = Path(..., description="산책 ID"),
    db: Session = Depends(get_db),
):
    service = WalkService(db)
    return service.delete_walk(request=request, walk_id=walk_id)
