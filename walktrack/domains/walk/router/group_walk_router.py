from fastapi import APIRouter, Request, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from walktrack.db import get_db
from walktrack.domains.walk.service.group_walk_service import GroupWalkService
from walktrack.schemas.walk.group_walk_schema import GroupWalkListResponse
from walktrack.domains.walk.exception import GROUP_RESPONSES


router = APIRouter(
    prefix="/api/walks",
    tags=["Group Walk"]
)


@router.get(
    "/group",
    summary="그룹 산책 조회",
    description="워커의 예정 산책 중 같은 날짜/시간/시간대에 2마리 이상인 세션을 조회합니다.",
    status_code=200,
    response_model=GroupWalkListResponse,
    responses=GROUP_RESPONSES,
)
def list_group_walks(
    request: Request,
    walker_id: Optional[int] = Query(None, alias="walkerId", description="워커 ID"),
    db: Session = Depends(get_db),
):
    """
    그룹 산책 세션 목록을 조회합니다.

    - (date, start_time, time_slot) 기준으로 묶고, 1마리뿐인 세션은 제외
    - 강아지별 상태는 모두 pending (상태 변경은 저장되지 않음)
    - 날짜 → 시작 시간 순 정렬
    """
    service = GroupWalkService(db)
    return service.list_group_walks(
        request=request,
        walker_id=walker_id,
    )
