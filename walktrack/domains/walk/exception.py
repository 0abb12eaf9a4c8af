from dataclasses import dataclass
from typing import Dict

from walktrack.core.error_handler import error_response
from walktrack.schemas.error_schema import ErrorResponse


@dataclass(frozen=True)
class WalkError:
    status: int
    code: str
    reason: str

    def to_dict(self, path: str) -> Dict:
        return {
            "success": False,
            "status": self.status,
            "code": self.code,
            "reason": self.reason,
            "error": self.reason,
            "timeStamp": "...",
            "path": path,
        }


# 산책 위치 트래킹 (pickup/start/update/end/dropoff) 에러 정의
TRACKING_ERRORS: Dict[str, WalkError] = {
    "WALK_TRACK_400_1": WalkError(400, "WALK_TRACK_400_1", "walkId는 필수 값입니다."),
    "WALK_TRACK_400_2": WalkError(400, "WALK_TRACK_400_2", "action은 start, update, end, pickup, dropoff 중 하나여야 합니다."),
    "WALK_TRACK_400_3": WalkError(400, "WALK_TRACK_400_3", "update action에는 routeCoordinates가 필요합니다."),
    "WALK_TRACK_400_4": WalkError(400, "WALK_TRACK_400_4", "위도/경도 값이 유효 범위를 벗어났습니다."),
    "WALK_TRACK_404_1": WalkError(404, "WALK_TRACK_404_1", "요청하신 산책을 찾을 수 없습니다."),
    "WALK_TRACK_409_1": WalkError(409, "WALK_TRACK_409_1", "이미 드롭오프가 기록된 산책입니다."),
    "WALK_TRACK_409_2": WalkError(409, "WALK_TRACK_409_2", "다른 요청과 충돌했습니다. 잠시 후 다시 시도해주세요."),
    "WALK_TRACK_500_1": WalkError(500, "WALK_TRACK_500_1", "산책 트래킹 정보를 저장하는 중 오류가 발생했습니다."),
    "WALK_TRACK_500_2": WalkError(500, "WALK_TRACK_500_2", "산책 트래킹 정보를 조회하는 중 오류가 발생했습니다."),
}

# 산책 예약/조회/상태 변경 에러 정의
BOOKING_ERRORS: Dict[str, WalkError] = {
    "WALK_400_1": WalkError(400, "WALK_400_1", "날짜 형식이 올바르지 않습니다. YYYY-MM-DD 형식을 사용해주세요."),
    "WALK_400_2": WalkError(400, "WALK_400_2", "시간 형식이 올바르지 않습니다. HH:MM (24시간제) 형식을 사용해주세요."),
    "WALK_400_3": WalkError(400, "WALK_400_3", "time_slot은 AM 또는 PM 이어야 합니다."),
    "WALK_400_4": WalkError(400, "WALK_400_4", "status는 scheduled, completed, cancelled 중 하나여야 합니다."),
    "WALK_400_5": WalkError(400, "WALK_400_5", "time_slot이 start_time과 맞지 않습니다. (12:00 이전은 AM, 이후는 PM)"),
    "WALK_404_1": WalkError(404, "WALK_404_1", "요청하신 산책을 찾을 수 없습니다."),
    "WALK_404_2": WalkError(404, "WALK_404_2", "요청하신 강아지를 찾을 수 없습니다."),
    "WALK_404_3": WalkError(404, "WALK_404_3", "요청하신 워커를 찾을 수 없습니다."),
    "WALK_409_1": WalkError(409, "WALK_409_1", "평가(assessment) 승인이 완료되지 않은 강아지는 예약할 수 없습니다."),
    "WALK_409_2": WalkError(409, "WALK_409_2", "취소된 산책의 상태는 변경할 수 없습니다."),
    "WALK_500_1": WalkError(500, "WALK_500_1", "산책 정보를 처리하는 중 오류가 발생했습니다."),
}

GROUP_ERRORS: Dict[str, WalkError] = {
    "WALK_GROUP_400_1": WalkError(400, "WALK_GROUP_400_1", "walkerId는 필수 값입니다."),
    "WALK_GROUP_404_1": WalkError(404, "WALK_GROUP_404_1", "요청하신 워커를 찾을 수 없습니다."),
    "WALK_GROUP_500_1": WalkError(500, "WALK_GROUP_500_1", "그룹 산책 정보를 조회하는 중 오류가 발생했습니다."),
}

WALK_ERRORS: Dict[str, WalkError] = {
    **TRACKING_ERRORS,
    **BOOKING_ERRORS,
    **GROUP_ERRORS,
}

# 공통 에러 응답 생성기
def walk_error(code: str, path: str):
    err = WALK_ERRORS.get(code)
    if not err:
        return error_response(500, "WALK_500_1", "서버 내부 오류가 발생했습니다.", path)
    return error_response(err.status, err.code, err.reason, path)


def _examples(path: str, mapping: Dict[str, WalkError]) -> Dict:
    return {
        code: {"value": err.to_dict(path)}
        for code, err in mapping.items()
    }


def _responses(path: str, mapping: Dict[str, WalkError], descriptions: Dict[int, str]) -> Dict:
    """상태 코드별로 에러 예시를 묶어 Swagger responses 형식으로 변환"""
    responses = {}
    for status, description in descriptions.items():
        codes = {c: e for c, e in mapping.items() if e.status == status}
        entry = {"model": ErrorResponse, "description": description}
        if codes:
            entry["content"] = {"application/json": {"examples": _examples(path, codes)}}
        responses[status] = entry
    return responses


_DESCRIPTIONS = {
    400: "잘못된 요청",
    404: "리소스 없음",
    409: "상태 충돌",
    500: "서버 내부 오류",
}

TRACKING_UPDATE_RESPONSES = _responses("/api/walks/tracking", TRACKING_ERRORS, _DESCRIPTIONS)

TRACKING_GET_RESPONSES = _responses(
    "/api/walks/tracking",
    {c: e for c, e in TRACKING_ERRORS.items() if c in ("WALK_TRACK_400_1", "WALK_TRACK_404_1", "WALK_TRACK_500_2")},
    {400: "잘못된 요청", 404: "리소스 없음", 500: "서버 내부 오류"},
)

WALK_RESPONSES = _responses("/api/walks", BOOKING_ERRORS, _DESCRIPTIONS)

GROUP_RESPONSES = _responses(
    "/api/walks/group",
    GROUP_ERRORS,
    {400: "잘못된 요청", 404: "리소스 없음", 500: "서버 내부 오류"},
)
