from dataclasses import dataclass
from typing import Dict

from walktrack.core.error_handler import error_response
from walktrack.schemas.error_schema import ErrorResponse


@dataclass(frozen=True)
class DogError:
    status: int
    code: str
    reason: str


DOG_ERRORS: Dict[str, DogError] = {
    "DOG_404_1": DogError(404, "DOG_404_1", "요청하신 강아지를 찾을 수 없습니다."),
    "DOG_404_2": DogError(404, "DOG_404_2", "요청하신 평가를 찾을 수 없습니다."),
    "DOG_404_3": DogError(404, "DOG_404_3", "요청하신 워커를 찾을 수 없습니다."),
    "DOG_400_1": DogError(400, "DOG_400_1", "status는 pending, scheduled, completed, cancelled 중 하나여야 합니다."),
    "DOG_400_2": DogError(400, "DOG_400_2", "result는 approved 또는 denied 여야 합니다."),
    "DOG_400_3": DogError(400, "DOG_400_3", "완료(completed)된 평가에는 result가 필요합니다."),
    "DOG_500_1": DogError(500, "DOG_500_1", "강아지 정보를 처리하는 중 오류가 발생했습니다."),
}


def dog_error(code: str, path: str):
    err = DOG_ERRORS.get(code)
    if not err:
        return error_response(500, "DOG_500_1", "서버 내부 오류가 발생했습니다.", path)
    return error_response(err.status, err.code, err.reason, path)


DOG_RESPONSES = {
    400: {"model": ErrorResponse, "description": "잘못된 요청"},
    404: {"model": ErrorResponse, "description": "리소스 없음"},
    500: {"model": ErrorResponse, "description": "서버 내부 오류"},
}
