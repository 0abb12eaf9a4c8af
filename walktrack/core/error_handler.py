import logging
from datetime import datetime

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from walktrack.schemas.error_schema import ErrorResponse

logger = logging.getLogger(__name__)


def error_response(status: int, code: str, reason: str, path: str) -> JSONResponse:

    error = ErrorResponse(
        success=False,
        status=status,
        code=code,
        reason=reason,
        error=reason,
        timeStamp=datetime.utcnow().isoformat(),
        path=path
    )

    return JSONResponse(
        status_code=status,
        content=error.model_dump()
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    요청 body/query 형식 오류를 422 대신 400 공통 에러 응답으로 변환합니다.
    """
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    reason = f"요청 형식이 올바르지 않습니다. ({loc}: {first.get('msg', 'invalid')})" if loc else "요청 형식이 올바르지 않습니다."
    logger.info("Request validation failed on %s: %s", request.url.path, errors)
    return error_response(400, "COMMON_400_1", reason, request.url.path)
