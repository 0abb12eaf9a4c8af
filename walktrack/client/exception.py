from typing import Optional


class TrackingError(Exception):
    """트래킹 클라이언트 공통 예외"""


class DeviceError(TrackingError):
    """기기 위치 정보 오류 (서버와 무관, UI 문자열로만 노출)"""


class GeolocationError(DeviceError):
    PERMISSION_DENIED = "PERMISSION_DENIED"
    POSITION_UNAVAILABLE = "POSITION_UNAVAILABLE"
    TIMEOUT = "TIMEOUT"

    def __init__(self, kind: str, message: Optional[str] = None):
        self.kind = kind
        super().__init__(message or kind)


class TrackingRequestError(TrackingError):
    """트래킹 API 호출 실패 (비 2xx 응답 또는 전송 오류)"""

    def __init__(self, message: str, status: Optional[int] = None, code: Optional[str] = None):
        self.status = status
        self.code = code
        super().__init__(message)


class InvalidTransitionError(TrackingError):
    """현재 상태에서 허용되지 않는 이벤트"""
