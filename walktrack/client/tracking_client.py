import logging
from typing import Dict, Optional

import httpx

from walktrack.client.exception import TrackingRequestError

logger = logging.getLogger(__name__)

TRACKING_PATH = "/api/walks/tracking"


class TrackingClient:
    """
    산책 트래킹 API 비동기 클라이언트.

    httpx.AsyncClient를 주입하면 그대로 사용하고(테스트의 ASGITransport 등),
    없으면 base_url로 새로 만들어 aclose()에서 닫습니다.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        if client is None and base_url is None:
            raise ValueError("base_url or client is required")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def post_action(self, walk_id: str, action: str, **fields) -> Dict:
        payload = {"walkId": walk_id, "action": action}
        payload.update({k: v for k, v in fields.items() if v is not None})
        try:
            response = await self.client.post(TRACKING_PATH, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Tracking %s request failed (walk_id=%s): %s", action, walk_id, e)
            raise TrackingRequestError(f"Failed to save tracking data: {e}")
        return self._parse(response)

    async def get_tracking(self, walk_id: str) -> Dict:
        try:
            response = await self.client.get(TRACKING_PATH, params={"walkId": walk_id})
        except httpx.HTTPError as e:
            raise TrackingRequestError(f"Failed to fetch tracking data: {e}")
        return self._parse(response)

    def _parse(self, response: httpx.Response) -> Dict:
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            # 프록시 등이 돌려준 배열/문자열 본문은 에러 봉투로 취급하지 않음
            data = {}

        if response.is_success and data.get("success"):
            return data

        message = data.get("error") or data.get("reason") or f"HTTP {response.status_code}"
        raise TrackingRequestError(message, status=response.status_code, code=data.get("code"))

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
