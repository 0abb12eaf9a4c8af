import asyncio
import inspect
import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

import pytz

from walktrack.client.exception import GeolocationError
from walktrack.client.geolocation import GeolocationProvider

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_INTERVAL = 5.0   # 초
DEFAULT_POSITION_TIMEOUT = 10.0  # 초

LocationSample = Dict


def make_sample(latitude: float, longitude: float, now: Optional[datetime] = None) -> LocationSample:
    now = now or datetime.now(pytz.UTC)
    return {"lat": latitude, "lng": longitude, "timestamp": now.isoformat()}


class LocationSampler:
    """
    일정 간격으로 기기 위치를 읽어 {lat, lng, timestamp} 샘플을 만듭니다.

    - 실패(권한 거부/타임아웃 등)한 tick은 건너뛰고 error에 메시지를 남깁니다.
    - 재시도는 하지 않으며 다음 tick에서 다시 시도합니다.
    - 성공한 샘플마다 on_sample 콜백(동기/비동기 모두 가능)을 호출합니다.
    """

    def __init__(
        self,
        provider: GeolocationProvider,
        interval: float = DEFAULT_SAMPLE_INTERVAL,
        on_sample: Optional[Callable[[LocationSample], object]] = None,
        position_timeout: float = DEFAULT_POSITION_TIMEOUT,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.provider = provider
        self.interval = interval
        self.on_sample = on_sample
        self.position_timeout = position_timeout

        self.current: Optional[LocationSample] = None
        self.history: List[LocationSample] = []
        self.error: Optional[str] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def sample_once(self) -> Optional[LocationSample]:
        try:
            latitude, longitude = await asyncio.wait_for(
                self.provider.get_current_position(),
                timeout=self.position_timeout,
            )
        except asyncio.TimeoutError:
            self.error = "Timed out while reading the device location"
            logger.warning("Location sample skipped: %s", self.error)
            return None
        except GeolocationError as e:
            self.error = str(e)
            logger.warning("Location sample skipped: %s", self.error)
            return None

        sample = make_sample(latitude, longitude)
        self.current = sample
        self.history.append(sample)
        self.error = None

        if self.on_sample is not None:
            result = self.on_sample(sample)
            if inspect.isawaitable(result):
                await result
        return sample

    async def start(self) -> bool:
        """첫 샘플을 즉시 읽고 주기 샘플링을 시작합니다. 첫 샘플 성공 여부를 반환."""
        if self.is_running:
            return self.current is not None

        first = await self.sample_once()
        self._task = asyncio.create_task(self._run())
        return first is not None

    async def stop(self) -> List[LocationSample]:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        return list(self.history)

    def clear_history(self) -> None:
        self.history = []

    def latest(self, n: int) -> List[LocationSample]:
        if n <= 0:
            return []
        return list(self.history[-n:])

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.sample_once()
            except Exception:
                # 콜백 오류로 샘플링 루프가 멈추지 않도록 로그만 남김
                logger.exception("Location sample callback failed")

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()
