import asyncio
from typing import Iterable, List, Tuple, Union

from walktrack.client.exception import GeolocationError

Coordinates = Tuple[float, float]


class GeolocationProvider:
    """
    기기 위치 제공자 인터페이스.
    get_current_position()은 (latitude, longitude)를 반환하고 실패 시 GeolocationError를 던집니다.
    """

    async def get_current_position(self) -> Coordinates:
        raise NotImplementedError


class ReplayGeolocationProvider(GeolocationProvider):
    """
    기록된 좌표를 순서대로 재생하는 위치 제공자 (시뮬레이션/테스트용).

    points 항목이 예외 인스턴스이면 해당 호출에서 그 예외를 던집니다.
    loop=False 이고 좌표를 모두 소진하면 POSITION_UNAVAILABLE.
    """

    def __init__(self, points: Iterable[Union[Coordinates, Exception]], loop: bool = False, delay: float = 0.0):
        self.points: List[Union[Coordinates, Exception]] = list(points)
        self.loop = loop
        self.delay = delay
        self._index = 0

    async def get_current_position(self) -> Coordinates:
        if self.delay:
            await asyncio.sleep(self.delay)

        if self._index >= len(self.points):
            if not self.loop or not self.points:
                raise GeolocationError(GeolocationError.POSITION_UNAVAILABLE, "No more recorded positions")
            self._index = 0

        item = self.points[self._index]
        self._index += 1

        if isinstance(item, Exception):
            raise item
        return item
