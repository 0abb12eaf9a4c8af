"""
산책 트래킹 세션 컨트롤러

idle → pickup → walking → dropoff → complete 로만 진행하는 선형 상태 머신입니다.
각 전이는 먼저 트래킹 API를 호출하고, 호출이 성공한 경우에만 로컬 상태를
진행시킵니다. 실패하면 상태는 그대로이고 같은 이벤트를 다시 보내면 됩니다.
"""
import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from walktrack.client.exception import InvalidTransitionError, TrackingRequestError
from walktrack.client.sampler import LocationSampler
from walktrack.client.tracking_client import TrackingClient

logger = logging.getLogger(__name__)

DEFAULT_FLUSH_INTERVAL = 30.0   # 초
DEFAULT_FLUSH_BATCH_SIZE = 5


class TrackingState(str, enum.Enum):
    IDLE = "idle"
    PICKUP = "pickup"
    WALKING = "walking"
    DROPOFF = "dropoff"
    COMPLETE = "complete"


class TrackingEvent(str, enum.Enum):
    RECORD_PICKUP = "record_pickup"
    START_WALK = "start_walk"
    END_WALK = "end_walk"
    RECORD_DROPOFF = "record_dropoff"


# (현재 상태, 이벤트) → (다음 상태, API action)
TRANSITIONS: Dict[Tuple[TrackingState, TrackingEvent], Tuple[TrackingState, str]] = {
    (TrackingState.IDLE, TrackingEvent.RECORD_PICKUP): (TrackingState.PICKUP, "pickup"),
    (TrackingState.PICKUP, TrackingEvent.START_WALK): (TrackingState.WALKING, "start"),
    (TrackingState.WALKING, TrackingEvent.END_WALK): (TrackingState.DROPOFF, "end"),
    (TrackingState.DROPOFF, TrackingEvent.RECORD_DROPOFF): (TrackingState.COMPLETE, "dropoff"),
}


@dataclass(frozen=True)
class TransitionResult:
    ok: bool
    state: TrackingState
    error: Optional[str] = None


def next_transition(state: TrackingState, event: TrackingEvent) -> Tuple[TrackingState, str]:
    target = TRANSITIONS.get((state, event))
    if target is None:
        raise InvalidTransitionError(f"Cannot {event.value} while in {state.value} state")
    return target


def build_payload(event: TrackingEvent, sample: Dict, route: Optional[List[Dict]] = None) -> Dict:
    """route가 주어지면 end의 마지막 좌표 배치로 사용 (없으면 현재 샘플 1개)"""
    if event == TrackingEvent.RECORD_PICKUP:
        return {"pickupLocation": sample}
    if event == TrackingEvent.START_WALK:
        return {
            "walkStartLocation": sample,
            "routeCoordinates": [sample],
            "isTrackingActive": True,
        }
    if event == TrackingEvent.END_WALK:
        return {
            "walkEndLocation": sample,
            "routeCoordinates": [sample] if route is None else route,
            "isTrackingActive": False,
        }
    return {
        "dropoffLocation": sample,
        "isTrackingActive": False,
    }


class TrackingSessionController:
    def __init__(
        self,
        walk_id: str,
        client: TrackingClient,
        sampler: LocationSampler,
        flush_interval: float = DEFAULT_FLUSH_INTERVAL,
        flush_batch_size: int = DEFAULT_FLUSH_BATCH_SIZE,
        initial_state: TrackingState = TrackingState.IDLE,
    ):
        self.walk_id = walk_id
        self.client = client
        self.sampler = sampler
        self.flush_interval = flush_interval
        self.flush_batch_size = flush_batch_size

        self._state = TrackingState(initial_state)
        self.last_error: Optional[str] = None
        self._flush_task: Optional[asyncio.Task] = None
        # sampler.history 중 서버에 보낸 위치 (다음 전송 시작 인덱스)
        self._flushed = 0
        # 전이 요청과 경로 flush가 같은 샘플을 겹쳐 보내지 않도록 직렬화
        self._send_lock = asyncio.Lock()

    @property
    def state(self) -> TrackingState:
        return self._state

    @property
    def is_flushing(self) -> bool:
        return self._flush_task is not None and not self._flush_task.done()

    def _fail(self, message: str) -> TransitionResult:
        self.last_error = message
        return TransitionResult(ok=False, state=self._state, error=message)

    async def transition(self, event) -> TransitionResult:
        try:
            event = TrackingEvent(event)
        except ValueError:
            return self._fail(f"Unknown tracking event: {event}")

        try:
            next_state, action = next_transition(self._state, event)
        except InvalidTransitionError as e:
            return self._fail(str(e))

        sample = await self._ensure_sample()
        if sample is None:
            if self._state == TrackingState.IDLE:
                await self.sampler.stop()
            return self._fail(self.sampler.error or "Current location is unavailable")

        async with self._send_lock:
            mark = len(self.sampler.history)
            route = self._pending(mark) if event == TrackingEvent.END_WALK else None

            try:
                await self.client.post_action(self.walk_id, action, **build_payload(event, sample, route))
            except TrackingRequestError as e:
                logger.warning("Tracking %s failed for walk %s: %s", action, self.walk_id, e)
                if self._state == TrackingState.IDLE:
                    await self.sampler.stop()
                return self._fail(str(e))

            if event in (TrackingEvent.START_WALK, TrackingEvent.END_WALK):
                self._flushed = mark
            await self._enter(next_state)
        self.last_error = None
        logger.info("Walk %s tracking state → %s", self.walk_id, next_state.value)
        return TransitionResult(ok=True, state=self._state)

    async def flush(self) -> bool:
        """
        walking 상태에서 아직 보내지 않은 샘플을 flush_batch_size개씩 update action으로 전송합니다 (best-effort).

        실패한 배치는 로그만 남기고 버리며, 남은 샘플은 다음 flush에서 보냅니다.
        """
        async with self._send_lock:
            if self._state != TrackingState.WALKING:
                return False

            mark = len(self.sampler.history)
            pending = self._pending(mark)
            if not pending:
                return False

            start = mark - len(pending)
            for offset in range(0, len(pending), self.flush_batch_size):
                batch = pending[offset:offset + self.flush_batch_size]
                self._flushed = start + offset + len(batch)
                try:
                    await self.client.post_action(self.walk_id, "update", routeCoordinates=batch)
                except TrackingRequestError as e:
                    logger.warning("Route flush dropped %d point(s) for walk %s: %s", len(batch), self.walk_id, e)
                    return False
            return True

    def _pending(self, mark: int) -> List[Dict]:
        # clear_history() 이후에는 처음부터 다시 셈
        if self._flushed > mark:
            self._flushed = 0
        return list(self.sampler.history[self._flushed:mark])

    async def close(self) -> None:
        await self._stop_flush()
        await self.sampler.stop()

    async def _ensure_sample(self) -> Optional[Dict]:
        if self.sampler.current is not None:
            return self.sampler.current
        if self.sampler.is_running:
            return await self.sampler.sample_once()
        await self.sampler.start()
        return self.sampler.current

    async def _enter(self, state: TrackingState) -> None:
        previous, self._state = self._state, state

        if state == TrackingState.WALKING:
            self._flush_task = asyncio.create_task(self._flush_loop())
        elif previous == TrackingState.WALKING:
            await self._stop_flush()

        if state == TrackingState.COMPLETE:
            await self.sampler.stop()
        elif not self.sampler.is_running:
            await self.sampler.start()

    async def _stop_flush(self) -> None:
        task, self._flush_task = self._flush_task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _flush_loop(self) -> None:
        while True:
            await asyncio.sleep(self.flush_interval)
            await self.flush()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
