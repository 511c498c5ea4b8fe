"""Fixed-interval scheduler that never runs two sync passes at once."""
import asyncio
import inspect
from typing import Any, Callable, Optional

from logging_utils import get_logger

log = get_logger(__name__)


async def _call(callback: Optional[Callable], *args) -> None:
    if callback is None:
        return
    res = callback(*args)
    if inspect.isawaitable(res):
        await res


class SyncScheduler:
    """Run a blocking ``job`` every ``interval`` seconds.

    Each tick fires the job in a worker thread. While a pass is still in
    flight further ticks are skipped, so passes never overlap even when one
    takes longer than the interval.
    """

    def __init__(
        self,
        job: Callable[[], Any],
        interval: float,
        *,
        on_success: Optional[Callable[[Any], Any]] = None,
        on_error: Optional[Callable[[BaseException], Any]] = None,
    ) -> None:
        self.job = job
        self.interval = interval
        self.on_success = on_success
        self.on_error = on_error
        self._running = False
        self._stopping = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._running

    async def run_once(self) -> Any:
        """Run one pass unless another is in flight.

        Returns the job's result, or ``None`` when the pass was skipped or
        failed. Failures go to ``on_error`` instead of propagating.
        """
        if self._running:
            log.warning("이전 동기화가 아직 실행 중이라 이번 주기를 건너뜁니다")
            return None
        self._running = True
        try:
            result = await asyncio.to_thread(self.job)
        except Exception as exc:
            log.error("동기화 실패: %s", exc, exc_info=True)
            await _call(self.on_error, exc)
            return None
        finally:
            self._running = False
        await _call(self.on_success, result)
        return result

    async def start(self, max_ticks: Optional[int] = None) -> None:
        """Tick until :meth:`stop` is called or ``max_ticks`` is reached."""
        self._stopping = False
        ticks = 0
        log.info("동기화 스케줄러 시작 (주기 %.0f초)", self.interval)
        try:
            while not self._stopping:
                if self._task and not self._task.done():
                    log.warning("이전 동기화가 아직 실행 중이라 이번 주기를 건너뜁니다")
                else:
                    self._task = asyncio.create_task(self.run_once())
                ticks += 1
                if max_ticks is not None and ticks >= max_ticks:
                    break
                await asyncio.sleep(self.interval)
        finally:
            if self._task:
                await self._task
            log.info("동기화 스케줄러 종료")

    def stop(self) -> None:
        self._stopping = True
