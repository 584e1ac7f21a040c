"""
Per-candidate countdown tasks for the API.

One asyncio task per active interview calls InterviewStore.tick() once a
second, but only while a question is on screen: time spent generating the
question is not charged. A task ends by itself when its session leaves the
active phase or the timer stops; pause, reset and finish also cancel it
explicitly.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional

from config import TIMER_ENABLED
from state import InterviewPhase
from store import InterviewStore

logger = logging.getLogger(__name__)

ExpiryHandler = Callable[[str], Awaitable[None]]


class TimerRegistry:
    def __init__(
        self,
        store: InterviewStore,
        interval: float = 1.0,
        enabled: bool = TIMER_ENABLED,
        on_expire: Optional[ExpiryHandler] = None,
    ):
        self.store = store
        self.interval = interval
        self.enabled = enabled
        self.on_expire = on_expire
        self.tasks: Dict[str, asyncio.Task] = {}

    def is_running(self, candidate_id: str) -> bool:
        task = self.tasks.get(candidate_id)
        return task is not None and not task.done()

    def start(self, candidate_id: str) -> None:
        """Start ticking for a candidate unless a task is already running."""
        if not self.enabled or self.is_running(candidate_id):
            return
        self.tasks[candidate_id] = asyncio.create_task(self._run(candidate_id))
        logger.debug("Timer task started for candidate %s", candidate_id)

    def cancel(self, candidate_id: str) -> None:
        task = self.tasks.pop(candidate_id, None)
        if task is not None and not task.done():
            task.cancel()
            logger.debug("Timer task cancelled for candidate %s", candidate_id)

    def cancel_all(self) -> None:
        for candidate_id in list(self.tasks):
            self.cancel(candidate_id)

    def _should_tick(self, candidate_id: str) -> bool:
        if candidate_id not in self.store.candidates:
            return False
        session = self.store.get_session(candidate_id)
        return session["phase"] == InterviewPhase.ACTIVE.value and session["timer_running"]

    async def _run(self, candidate_id: str) -> None:
        try:
            while True:
                await asyncio.sleep(self.interval)
                if not self._should_tick(candidate_id):
                    break
                if not self.store.get_session(candidate_id)["current_question"]:
                    # The countdown starts once the question has been asked
                    continue
                if self.store.tick(candidate_id) and self.on_expire is not None:
                    await self.on_expire(candidate_id)
        finally:
            if self.tasks.get(candidate_id) is asyncio.current_task():
                del self.tasks[candidate_id]
