"""Change Notifier — bounded, best-effort delivery of category change notifications.

Invariants:
    - enqueue never blocks and never raises: a full queue drops the notification
    - At-most-once: each job is attempted once by a single worker task
    - A failing broadcast is logged; it never reaches the request that caused it
    - No ordering guarantee relative to the mutation that triggered it

Design Decisions:
    - One asyncio.Queue + one worker per process, bounded by notifier_max_pending
    - Worker started lazily on first enqueue, so services work without a lifespan
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from board_categories.core.category import BoardCategoryChange, Category
from board_categories.core.repository_protocols import Broadcaster

logger = logging.getLogger(__name__)

Job = Callable[[], Awaitable[None]]


class ChangeNotifier:
    """Queues broadcaster calls and runs them off the request path."""

    def __init__(self, broadcaster: Broadcaster, max_pending: int = 1000):
        self._broadcaster = broadcaster
        self._queue: asyncio.Queue[tuple[str, Job]] = asyncio.Queue(
            maxsize=max_pending,
        )
        self._worker: asyncio.Task | None = None
        self.dropped = 0

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(
                self._run(), name="category-change-notifier",
            )

    async def stop(self) -> None:
        """Cancel the worker. Jobs still queued are discarded."""
        if self._worker is None:
            return
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

    async def drain(self) -> None:
        """Wait until every queued job has been attempted."""
        if self._queue.qsize():
            self.start()
        await self._queue.join()

    def enqueue(self, action: str, job: Job) -> bool:
        """Queue a job; returns False when it was dropped."""
        try:
            self._queue.put_nowait((action, job))
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                f"Notification queue full, dropping {action}",
                extra={"action": action, "pending": self._queue.qsize()},
            )
            return False
        self.start()
        return True

    async def _run(self) -> None:
        while True:
            action, job = await self._queue.get()
            try:
                await job()
            except Exception as e:
                logger.error(
                    f"Broadcast {action} failed: {e}",
                    extra={"action": action}, exc_info=True,
                )
            finally:
                self._queue.task_done()

    # ─── Notification helpers ─────────────────────────────────────

    def category_changed(self, category: Category) -> bool:
        return self.enqueue(
            "category_change",
            lambda: self._broadcaster.broadcast_category_change(category),
        )

    def categories_reordered(
        self, team_id: str, user_id: str, category_order: list[str],
    ) -> bool:
        return self.enqueue(
            "category_reorder",
            lambda: self._broadcaster.broadcast_category_reorder(
                team_id, user_id, category_order,
            ),
        )

    def boards_categorized(
        self, team_id: str, user_id: str, changes: list[BoardCategoryChange],
    ) -> bool:
        return self.enqueue(
            "category_board_change",
            lambda: self._broadcaster.broadcast_category_board_change(
                team_id, user_id, changes,
            ),
        )

    def category_boards_reordered(
        self, team_id: str, user_id: str, category_id: str, board_order: list[str],
    ) -> bool:
        return self.enqueue(
            "category_boards_reorder",
            lambda: self._broadcaster.broadcast_category_boards_reorder(
                team_id, user_id, category_id, board_order,
            ),
        )
