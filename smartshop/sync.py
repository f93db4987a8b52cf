"""
Background mirror of local writes to the remote table store.

Every local write enqueues a job; a single worker task pushes jobs in order,
retrying with exponential backoff. Failures are logged and never reach the
caller that made the write.

A table whose job was dropped or given up on is marked dirty: the remote
copy is missing local writes. Only a successful push of the whole local
table, enqueued after the mark, clears it.
"""
import asyncio
from collections import Counter
from dataclasses import dataclass
from typing import Optional

from smartshop.core.exceptions import RemoteSyncFailure
from smartshop.logging_config import get_logger

logger = get_logger("sync")


@dataclass
class SyncJob:
    table: str
    rows: list[dict]
    seq: int = 0
    full: bool = False  # rows are the whole local table


class SyncWorker:
    """Bounded queue of upsert jobs drained by one asyncio task."""

    def __init__(
        self,
        remote,
        max_queue: int = 100,
        max_retries: int = 5,
        backoff_base: float = 1.0,
        backoff_max: float = 60.0,
        timeout: float = 10.0,
    ):
        self.remote = remote
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.backoff_max = backoff_max
        self.timeout = timeout
        self._queue: asyncio.Queue[SyncJob] = asyncio.Queue(maxsize=max_queue)
        self._pending: Counter = Counter()
        self._dirty: dict[str, int] = {}  # table -> seq of the write the remote is missing
        self._seq = 0
        self._stopping = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def pending_count(self) -> int:
        """Jobs queued or in flight."""
        return sum(self._pending.values())

    def pending_for(self, table: str) -> int:
        return self._pending[table]

    def pending_by_table(self) -> dict[str, int]:
        return {table: count for table, count in self._pending.items() if count}

    def is_dirty(self, table: str) -> bool:
        return table in self._dirty

    def dirty_tables(self) -> list[str]:
        return sorted(self._dirty)

    def enqueue(self, table: str, rows: list[dict], full: bool = False) -> bool:
        """
        Schedule an upsert; returns False when the queue is full and the job is dropped.

        `full` marks `rows` as the complete local table, which clears the
        dirty mark once pushed.
        """
        self._seq += 1
        if not rows and not full:
            return True
        try:
            self._queue.put_nowait(SyncJob(table=table, rows=rows, seq=self._seq, full=full))
        except asyncio.QueueFull:
            logger.warning(
                f"[SYNC] Queue full ({self._queue.maxsize}); dropped mirror of "
                f"{len(rows)} row(s) to {table}"
            )
            self._mark_dirty(table, self._seq)
            return False
        self._pending[table] += 1
        return True

    def backoff_delay(self, attempt: int) -> float:
        return min(self.backoff_max, self.backoff_base * (2 ** attempt))

    async def start(self) -> None:
        if self.running:
            return
        self._stopping = False
        self._task = asyncio.create_task(self._run(), name="smartshop-sync")
        logger.info("[SYNC] Worker started")

    async def stop(self) -> None:
        """
        Stop the worker; queued jobs are abandoned.

        The task is cancelled again until it finishes, since a cancellation
        that lands while an upsert completes can be absorbed by `wait_for`.
        """
        task = self._task
        if task is None:
            return
        self._stopping = True
        while not task.done():
            task.cancel()
            await asyncio.wait({task}, timeout=0.1)
        self._task = None

        if not task.cancelled() and task.exception() is not None:
            logger.error(f"[SYNC] Worker crashed: {task.exception()!r}")
        if self.pending_count:
            logger.warning(f"[SYNC] Worker stopped with {self.pending_count} job(s) unsynced")
        else:
            logger.info("[SYNC] Worker stopped")

    async def drain(self) -> None:
        """Wait until every queued job has been pushed or given up on."""
        await self._queue.join()

    def _mark_dirty(self, table: str, seq: int) -> None:
        self._dirty[table] = max(seq, self._dirty.get(table, 0))

    def _settle(self, job: SyncJob, pushed: bool) -> None:
        if not pushed:
            self._mark_dirty(job.table, job.seq)
        elif job.full and self._dirty.get(job.table, job.seq) < job.seq:
            del self._dirty[job.table]
            logger.info(f"[SYNC] {job.table} back in sync with the remote store")

    async def _run(self) -> None:
        while not self._stopping:
            job = await self._queue.get()
            pushed = False
            try:
                pushed = await self._push(job)
            finally:
                self._settle(job, pushed)
                self._pending[job.table] -= 1
                self._queue.task_done()

    async def _push(self, job: SyncJob) -> bool:
        for attempt in range(self.max_retries + 1):
            try:
                await asyncio.wait_for(self.remote.upsert(job.table, job.rows), self.timeout)
                logger.debug(f"[SYNC] Mirrored {len(job.rows)} row(s) to {job.table}")
                return True
            except (RemoteSyncFailure, asyncio.TimeoutError) as e:
                if attempt == self.max_retries:
                    logger.error(
                        f"[SYNC] Giving up on {len(job.rows)} row(s) to {job.table} "
                        f"after {attempt + 1} attempt(s): {e or type(e).__name__}"
                    )
                    return False
                delay = self.backoff_delay(attempt)
                logger.warning(
                    f"[SYNC] Mirror to {job.table} failed (attempt {attempt + 1}): "
                    f"{e or type(e).__name__}; retrying in {delay:.1f}s"
                )
                await asyncio.sleep(delay)
        return False
