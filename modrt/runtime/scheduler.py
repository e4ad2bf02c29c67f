"""Readiness scheduler for deferred entry-point modules."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..constants import ROOT_PATH

logger = logging.getLogger(__name__)


class PendingJob:
    """Completion handle for one outstanding asynchronous load."""

    def __init__(self, scheduler: "ReadinessScheduler", job_id: int):
        self.scheduler = scheduler
        self.job_id = job_id
        self._done = False

    @property
    def is_done(self) -> bool:
        return self._done

    def done(self) -> None:
        if self._done:
            raise RuntimeError(f"Pending job {self.job_id} has already completed")
        self._done = True
        self.scheduler.complete_pending_job()

    def __repr__(self):  # pragma: no cover - representation helper
        return f"<PendingJob id={self.job_id} done={self._done}>"


class ReadinessScheduler:
    """Holds ``run`` requests back until every pending job has completed.

    *loader* is called as ``loader(path, from_path)`` to execute an entry
    point; its return value is discarded.
    """

    def __init__(self, loader: Callable[[str, str], Any]):
        self.loader = loader
        self.ready = False
        self.pending_count = 0
        self.run_queue: list[tuple[str, Optional[dict[str, Any]]]] = []
        self._job_counter = 0

    def request_run(self, path: str, options: Optional[dict[str, Any]] = None) -> bool:
        """Run *path* now, or queue it; returns ``True`` when it executed."""

        wait = not options or options.get("wait") is not False
        if wait and not self.ready:
            self.run_queue.append((path, options))
            logger.debug("Deferred run of %s (queue length %d)", path, len(self.run_queue))
            return False

        if self.ready and self.run_queue:
            # entries left behind by a failed drain still run first
            entry = (path, options)
            self.run_queue.append(entry)
            self.mark_ready()
            return not any(queued is entry for queued in self.run_queue)

        self.loader(path, ROOT_PATH)
        return True

    def mark_ready(self) -> None:
        self.ready = True

        while self.run_queue:
            queue, self.run_queue = self.run_queue, []
            logger.debug("Draining %d queued run(s)", len(queue))
            index = 0
            try:
                while index < len(queue):
                    path, options = queue[index]
                    index += 1
                    self.request_run(path, options)
                    if not self.ready:
                        break
            finally:
                leftover = queue[index:]
                if leftover:
                    # untouched entries keep their place ahead of newer requests
                    self.run_queue[:0] = leftover

            if not self.ready:
                logger.debug("Readiness lost mid-drain; %d run(s) still queued", len(self.run_queue))
                break

    def begin_pending_job(self) -> PendingJob:
        self.ready = False
        self.pending_count += 1
        job = PendingJob(self, self._job_counter)
        self._job_counter += 1
        logger.debug("Pending job %d started (%d outstanding)", job.job_id, self.pending_count)
        return job

    def complete_pending_job(self) -> None:
        self.pending_count -= 1
        if not self.pending_count:
            self.mark_ready()


__all__ = ["PendingJob", "ReadinessScheduler"]
