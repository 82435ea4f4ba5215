from __future__ import annotations

import logging
from typing import Iterable

from mirrormgr.jobs.errors import MirrorNotFoundError, StoreError
from mirrormgr.jobs.gate import ReadWriteGate
from mirrormgr.jobs.merge import merge_schedule
from mirrormgr.jobs.store import JobRecordStore
from mirrormgr.jobs.types import MirrorSchedule, ScheduleOutcome, ScheduleResult

logger = logging.getLogger(__name__)


class ScheduleReconciler:
    def __init__(self, store: JobRecordStore, gate: ReadWriteGate):
        self._store = store
        self._gate = gate

    def reconcile(self, schedules: Iterable[MirrorSchedule]) -> list[ScheduleResult]:
        """Apply next-run times one item at a time.

        A failing item is reported in its own result and never undoes or
        skips the others.
        """
        return [self._reconcile_one(schedule) for schedule in schedules]

    def _reconcile_one(self, schedule: MirrorSchedule) -> ScheduleResult:
        mirror_id = schedule.mirror_id.strip()
        if not mirror_id:
            return ScheduleResult(
                mirror_id=schedule.mirror_id,
                outcome=ScheduleOutcome.INVALID,
                error="Mirror Name should not be empty",
            )

        try:
            with self._gate.exclusive():
                current = self._store.get(mirror_id)
                updated = merge_schedule(current, schedule.next_schedule)
                if updated is None:
                    return ScheduleResult(mirror_id=mirror_id, outcome=ScheduleOutcome.UNCHANGED)
                self._store.update(updated)
        except MirrorNotFoundError as exc:
            logger.warning("failed to get job %s: %s", mirror_id, exc)
            return ScheduleResult(mirror_id=mirror_id, outcome=ScheduleOutcome.NOT_FOUND, error=str(exc))
        except StoreError as exc:
            logger.error("failed to update schedule of job %s: %s", mirror_id, exc)
            return ScheduleResult(mirror_id=mirror_id, outcome=ScheduleOutcome.FAILED, error=str(exc))

        logger.debug("Job [%s] scheduled at %d", mirror_id, schedule.next_schedule)
        return ScheduleResult(mirror_id=mirror_id, outcome=ScheduleOutcome.UPDATED)
