from __future__ import annotations

import logging
import time
from dataclasses import asdict, replace
from typing import Any, Iterable

from mirrormgr.db.models import MirrorStatus
from mirrormgr.jobs.errors import MirrorNotFoundError, MirrorValidationError
from mirrormgr.jobs.gate import ReadWriteGate
from mirrormgr.jobs.merge import merge_registration, merge_size_update, merge_status_report
from mirrormgr.jobs.relay import CommandRelay, local_status_for
from mirrormgr.jobs.schedules import ScheduleReconciler
from mirrormgr.jobs.store import JobRecordStore
from mirrormgr.jobs.types import (
    ClientCommand,
    MirrorJobRecord,
    MirrorSchedule,
    MirrorStatusReport,
    ScheduleResult,
)

logger = logging.getLogger(__name__)


class MirrorJobService:
    def __init__(self, store: JobRecordStore, relay: CommandRelay, gate: ReadWriteGate | None = None):
        self._store = store
        self._relay = relay
        self._gate = gate or ReadWriteGate()
        self._reconciler = ScheduleReconciler(store, self._gate)

    def _now(self) -> int:
        return int(time.time())

    def _validate_mirror_id(self, mirror_id: str) -> str:
        normalized = mirror_id.strip()
        if not normalized:
            raise MirrorValidationError("Mirror Name should not be empty")
        return normalized

    def list_jobs(self) -> list[MirrorJobRecord]:
        with self._gate.shared():
            return self._store.list()

    def get_job(self, mirror_id: str) -> MirrorJobRecord:
        mirror_id = self._validate_mirror_id(mirror_id)
        with self._gate.shared():
            return self._store.get(mirror_id)

    def register_mirror(self, mirror_id: str, report: MirrorStatusReport) -> MirrorJobRecord:
        mirror_id = self._validate_mirror_id(mirror_id)
        with self._gate.exclusive():
            try:
                current: MirrorJobRecord | None = self._store.get(mirror_id)
            except MirrorNotFoundError:
                current = None
            record = merge_registration(current, mirror_id, report, self._now())
            if current is None:
                record = self._store.create(record)
            else:
                record = self._store.update(record)
        logger.info("Mirror <%s> registered", mirror_id)
        return record

    def update_job_status(self, mirror_id: str, report: MirrorStatusReport) -> MirrorJobRecord:
        mirror_id = self._validate_mirror_id(mirror_id)
        with self._gate.exclusive():
            current = self._store.get(mirror_id)
            record = self._store.update(merge_status_report(current, report, self._now()))

        if record.status == MirrorStatus.SYNCING:
            logger.info("Job [%s] starts syncing", mirror_id)
        else:
            logger.info("Job [%s] %s", mirror_id, record.status.value)
        return record

    def update_mirror_size(self, mirror_id: str, size: str | None) -> MirrorJobRecord:
        mirror_id = self._validate_mirror_id(mirror_id)
        with self._gate.exclusive():
            current = self._store.get(mirror_id)
            record = self._store.update(merge_size_update(current, size))
        logger.info("Mirror size of [%s]: %s", mirror_id, record.size)
        return record

    def update_schedules(self, schedules: Iterable[MirrorSchedule]) -> list[ScheduleResult]:
        return self._reconciler.reconcile(schedules)

    def send_command(self, mirror_id: str, command: ClientCommand) -> MirrorJobRecord:
        """Apply the command's local effect, then relay it to the worker.

        The relay runs after the gate is released. A delivery failure raises
        ``RelayDeliveryError`` but leaves the committed local status in place.
        """
        mirror_id = self._validate_mirror_id(mirror_id)
        with self._gate.exclusive():
            record = self._store.get(mirror_id)
            target = local_status_for(command.cmd)
            if target is not None:
                record = self._store.update(replace(record, status=target))

        self._relay.notify(mirror_id, command)
        return record

    def delete_job(self, mirror_id: str) -> None:
        mirror_id = self._validate_mirror_id(mirror_id)
        with self._gate.exclusive():
            self._store.delete(mirror_id)
        logger.info("Mirror <%s> deleted", mirror_id)


def record_to_dict(record: MirrorJobRecord) -> dict[str, Any]:
    data = asdict(record)
    data["status"] = record.status.value
    return data
