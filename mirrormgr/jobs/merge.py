"""Pure merge rules turning a worker report into the next job record.

Timestamps are only stamped on the transition they track; every other
report carries the previous value forward. Nothing here touches the store.
"""

from __future__ import annotations

from dataclasses import replace

from mirrormgr.db.models import MirrorStatus
from mirrormgr.jobs.types import UNKNOWN_SIZE, MirrorJobRecord, MirrorStatusReport

TERMINAL_STATUSES = frozenset({MirrorStatus.SUCCESS, MirrorStatus.FAILED})


def is_known_size(size: str | None) -> bool:
    return bool(size) and size != UNKNOWN_SIZE


def merge_size(current: str | None, incoming: str | None) -> str:
    """Keep a known size unless the incoming one is known as well."""
    if is_known_size(current) and not is_known_size(incoming):
        return current or ""
    return incoming or ""


def merge_status_report(current: MirrorJobRecord, report: MirrorStatusReport, now: int) -> MirrorJobRecord:
    last_started = current.last_started
    if report.status == MirrorStatus.PRE_SYNCING and current.status != MirrorStatus.PRE_SYNCING:
        last_started = now

    last_update = now if report.status == MirrorStatus.SUCCESS else current.last_update
    last_ended = now if report.status in TERMINAL_STATUSES else current.last_ended

    return replace(
        current,
        status=report.status,
        last_online=now,
        last_started=last_started,
        last_update=last_update,
        last_ended=last_ended,
        size=merge_size(current.size, report.size),
        upstream=report.upstream,
        error_msg=report.error_msg,
        is_master=report.is_master,
        alias=report.alias,
        desc=report.desc,
        url=report.url,
        type=report.type,
    )


def merge_registration(
    current: MirrorJobRecord | None,
    mirror_id: str,
    report: MirrorStatusReport,
    now: int,
) -> MirrorJobRecord:
    # A first registration merges against an all-empty record.
    base = current if current is not None else MirrorJobRecord(id=mirror_id)
    merged = merge_status_report(base, report, now)
    return replace(merged, last_register=now)


def merge_size_update(current: MirrorJobRecord, size: str | None) -> MirrorJobRecord:
    return replace(current, size=merge_size(current.size, size))


def merge_schedule(current: MirrorJobRecord, next_schedule: int) -> MirrorJobRecord | None:
    """Return the rescheduled record, or None when nothing would change."""
    if current.scheduled == next_schedule:
        return None
    return replace(current, scheduled=next_schedule)
