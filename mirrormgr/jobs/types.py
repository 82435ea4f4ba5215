from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from mirrormgr.db.models import CmdVerb, MirrorStatus

UNKNOWN_SIZE = "unknown"


@dataclass(slots=True)
class MirrorJobRecord:
    id: str
    status: MirrorStatus = MirrorStatus.NONE
    last_online: int = 0
    last_register: int = 0
    last_started: int = 0
    last_update: int = 0
    last_ended: int = 0
    scheduled: int = 0
    size: str = ""
    upstream: str = ""
    error_msg: str = ""
    is_master: bool = False
    alias: str = ""
    desc: str = ""
    url: str = ""
    type: str = ""


@dataclass(frozen=True, slots=True)
class MirrorStatusReport:
    """Status fields a worker reports; manager-owned timestamps are never part of it."""

    status: MirrorStatus
    size: str = ""
    upstream: str = ""
    error_msg: str = ""
    is_master: bool = False
    alias: str = ""
    desc: str = ""
    url: str = ""
    type: str = ""


@dataclass(frozen=True, slots=True)
class MirrorSchedule:
    mirror_id: str
    next_schedule: int


class ScheduleOutcome(str, Enum):
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    INVALID = "invalid"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ScheduleResult:
    mirror_id: str
    outcome: ScheduleOutcome
    error: str | None = None


@dataclass(frozen=True, slots=True)
class ClientCommand:
    cmd: CmdVerb
    force: bool = False
