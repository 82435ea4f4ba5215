from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from mirrormgr.db.models import CmdVerb, MirrorStatus
from mirrormgr.jobs.types import ClientCommand, MirrorSchedule, MirrorStatusReport, ScheduleOutcome


class MirrorStatusRequest(BaseModel):
    # Workers echo back the whole record; manager-owned timestamps are dropped.
    model_config = ConfigDict(extra="ignore")

    id: str | None = Field(default=None, max_length=128)
    status: MirrorStatus = MirrorStatus.NONE
    size: str = Field(default="", max_length=64)
    upstream: str = ""
    error_msg: str = ""
    is_master: bool = False
    alias: str = Field(default="", max_length=255)
    desc: str = ""
    url: str = Field(default="", max_length=2048)
    type: str = Field(default="", max_length=32)

    def to_report(self) -> MirrorStatusReport:
        return MirrorStatusReport(
            status=self.status,
            size=self.size,
            upstream=self.upstream,
            error_msg=self.error_msg,
            is_master=self.is_master,
            alias=self.alias,
            desc=self.desc,
            url=self.url,
            type=self.type,
        )


class MirrorSizeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str | None = None
    size: str = Field(default="", max_length=64)


class MirrorScheduleItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # A missing id is reported per item by the reconciler, not rejected here.
    id: str = ""
    next_schedule: int


class MirrorSchedulesRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    schedules: list[MirrorScheduleItem]

    def to_schedules(self) -> list[MirrorSchedule]:
        return [MirrorSchedule(mirror_id=item.id, next_schedule=item.next_schedule) for item in self.schedules]


class ClientCommandRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    cmd: CmdVerb
    force: bool = False

    def to_command(self) -> ClientCommand:
        return ClientCommand(cmd=self.cmd, force=self.force)


class MirrorJobResponse(BaseModel):
    id: str
    status: str
    last_online: int
    last_register: int
    last_started: int
    last_update: int
    last_ended: int
    scheduled: int
    size: str
    upstream: str
    error_msg: str
    is_master: bool
    alias: str
    desc: str
    url: str
    type: str


class ScheduleResultResponse(BaseModel):
    id: str
    outcome: ScheduleOutcome
    error: str | None


class ScheduleBatchResponse(BaseModel):
    results: list[ScheduleResultResponse]


class MessageResponse(BaseModel):
    message: str
