from mirrormgr.jobs.errors import (
    MirrorExistsError,
    MirrorNotFoundError,
    MirrorValidationError,
    RelayDeliveryError,
    StoreError,
)
from mirrormgr.jobs.service import MirrorJobService, record_to_dict
from mirrormgr.jobs.types import (
    ClientCommand,
    MirrorJobRecord,
    MirrorSchedule,
    MirrorStatusReport,
    ScheduleOutcome,
    ScheduleResult,
)

__all__ = [
    "MirrorJobService",
    "MirrorJobRecord",
    "MirrorStatusReport",
    "MirrorSchedule",
    "ScheduleOutcome",
    "ScheduleResult",
    "ClientCommand",
    "MirrorValidationError",
    "MirrorNotFoundError",
    "MirrorExistsError",
    "StoreError",
    "RelayDeliveryError",
    "record_to_dict",
]
