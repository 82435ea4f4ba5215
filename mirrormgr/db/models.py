from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import BigInteger, Boolean, DateTime, Enum as SAEnum, Index, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class MirrorStatus(str, Enum):
    NONE = "none"
    PRE_SYNCING = "pre-syncing"
    SYNCING = "syncing"
    SUCCESS = "success"
    FAILED = "failed"
    PAUSED = "paused"
    DISABLED = "disabled"


class CmdVerb(str, Enum):
    START = "start"
    STOP = "stop"
    RESTART = "restart"
    PING = "ping"
    DISABLE = "disable"
    UPDATE = "update"


class MirrorJob(Base):
    __tablename__ = "mirror_jobs"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    status: Mapped[MirrorStatus] = mapped_column(
        SAEnum(MirrorStatus, native_enum=False, values_callable=_enum_values),
        nullable=False,
        default=MirrorStatus.NONE,
    )

    last_online: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    last_register: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    last_started: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    last_update: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    last_ended: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    scheduled: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    size: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    upstream: Mapped[str] = mapped_column(String(2048), nullable=False, default="")
    error_msg: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_master: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    alias: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    desc: Mapped[str] = mapped_column(Text, nullable=False, default="")
    url: Mapped[str] = mapped_column(String(2048), nullable=False, default="")
    type: Mapped[str] = mapped_column(String(32), nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("ix_mirror_jobs_status", "status"),
        Index("ix_mirror_jobs_scheduled", "scheduled"),
    )
