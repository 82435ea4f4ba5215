from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from mirrormgr.db.models import MirrorJob
from mirrormgr.jobs.errors import MirrorExistsError, MirrorNotFoundError, StoreError
from mirrormgr.jobs.types import MirrorJobRecord

_MUTABLE_FIELDS = (
    "status",
    "last_online",
    "last_register",
    "last_started",
    "last_update",
    "last_ended",
    "scheduled",
    "size",
    "upstream",
    "error_msg",
    "is_master",
    "alias",
    "desc",
    "url",
    "type",
)


class JobRecordStore:
    """Keyed storage of mirror job records.

    Calls are individually committed and carry no version check, so a
    concurrent get/update pair from two callers can lose a write. Callers
    serialize their read-modify-write sequences through ``ReadWriteGate``.
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def get(self, mirror_id: str) -> MirrorJobRecord:
        try:
            with self._session_factory() as session:
                row = session.get(MirrorJob, mirror_id)
                if row is None:
                    raise MirrorNotFoundError(f"Mirror not found: {mirror_id}")
                return self._to_record(row)
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to get mirror {mirror_id}: {exc}") from exc

    def list(self) -> list[MirrorJobRecord]:
        try:
            with self._session_factory() as session:
                rows = session.scalars(select(MirrorJob).order_by(MirrorJob.id.asc())).all()
                return [self._to_record(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to list mirrors: {exc}") from exc

    def create(self, record: MirrorJobRecord) -> MirrorJobRecord:
        try:
            with self._session_factory() as session:
                row = MirrorJob(id=record.id)
                self._apply(row, record)
                session.add(row)
                try:
                    session.commit()
                except IntegrityError as exc:
                    session.rollback()
                    raise MirrorExistsError(f"Mirror already exists: {record.id}") from exc
                return self._to_record(row)
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to create mirror {record.id}: {exc}") from exc

    def update(self, record: MirrorJobRecord) -> MirrorJobRecord:
        try:
            with self._session_factory() as session:
                row = session.get(MirrorJob, record.id)
                if row is None:
                    raise MirrorNotFoundError(f"Mirror not found: {record.id}")
                self._apply(row, record)
                session.commit()
                return self._to_record(row)
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to update mirror {record.id}: {exc}") from exc

    def delete(self, mirror_id: str) -> None:
        try:
            with self._session_factory() as session:
                row = session.get(MirrorJob, mirror_id)
                if row is None:
                    raise MirrorNotFoundError(f"Mirror not found: {mirror_id}")
                session.delete(row)
                session.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to delete mirror {mirror_id}: {exc}") from exc

    def _apply(self, row: MirrorJob, record: MirrorJobRecord) -> None:
        for field in _MUTABLE_FIELDS:
            setattr(row, field, getattr(record, field))

    def _to_record(self, row: MirrorJob) -> MirrorJobRecord:
        return MirrorJobRecord(
            id=row.id,
            status=row.status,
            last_online=row.last_online,
            last_register=row.last_register,
            last_started=row.last_started,
            last_update=row.last_update,
            last_ended=row.last_ended,
            scheduled=row.scheduled,
            size=row.size,
            upstream=row.upstream,
            error_msg=row.error_msg,
            is_master=row.is_master,
            alias=row.alias,
            desc=row.desc,
            url=row.url,
            type=row.type,
        )
