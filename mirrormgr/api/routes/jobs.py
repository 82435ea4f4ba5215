from __future__ import annotations

from functools import lru_cache
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, status

from mirrormgr.api.schemas.jobs import (
    ClientCommandRequest,
    MessageResponse,
    MirrorJobResponse,
    MirrorSchedulesRequest,
    MirrorSizeRequest,
    MirrorStatusRequest,
    ScheduleBatchResponse,
    ScheduleResultResponse,
)
from mirrormgr.core.config import get_settings
from mirrormgr.db.session import get_session_factory
from mirrormgr.jobs.errors import (
    MirrorExistsError,
    MirrorNotFoundError,
    MirrorValidationError,
    RelayDeliveryError,
    StoreError,
)
from mirrormgr.jobs.relay import CommandRelay
from mirrormgr.jobs.service import MirrorJobService, record_to_dict
from mirrormgr.jobs.store import JobRecordStore

router = APIRouter(tags=["jobs"])


@lru_cache(maxsize=1)
def get_command_relay() -> CommandRelay:
    return CommandRelay(settings=get_settings())


@lru_cache(maxsize=1)
def get_job_service() -> MirrorJobService:
    # One instance per process so every request shares the same gate.
    return MirrorJobService(store=JobRecordStore(get_session_factory()), relay=get_command_relay())


def _raise_http_error(exc: Exception) -> NoReturn:
    if isinstance(exc, MirrorValidationError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if isinstance(exc, MirrorNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, MirrorExistsError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if isinstance(exc, RelayDeliveryError):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc


@router.get("/jobs", response_model=list[MirrorJobResponse])
def list_jobs(service: MirrorJobService = Depends(get_job_service)) -> list[MirrorJobResponse]:
    try:
        records = service.list_jobs()
    except StoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"failed to list mirrors: {exc}"
        ) from exc
    return [MirrorJobResponse.model_validate(record_to_dict(record)) for record in records]


@router.post("/jobs", response_model=MirrorJobResponse)
def register_mirror(request: MirrorStatusRequest, service: MirrorJobService = Depends(get_job_service)) -> MirrorJobResponse:
    try:
        record = service.register_mirror(request.id or "", request.to_report())
    except (MirrorValidationError, MirrorExistsError, StoreError) as exc:
        _raise_http_error(exc)
    return MirrorJobResponse.model_validate(record_to_dict(record))


@router.post("/schedules", response_model=ScheduleBatchResponse)
def update_schedules(request: MirrorSchedulesRequest, service: MirrorJobService = Depends(get_job_service)) -> ScheduleBatchResponse:
    results = service.update_schedules(request.to_schedules())
    return ScheduleBatchResponse(
        results=[ScheduleResultResponse(id=item.mirror_id, outcome=item.outcome, error=item.error) for item in results]
    )


@router.get("/jobs/{mirror_id}", response_model=MirrorJobResponse)
def get_job(mirror_id: str, service: MirrorJobService = Depends(get_job_service)) -> MirrorJobResponse:
    try:
        record = service.get_job(mirror_id)
    except (MirrorValidationError, MirrorNotFoundError, StoreError) as exc:
        _raise_http_error(exc)
    return MirrorJobResponse.model_validate(record_to_dict(record))


@router.post("/jobs/{mirror_id}", response_model=MirrorJobResponse)
def update_job_status(
    mirror_id: str,
    request: MirrorStatusRequest,
    service: MirrorJobService = Depends(get_job_service),
) -> MirrorJobResponse:
    try:
        record = service.update_job_status(mirror_id, request.to_report())
    except (MirrorValidationError, MirrorNotFoundError, StoreError) as exc:
        _raise_http_error(exc)
    return MirrorJobResponse.model_validate(record_to_dict(record))


@router.post("/jobs/{mirror_id}/size", response_model=MirrorJobResponse)
def update_mirror_size(
    mirror_id: str,
    request: MirrorSizeRequest,
    service: MirrorJobService = Depends(get_job_service),
) -> MirrorJobResponse:
    try:
        record = service.update_mirror_size(mirror_id, request.size)
    except (MirrorValidationError, MirrorNotFoundError, StoreError) as exc:
        _raise_http_error(exc)
    return MirrorJobResponse.model_validate(record_to_dict(record))


@router.post("/jobs/{mirror_id}/cmd", response_model=MessageResponse)
def send_command(
    mirror_id: str,
    request: ClientCommandRequest,
    service: MirrorJobService = Depends(get_job_service),
) -> MessageResponse:
    try:
        service.send_command(mirror_id, request.to_command())
    except (MirrorValidationError, MirrorNotFoundError, StoreError, RelayDeliveryError) as exc:
        _raise_http_error(exc)
    return MessageResponse(message=f"successfully send command to mirror {mirror_id}")


@router.delete("/jobs/{mirror_id}", response_model=MessageResponse)
def delete_job(mirror_id: str, service: MirrorJobService = Depends(get_job_service)) -> MessageResponse:
    try:
        service.delete_job(mirror_id)
    except (MirrorValidationError, MirrorNotFoundError, StoreError) as exc:
        _raise_http_error(exc)
    return MessageResponse(message="deleted")
