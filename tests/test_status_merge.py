from __future__ import annotations

import pytest

from mirrormgr.db.models import MirrorStatus
from mirrormgr.jobs.merge import (
    merge_registration,
    merge_schedule,
    merge_size,
    merge_size_update,
    merge_status_report,
)
from mirrormgr.jobs.types import MirrorJobRecord, MirrorStatusReport


def make_record(**overrides: object) -> MirrorJobRecord:
    fields: dict[str, object] = {
        "id": "debian",
        "status": MirrorStatus.SYNCING,
        "last_online": 10,
        "last_register": 5,
        "last_started": 20,
        "last_update": 30,
        "last_ended": 40,
        "scheduled": 50,
        "size": "1.5T",
    }
    fields.update(overrides)
    return MirrorJobRecord(**fields)  # type: ignore[arg-type]


def test_pre_syncing_rising_edge_stamps_last_started() -> None:
    current = make_record(status=MirrorStatus.SYNCING)
    merged = merge_status_report(current, MirrorStatusReport(status=MirrorStatus.PRE_SYNCING), now=1000)
    assert merged.last_started == 1000
    assert merged.status == MirrorStatus.PRE_SYNCING


def test_repeated_pre_syncing_keeps_last_started() -> None:
    current = make_record(status=MirrorStatus.PRE_SYNCING)
    merged = merge_status_report(current, MirrorStatusReport(status=MirrorStatus.PRE_SYNCING), now=1000)
    assert merged.last_started == 20


def test_failed_report_stamps_last_ended_only() -> None:
    merged = merge_status_report(make_record(), MirrorStatusReport(status=MirrorStatus.FAILED), now=1000)
    assert merged.last_ended == 1000
    assert merged.last_update == 30


def test_success_report_stamps_last_update_and_last_ended() -> None:
    merged = merge_status_report(make_record(), MirrorStatusReport(status=MirrorStatus.SUCCESS), now=1000)
    assert merged.last_update == 1000
    assert merged.last_ended == 1000


@pytest.mark.parametrize("status", [MirrorStatus.SYNCING, MirrorStatus.PAUSED, MirrorStatus.DISABLED, MirrorStatus.NONE])
def test_non_transition_reports_carry_timestamps_forward(status: MirrorStatus) -> None:
    current = make_record(status=MirrorStatus.SYNCING)
    merged = merge_status_report(current, MirrorStatusReport(status=status), now=1000)
    assert merged.last_online == 1000
    assert (merged.last_started, merged.last_update, merged.last_ended) == (20, 30, 40)
    assert merged.last_register == 5
    assert merged.scheduled == 50


@pytest.mark.parametrize("incoming", ["", "unknown", None])
def test_unknown_size_never_replaces_known_size(incoming: str | None) -> None:
    assert merge_size("1.5T", incoming) == "1.5T"


def test_known_size_replaces_previous_size() -> None:
    assert merge_size("1.5T", "1.6T") == "1.6T"
    assert merge_size("unknown", "200G") == "200G"
    assert merge_size("", "unknown") == "unknown"


def test_size_stays_known_across_report_sequence() -> None:
    record = make_record(size="")
    reports = [
        MirrorStatusReport(status=MirrorStatus.SYNCING, size="unknown"),
        MirrorStatusReport(status=MirrorStatus.SUCCESS, size="800G"),
        MirrorStatusReport(status=MirrorStatus.PRE_SYNCING, size=""),
        MirrorStatusReport(status=MirrorStatus.FAILED, size="unknown"),
    ]
    sizes = []
    for now, report in enumerate(reports, start=100):
        record = merge_status_report(record, report, now=now)
        sizes.append(record.size)
    assert sizes == ["unknown", "800G", "800G", "800G"]

    record = merge_size_update(record, "unknown")
    assert record.size == "800G"
    record = merge_size_update(record, "900G")
    assert record.size == "900G"


def test_reported_metadata_overwrites_unconditionally() -> None:
    current = make_record(
        upstream="rsync://old/", error_msg="boom", is_master=True, alias="Debian", desc="old", url="/debian", type="mirror"
    )
    merged = merge_status_report(current, MirrorStatusReport(status=MirrorStatus.SUCCESS), now=1000)
    assert merged.upstream == ""
    assert merged.error_msg == ""
    assert merged.is_master is False
    assert (merged.alias, merged.desc, merged.url, merged.type) == ("", "", "", "")

    report = MirrorStatusReport(
        status=MirrorStatus.SYNCING, alias="Debian Archive", desc="Debian packages", url="/debian/", type="proxy"
    )
    merged = merge_status_report(current, report, now=1001)
    assert (merged.alias, merged.desc, merged.url, merged.type) == ("Debian Archive", "Debian packages", "/debian/", "proxy")


def test_first_registration_merges_against_empty_record() -> None:
    report = MirrorStatusReport(status=MirrorStatus.PRE_SYNCING, size="unknown", upstream="rsync://up/")
    record = merge_registration(None, "ubuntu", report, now=1000)
    assert record.id == "ubuntu"
    assert record.last_online == 1000
    assert record.last_register == 1000
    assert record.last_started == 1000
    assert record.last_update == 0
    assert record.last_ended == 0
    assert record.scheduled == 0
    assert record.upstream == "rsync://up/"


def test_re_registration_keeps_history() -> None:
    record = merge_registration(make_record(), "debian", MirrorStatusReport(status=MirrorStatus.NONE), now=1000)
    assert record.last_register == 1000
    assert (record.last_started, record.last_update, record.last_ended) == (20, 30, 40)
    assert record.size == "1.5T"


def test_merge_schedule_is_noop_for_same_value() -> None:
    current = make_record(scheduled=50)
    assert merge_schedule(current, 50) is None
    rescheduled = merge_schedule(current, 60)
    assert rescheduled is not None
    assert rescheduled.scheduled == 60
    assert rescheduled.last_online == current.last_online
    assert current.scheduled == 50
