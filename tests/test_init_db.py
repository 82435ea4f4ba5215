from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest
from sqlalchemy import inspect

import mirrormgr.db.session as db_session_module
from mirrormgr.core.config import get_settings
from mirrormgr.db.init_db import initialize_database


def test_initialize_database_creates_table_once(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    state_root = tmp_path / "state"
    state_root.mkdir(parents=True, exist_ok=True)
    os.environ["MIRRORMGR_STATE_ROOT"] = state_root.as_posix()
    os.environ.pop("MIRRORMGR_DATABASE_URL", None)
    get_settings.cache_clear()
    db_session_module.dispose_engine()

    with caplog.at_level(logging.INFO, logger="mirrormgr.db.init_db"):
        initialize_database()
        initialize_database()

    created = [record for record in caplog.records if record.getMessage().startswith("Created mirror job table")]
    assert len(created) == 1
    assert inspect(db_session_module.get_engine()).has_table("mirror_jobs")
    assert (state_root / "mirrormgr.sqlite3").exists()
