from __future__ import annotations

import logging

from sqlalchemy import inspect

from mirrormgr.db.models import Base, MirrorJob
from mirrormgr.db.session import get_engine

logger = logging.getLogger(__name__)


def initialize_database() -> None:
    engine = get_engine()
    created = not inspect(engine).has_table(MirrorJob.__tablename__)
    Base.metadata.create_all(bind=engine)
    if created:
        logger.info("Created mirror job table at %s", engine.url.render_as_string(hide_password=True))
