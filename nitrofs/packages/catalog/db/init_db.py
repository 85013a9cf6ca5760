"""Database bootstrapping utilities."""

from __future__ import annotations

from nitrofs.packages.catalog.core.constants import ROOT_DIRECTORY_ID, ROOT_DIRECTORY_PATH
from nitrofs.packages.catalog.core.logger import logger
from nitrofs.packages.catalog.crud.directory import directory_crud
from nitrofs.packages.catalog.db.session import SessionPool
from nitrofs.packages.catalog.models import Base


def init_db(pool: SessionPool) -> None:
    """Create all tables if they do not exist and make sure the root directory is present.

    On an empty database the root path is the first row ever inserted into
    ``directories`` and therefore receives id 1; on later startups the upsert
    simply returns the existing id.
    """
    Base.metadata.create_all(bind=pool.engine)

    with pool.transaction() as db:
        root_id = directory_crud.upsert_path(db, path=ROOT_DIRECTORY_PATH)
    if root_id != ROOT_DIRECTORY_ID:
        logger.error("Root directory %r has id=%s, expected %s", ROOT_DIRECTORY_PATH, root_id, ROOT_DIRECTORY_ID)
        raise RuntimeError(
            f"Root directory {ROOT_DIRECTORY_PATH!r} must have id {ROOT_DIRECTORY_ID}, found {root_id}"
        )
    logger.info("Database schema ready (root directory id=%s)", root_id)
