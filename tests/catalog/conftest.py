"""目录索引用例共享的夹具：构造定位符、改写创建时间。"""

from datetime import datetime
from itertools import count
from typing import Callable

import pytest
from sqlalchemy import update

from nitrofs.packages.catalog.db.session import SessionPool
from nitrofs.packages.catalog.models.file_entry import FileEntry
from nitrofs.packages.catalog.models.file_partial import FilePartial
from nitrofs.packages.catalog.records import Locator


@pytest.fixture()
def make_locator() -> Callable[..., Locator]:
    message_ids = count(1000)

    def _make(channel_id: str = "42") -> Locator:
        return Locator(channel_id=channel_id, message_id=str(next(message_ids)))

    return _make


@pytest.fixture()
def set_created_at(pool: SessionPool) -> Callable[[object, int, datetime], None]:
    """直接改写 created_at，便于构造确定的时间顺序（正常流程中该字段不可变）。"""

    def _set(model, row_id: int, value: datetime) -> None:
        pk = FilePartial.partial_id if model is FilePartial else FileEntry.id
        with pool.transaction() as db:
            db.execute(update(model).where(pk == row_id).values(created_at=value))

    return _set
