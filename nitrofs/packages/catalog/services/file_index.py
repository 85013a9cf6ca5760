"""文件索引服务：单对象文件的记录、查询与删除。"""

from __future__ import annotations

from typing import Optional

from nitrofs.packages.catalog.core.constants import DEFAULT_MIME_TYPE
from nitrofs.packages.catalog.core.exceptions import NotFoundError, translate_errors
from nitrofs.packages.catalog.core.logger import logger
from nitrofs.packages.catalog.crud.file_entry import file_entry_crud
from nitrofs.packages.catalog.db.session import SessionPool
from nitrofs.packages.catalog.models.file_entry import FileEntry
from nitrofs.packages.catalog.records import FileRecord, Locator


def _to_record(entry: FileEntry) -> FileRecord:
    return FileRecord(
        id=entry.id,
        locator=Locator(channel_id=entry.channel_id, message_id=entry.message_id),
        directory_id=entry.directory_id,
        file_name=entry.file_name,
        description=entry.file_description or "",
        size=entry.size,
        mime_type=entry.mime_type,
        created_at=entry.created_at,
    )


class FileIndex:
    def __init__(self, pool: SessionPool) -> None:
        self._pool = pool

    def record_file(
        self,
        locator: Locator,
        directory_id: int,
        file_name: str,
        description: Optional[str],
        size: int,
        mime_type: Optional[str],
    ) -> FileRecord:
        """写入一条文件记录；任何约束冲突（如目录不存在）或存储故障都抛出 ``InfrastructureError``。"""
        if size < 0:
            raise ValueError("size must be non-negative")
        payload = {
            "channel_id": locator.channel_id,
            "message_id": locator.message_id,
            "directory_id": directory_id,
            "file_name": file_name,
            "file_description": description or "",
            "size": size,
            "mime_type": mime_type or DEFAULT_MIME_TYPE,
        }
        with translate_errors("record_file", directory_id=directory_id, file_name=file_name):
            with self._pool.transaction() as db:
                record = _to_record(file_entry_crud.create(db, payload))
        logger.info("Recorded file %r (id=%s) in directory %s", file_name, record.id, directory_id)
        return record

    def get_file_by_id(self, file_id: int) -> FileRecord:
        with translate_errors("get_file_by_id", file_id=file_id):
            with self._pool.session() as db:
                entry = file_entry_crud.get(db, file_id)
                if entry is None:
                    raise NotFoundError("File not found", file_id=file_id)
                return _to_record(entry)

    def list_files(
        self,
        directory_id: int,
        search: Optional[str] = None,
        mime_type_prefix: Optional[str] = None,
        sort_by: Optional[str] = None,
    ) -> list[FileRecord]:
        with translate_errors("list_files", directory_id=directory_id):
            with self._pool.session() as db:
                entries = file_entry_crud.list_with_filters(
                    db,
                    directory_id=directory_id,
                    search=search,
                    mime_type_prefix=mime_type_prefix,
                    sort_by=sort_by,
                )
                return [_to_record(entry) for entry in entries]

    def delete_file(self, file_id: int) -> bool:
        with translate_errors("delete_file", file_id=file_id):
            with self._pool.transaction() as db:
                removed = file_entry_crud.delete_by_id(db, file_id)
        if removed:
            logger.info("Deleted file id=%s", file_id)
        return bool(removed)
