"""目录服务：路径的幂等 upsert、带实时文件计数的目录列表与受保护的删除。"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from nitrofs.packages.catalog.core.constants import ROOT_DIRECTORY_ID
from nitrofs.packages.catalog.core.exceptions import ConflictError, NotFoundError, translate_errors
from nitrofs.packages.catalog.core.logger import logger
from nitrofs.packages.catalog.crud.directory import directory_crud
from nitrofs.packages.catalog.db.session import SessionPool
from nitrofs.packages.catalog.models.directory import Directory
from nitrofs.packages.catalog.records import DirectoryRecord


def normalize_directory_path(path: Optional[str]) -> str:
    """去掉首尾空白与 '/'，并折叠重复的分隔符；空路径返回空字符串。"""
    raw = (path or "").strip().strip("/")
    return "/".join(segment.strip() for segment in raw.split("/") if segment.strip())


def _to_record(directory: Directory, file_count: int) -> DirectoryRecord:
    return DirectoryRecord(
        id=directory.id,
        path=directory.path,
        created_at=directory.created_at,
        file_count=file_count,
    )


def _raise_if_referenced(db: Session, directory_id: int, cause: Optional[BaseException] = None) -> None:
    if directory_crud.has_files(db, directory_id):
        raise ConflictError("Cannot delete directory: contains files", directory_id=directory_id) from cause
    if directory_crud.has_partials(db, directory_id):
        raise ConflictError("Cannot delete directory: contains file partials", directory_id=directory_id) from cause


class DirectoryCatalog:
    def __init__(self, pool: SessionPool) -> None:
        self._pool = pool

    def create_or_get_directory(self, path: str) -> int:
        """路径不存在则创建，已存在则返回原有 id；空路径解析为根目录。"""
        normalized = normalize_directory_path(path)
        if not normalized:
            return ROOT_DIRECTORY_ID
        with translate_errors("create_or_get_directory", path=normalized):
            with self._pool.transaction() as db:
                directory_id = directory_crud.upsert_path(db, path=normalized)
        logger.info("Resolved directory %r to id=%s", normalized, directory_id)
        return directory_id

    def list_directories(self, search: Optional[str] = None) -> list[DirectoryRecord]:
        with translate_errors("list_directories", search=search):
            with self._pool.session() as db:
                rows = directory_crud.list_with_file_counts(db, search=search)
                return [_to_record(directory, count) for directory, count in rows]

    def get_directory(self, directory_id: int) -> DirectoryRecord:
        with translate_errors("get_directory", directory_id=directory_id):
            with self._pool.session() as db:
                row = directory_crud.get_with_file_count(db, directory_id)
                if row is None:
                    raise NotFoundError("Directory not found", directory_id=directory_id)
                return _to_record(*row)

    def delete_directory(self, directory_id: int) -> bool:
        """删除空目录。

        根目录以及仍被文件或分片引用的目录抛出 ``ConflictError``；目录不存在时返回 ``False``。
        删除语句自带“无引用”条件；并发写入在删除之后才提交时，外键约束失败同样按冲突处理。
        """
        if directory_id == ROOT_DIRECTORY_ID:
            raise ConflictError("Cannot delete root directory", directory_id=directory_id)

        with translate_errors("delete_directory", directory_id=directory_id):
            try:
                with self._pool.transaction() as db:
                    removed = directory_crud.delete_if_unreferenced(db, directory_id)
                    if not removed:
                        _raise_if_referenced(db, directory_id)
            except IntegrityError as exc:
                # 外键检查看到了删除快照之后提交的引用，在新会话中确认原因
                with self._pool.session() as db:
                    _raise_if_referenced(db, directory_id, cause=exc)
                raise
        if removed:
            logger.info("Deleted directory id=%s", directory_id)
        return bool(removed)
