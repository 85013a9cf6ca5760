"""分片文件索引服务。

超出外部存储单对象上限的文件被拆成多个分片分别上传，每个分片记录一行。
本服务负责：
- 写入前的存在性检查（仅用于提示，真正的去重由唯一约束保证）；
- 写入分片，唯一约束冲突转换为 ``DuplicatePartialError``；
- 按逻辑文件分组聚合，与普通文件并列展示；
- 按 part_number 升序返回分片，供检索方按顺序拼接；
- 按逻辑文件整体删除。
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError

from nitrofs.packages.catalog.core.constants import DEFAULT_MIME_TYPE
from nitrofs.packages.catalog.core.exceptions import (
    DuplicatePartialError,
    NotFoundError,
    translate_errors,
)
from nitrofs.packages.catalog.core.logger import logger
from nitrofs.packages.catalog.crud.file_partial import file_partial_crud
from nitrofs.packages.catalog.db.session import SessionPool
from nitrofs.packages.catalog.models.file_partial import FilePartial
from nitrofs.packages.catalog.records import (
    FilePartialRecord,
    Locator,
    PartialGroupRecord,
    ReconstructionPlan,
)


def _to_record(partial: FilePartial) -> FilePartialRecord:
    return FilePartialRecord(
        partial_id=partial.partial_id,
        locator=Locator(channel_id=partial.channel_id, message_id=partial.message_id),
        directory_id=partial.directory_id,
        part_name=partial.part_name,
        part_number=partial.part_number,
        part_size=partial.part_size,
        original_filename=partial.original_filename,
        description=partial.file_description or "",
        mime_type=partial.mime_type,
        uploaded_via_webhook=partial.uploaded_via_webhook,
        created_at=partial.created_at,
    )


def find_sequence_problems(part_numbers: Iterable[int]) -> tuple[tuple[int, ...], tuple[int, ...]]:
    """返回 (缺失的编号, 重复的编号)，编号应从 1 连续递增到最大值。"""
    counts = Counter(part_numbers)
    if not counts:
        return (), ()
    highest = max(counts)
    missing = tuple(n for n in range(1, highest + 1) if n not in counts)
    duplicates = tuple(sorted(n for n, seen in counts.items() if seen > 1))
    return missing, duplicates


class PartialFileIndex:
    def __init__(self, pool: SessionPool) -> None:
        self._pool = pool

    def check_partial_exists(self, part_name: str, directory_id: int) -> bool:
        with translate_errors("check_partial_exists", part_name=part_name, directory_id=directory_id):
            with self._pool.session() as db:
                return file_partial_crud.exists_by_part_name(db, part_name=part_name, directory_id=directory_id)

    def find_existing_parts(self, part_names: Iterable[str], directory_id: int) -> list[str]:
        """批量版本的存在性检查：返回已存在的 part_name（升序）。"""
        part_names = list(part_names)
        with translate_errors("find_existing_parts", directory_id=directory_id):
            with self._pool.session() as db:
                return file_partial_crud.existing_part_names(db, part_names=part_names, directory_id=directory_id)

    def record_partial(
        self,
        locator: Locator,
        directory_id: int,
        part_name: str,
        part_number: int,
        part_size: int,
        original_filename: str,
        description: Optional[str],
        mime_type: Optional[str],
        uploaded_via_webhook: bool = True,
    ) -> FilePartialRecord:
        """写入一个分片。

        (part_name, directory_id) 唯一约束是最终的去重依据：即使调用方事先检查过，
        并发重试仍可能在这里冲突，此时抛出 ``DuplicatePartialError`` 而不是基础设施错误。
        """
        if part_number < 1:
            raise ValueError("part_number must be >= 1")
        if part_size < 0:
            raise ValueError("part_size must be non-negative")
        payload = {
            "channel_id": locator.channel_id,
            "message_id": locator.message_id,
            "directory_id": directory_id,
            "part_name": part_name,
            "part_number": part_number,
            "part_size": part_size,
            "original_filename": original_filename,
            "file_description": description or "",
            "mime_type": mime_type or DEFAULT_MIME_TYPE,
            "uploaded_via_webhook": uploaded_via_webhook,
        }
        context = {"part_name": part_name, "directory_id": directory_id}
        with translate_errors("record_partial", **context):
            try:
                with self._pool.transaction() as db:
                    record = _to_record(file_partial_crud.create(db, payload))
            except IntegrityError as exc:
                # 外键等其它约束冲突仍按基础设施错误处理
                if not self.check_partial_exists(part_name, directory_id):
                    raise
                logger.warning("Duplicate partial %r rejected in directory %s", part_name, directory_id)
                raise DuplicatePartialError("File partial already exists in this directory", **context) from exc
        logger.info(
            "Recorded partial %r (#%s of %r) in directory %s",
            part_name,
            part_number,
            original_filename,
            directory_id,
        )
        return record

    def get_partials_by_original_filename(self, original_filename: str, directory_id: int) -> list[FilePartialRecord]:
        """按 part_number 升序返回分片，这是重组逻辑文件的规范顺序。"""
        with translate_errors(
            "get_partials_by_original_filename",
            original_filename=original_filename,
            directory_id=directory_id,
        ):
            with self._pool.session() as db:
                partials = file_partial_crud.list_by_original_filename(
                    db, original_filename=original_filename, directory_id=directory_id
                )
                return [_to_record(partial) for partial in partials]

    def get_reconstruction_plan(self, original_filename: str, directory_id: int) -> ReconstructionPlan:
        parts = self.get_partials_by_original_filename(original_filename, directory_id)
        if not parts:
            raise NotFoundError(
                "No partials found for file",
                original_filename=original_filename,
                directory_id=directory_id,
            )
        missing, duplicates = find_sequence_problems(part.part_number for part in parts)
        return ReconstructionPlan(
            original_filename=original_filename,
            directory_id=directory_id,
            parts=tuple(parts),
            total_size=sum(part.part_size for part in parts),
            missing_part_numbers=missing,
            duplicate_part_numbers=duplicates,
        )

    def list_grouped_partials(self, directory_id: int, search: Optional[str] = None) -> list[PartialGroupRecord]:
        with translate_errors("list_grouped_partials", directory_id=directory_id):
            with self._pool.session() as db:
                rows = file_partial_crud.list_grouped(db, directory_id=directory_id, search=search)
                return [
                    PartialGroupRecord(
                        original_filename=row.original_filename,
                        mime_type=row.mime_type,
                        directory_id=row.directory_id,
                        created_at=row.created_at,
                        size=int(row.size or 0),
                        description=row.description,
                        part_count=int(row.part_count),
                    )
                    for row in rows
                ]

    def delete_partials(self, original_filename: str, directory_id: int) -> bool:
        with translate_errors("delete_partials", original_filename=original_filename, directory_id=directory_id):
            with self._pool.transaction() as db:
                removed = file_partial_crud.delete_by_original_filename(
                    db, original_filename=original_filename, directory_id=directory_id
                )
        if removed:
            logger.info("Deleted %s partials of %r in directory %s", removed, original_filename, directory_id)
        return bool(removed)
