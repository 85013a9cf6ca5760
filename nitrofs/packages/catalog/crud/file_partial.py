"""分片 CRUD：存在性检查、按逻辑文件分组聚合与有序读取。"""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from nitrofs.packages.catalog.crud.base import CRUDBase
from nitrofs.packages.catalog.crud.query import QueryFilter, SortSpec
from nitrofs.packages.catalog.models.file_partial import FilePartial

reconstruction_order = SortSpec(
    options={},
    default=(FilePartial.part_number.asc(),),
    tiebreak=(FilePartial.partial_id.asc(),),
)
group_order = SortSpec(options={}, default=(FilePartial.original_filename.asc(),), tiebreak=(FilePartial.mime_type.asc(),))


class CRUDFilePartial(CRUDBase[FilePartial]):
    def exists_by_part_name(self, db: Session, *, part_name: str, directory_id: int) -> bool:
        query = self.query(db).filter(
            FilePartial.part_name == part_name,
            FilePartial.directory_id == directory_id,
        )
        return bool(db.query(query.exists()).scalar())

    def existing_part_names(self, db: Session, *, part_names: Iterable[str], directory_id: int) -> list[str]:
        names = sorted(set(part_names))
        if not names:
            return []
        rows = (
            db.query(FilePartial.part_name)
            .filter(FilePartial.directory_id == directory_id, FilePartial.part_name.in_(names))
            .order_by(FilePartial.part_name.asc())
            .all()
        )
        return [row[0] for row in rows]

    def list_by_original_filename(
        self, db: Session, *, original_filename: str, directory_id: int
    ) -> list[FilePartial]:
        filters = (
            QueryFilter()
            .equals(FilePartial.original_filename, original_filename)
            .equals(FilePartial.directory_id, directory_id)
        )
        return reconstruction_order.apply(filters.apply(self.query(db)), None).all()

    def list_grouped(self, db: Session, *, directory_id: int, search: Optional[str] = None) -> list[Row]:
        """每个 (original_filename, mime_type, directory_id) 聚合成一行。

        created_at 取最新分片，size 为分片大小之和，description 任取一个非空值（MAX）。
        """
        query = db.query(
            FilePartial.original_filename,
            FilePartial.mime_type,
            FilePartial.directory_id,
            func.max(FilePartial.created_at).label("created_at"),
            func.sum(FilePartial.part_size).label("size"),
            func.max(FilePartial.file_description).label("description"),
            func.count(FilePartial.partial_id).label("part_count"),
        )
        filters = (
            QueryFilter()
            .equals(FilePartial.directory_id, directory_id)
            .contains(search, FilePartial.original_filename)
        )
        query = filters.apply(query).group_by(
            FilePartial.original_filename,
            FilePartial.mime_type,
            FilePartial.directory_id,
        )
        return group_order.apply(query, None).all()

    def delete_by_original_filename(self, db: Session, *, original_filename: str, directory_id: int) -> int:
        return (
            self.query(db)
            .filter(
                FilePartial.original_filename == original_filename,
                FilePartial.directory_id == directory_id,
            )
            .delete(synchronize_session=False)
        )


file_partial_crud = CRUDFilePartial(FilePartial)
