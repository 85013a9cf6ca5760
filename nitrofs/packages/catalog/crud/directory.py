"""目录 CRUD：原子化的路径 upsert、带文件计数的列表与受保护的删除。"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import exists, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from nitrofs.packages.catalog.crud.base import CRUDBase
from nitrofs.packages.catalog.crud.query import QueryFilter, SortSpec
from nitrofs.packages.catalog.models.directory import Directory
from nitrofs.packages.catalog.models.file_entry import FileEntry
from nitrofs.packages.catalog.models.file_partial import FilePartial

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

directory_sort = SortSpec(options={"path": (Directory.path.asc(),)}, default=(Directory.path.asc(),))


class CRUDDirectory(CRUDBase[Directory]):
    def upsert_path(self, db: Session, *, path: str) -> int:
        """INSERT ... ON CONFLICT (path) DO UPDATE ... RETURNING id，一条语句完成。

        冲突时对 path 做一次无变化的更新，使 RETURNING 总能带回已有行的 id。
        """
        dialect = db.get_bind().dialect.name
        insert = _INSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Directory upsert is not supported on dialect {dialect!r}")
        stmt = insert(Directory).values(path=path)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Directory.path],
            set_={"path": stmt.excluded.path},
        ).returning(Directory.id)
        return int(db.execute(stmt).scalar_one())

    def _with_file_counts(self, db: Session):
        file_count = func.count(FileEntry.id).label("file_count")
        return (
            db.query(Directory, file_count)
            .outerjoin(FileEntry, FileEntry.directory_id == Directory.id)
            .group_by(Directory.id)
        )

    def list_with_file_counts(
        self, db: Session, *, search: Optional[str] = None
    ) -> list[tuple[Directory, int]]:
        filters = QueryFilter().contains(search, Directory.path)
        query = filters.apply(self._with_file_counts(db))
        return [(row[0], int(row[1])) for row in directory_sort.apply(query, "path").all()]

    def get_with_file_count(self, db: Session, id: int) -> Optional[tuple[Directory, int]]:
        row = self._with_file_counts(db).filter(Directory.id == id).first()
        if row is None:
            return None
        return row[0], int(row[1])

    def has_files(self, db: Session, id: int) -> bool:
        return bool(db.scalar(select(exists().where(FileEntry.directory_id == id))))

    def has_partials(self, db: Session, id: int) -> bool:
        return bool(db.scalar(select(exists().where(FilePartial.directory_id == id))))

    def delete_if_unreferenced(self, db: Session, id: int) -> int:
        """仅当没有任何文件或分片引用该目录时删除，检查与删除在同一条语句内完成。"""
        referenced = exists().where(FileEntry.directory_id == id)
        partial_referenced = exists().where(FilePartial.directory_id == id)
        return (
            self.query(db)
            .filter(Directory.id == id)
            .filter(~referenced, ~partial_referenced)
            .delete(synchronize_session=False)
        )


directory_crud = CRUDDirectory(Directory)
