"""文件记录 CRUD。"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from nitrofs.packages.catalog.core.constants import SORT_BY_CREATED_AT, SORT_BY_FILE_NAME, SORT_BY_SIZE
from nitrofs.packages.catalog.crud.base import CRUDBase
from nitrofs.packages.catalog.crud.query import QueryFilter, SortSpec
from nitrofs.packages.catalog.models.file_entry import FileEntry

file_sort = SortSpec(
    options={
        SORT_BY_FILE_NAME: (FileEntry.file_name.asc(),),
        SORT_BY_SIZE: (FileEntry.size.desc(),),
        SORT_BY_CREATED_AT: (FileEntry.created_at.desc(),),
    },
    default=(FileEntry.created_at.desc(),),
    tiebreak=(FileEntry.id.desc(),),
)


class CRUDFileEntry(CRUDBase[FileEntry]):
    def list_with_filters(
        self,
        db: Session,
        *,
        directory_id: int,
        search: Optional[str] = None,
        mime_type_prefix: Optional[str] = None,
        sort_by: Optional[str] = None,
    ) -> list[FileEntry]:
        filters = (
            QueryFilter()
            .equals(FileEntry.directory_id, directory_id)
            .contains(search, FileEntry.file_name, FileEntry.file_description)
            .startswith(FileEntry.mime_type, mime_type_prefix)
        )
        query = filters.apply(self.query(db))
        return file_sort.apply(query, sort_by).all()


file_entry_crud = CRUDFileEntry(FileEntry)
