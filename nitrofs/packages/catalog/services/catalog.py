"""目录索引门面：在同一个会话池上组合目录、文件与分片三个组件。"""

from __future__ import annotations

from nitrofs.packages.catalog.db.session import SessionPool
from nitrofs.packages.catalog.services.directory_catalog import DirectoryCatalog
from nitrofs.packages.catalog.services.file_index import FileIndex
from nitrofs.packages.catalog.services.partial_file_index import PartialFileIndex


class Catalog:
    def __init__(self, pool: SessionPool) -> None:
        self.pool = pool
        self.directories = DirectoryCatalog(pool)
        self.files = FileIndex(pool)
        self.partials = PartialFileIndex(pool)

    def health_check(self) -> bool:
        return self.pool.health_check()

    def close(self) -> None:
        self.pool.close()
