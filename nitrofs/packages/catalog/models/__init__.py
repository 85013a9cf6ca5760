"""模型包初始化，便于统一导入 ORM 实体并触发模型注册。"""

from nitrofs.packages.catalog.models.base import Base
from nitrofs.packages.catalog.models.directory import Directory
from nitrofs.packages.catalog.models.file_entry import FileEntry
from nitrofs.packages.catalog.models.file_partial import FilePartial

__all__ = ["Base", "Directory", "FileEntry", "FilePartial"]
