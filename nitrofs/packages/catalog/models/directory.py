"""目录模型：虚拟目录层级中的一个节点。

存储规则：
- path 全局唯一，形如 "docs/images"（不以 '/' 开头或结尾）；
- 根目录 id=1、path="root"，由 init_db 创建且不可删除；
- 文件数不入库，查询时按 files 表实时统计。
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from nitrofs.packages.catalog.models.base import Base, CreatedAtMixin


class Directory(CreatedAtMixin, Base):
    __tablename__ = "directories"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    path: Mapped[str] = mapped_column(String(1024), unique=True, nullable=False)
