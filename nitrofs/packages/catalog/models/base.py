"""模型基类：统一声明式基类与通用审计字段。

本模块集中提供：
- Base：SQLAlchemy 声明式基类，带统一命名约定（约束名可预测，便于迁移与排查）；
- CreatedAtMixin：`created_at`，由数据库写入且之后不再变更。
"""

from datetime import datetime

from sqlalchemy import DateTime, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata_obj = MetaData(naming_convention=convention)


class Base(DeclarativeBase):
    """全局声明式基类，附带一致的命名约定。"""

    metadata = metadata_obj


class CreatedAtMixin:
    """创建时间字段，仅由数据库在插入时写入。"""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
