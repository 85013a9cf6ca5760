"""分片模型：超过外部存储单对象上限的文件被拆成多个分片，每个分片一行。

- (part_name, directory_id) 唯一，防止重试导致重复提交；
- (original_filename, mime_type, directory_id) 相同的分片属于同一个逻辑文件；
- 重组顺序为 part_number 升序（从 1 开始）。
"""

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import expression

from nitrofs.packages.catalog.core.constants import DEFAULT_MIME_TYPE
from nitrofs.packages.catalog.models.base import Base, CreatedAtMixin


class FilePartial(CreatedAtMixin, Base):
    __tablename__ = "file_partials"

    partial_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    channel_id: Mapped[str] = mapped_column(String(64), nullable=False)
    message_id: Mapped[str] = mapped_column(String(64), nullable=False)
    directory_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("directories.id", ondelete="RESTRICT"),
        nullable=False,
    )
    part_name: Mapped[str] = mapped_column(String(255), nullable=False)
    part_number: Mapped[int] = mapped_column(Integer, nullable=False)
    part_size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    original_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    file_description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False, default=DEFAULT_MIME_TYPE)
    uploaded_via_webhook: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )

    __table_args__ = (
        UniqueConstraint("part_name", "directory_id"),
        Index("ix_file_partials_directory_original", "directory_id", "original_filename"),
        CheckConstraint("part_number >= 1", name="part_number_positive"),
        CheckConstraint("part_size >= 0", name="part_size_non_negative"),
    )
