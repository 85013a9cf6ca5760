"""文件记录模型：单个外部对象即可容纳的文件。

文件字节保存在外部对象存储中，这里只记录定位符（channel_id, message_id）与元数据。
记录在上传成功后写入，之后只会被删除，不会被修改。
"""

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nitrofs.packages.catalog.core.constants import DEFAULT_MIME_TYPE
from nitrofs.packages.catalog.models.base import Base, CreatedAtMixin


class FileEntry(CreatedAtMixin, Base):
    __tablename__ = "files"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    channel_id: Mapped[str] = mapped_column(String(64), nullable=False)
    message_id: Mapped[str] = mapped_column(String(64), nullable=False)
    directory_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("directories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False, default=DEFAULT_MIME_TYPE)

    __table_args__ = (CheckConstraint("size >= 0", name="size_non_negative"),)
