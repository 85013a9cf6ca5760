"""目录索引对外返回的不可变值对象。

所有列表/查询操作都返回完全物化的记录，而不是绑定在会话上的 ORM 实体，
调用方可以在会话归还之后安全地持有和比较这些对象。
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_serializer

from nitrofs.packages.catalog.core.timezone import format_datetime


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


class Locator(_Record):
    """外部对象存储中的定位符，只对检索方有意义。"""

    channel_id: str
    message_id: str


class DirectoryRecord(_Record):
    id: int
    path: str
    created_at: datetime
    file_count: int = 0

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> Optional[str]:
        return format_datetime(value)


class FileRecord(_Record):
    id: int
    locator: Locator
    directory_id: int
    file_name: str
    description: str = ""
    size: int
    mime_type: str
    created_at: datetime

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> Optional[str]:
        return format_datetime(value)


class FilePartialRecord(_Record):
    partial_id: int
    locator: Locator
    directory_id: int
    part_name: str
    part_number: int
    part_size: int
    original_filename: str
    description: str = ""
    mime_type: str
    uploaded_via_webhook: bool = True
    created_at: datetime

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> Optional[str]:
        return format_datetime(value)


class PartialGroupRecord(_Record):
    """同一逻辑文件的所有分片聚合成的一行，用于与普通文件并列展示。"""

    original_filename: str
    mime_type: str
    directory_id: int
    created_at: datetime
    size: int
    description: Optional[str] = None
    part_count: int

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> Optional[str]:
        return format_datetime(value)


class ReconstructionPlan(_Record):
    """按 part_number 升序排列的分片清单，以及对编号连续性的诊断。

    编号缺失或重复不会阻止写入，只在这里报告；是否据此拒绝下载由检索方决定。
    """

    original_filename: str
    directory_id: int
    parts: tuple[FilePartialRecord, ...]
    total_size: int
    missing_part_numbers: tuple[int, ...] = Field(default_factory=tuple)
    duplicate_part_numbers: tuple[int, ...] = Field(default_factory=tuple)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_complete(self) -> bool:
        return not self.missing_part_numbers and not self.duplicate_part_numbers

    @property
    def locators(self) -> list[Locator]:
        return [part.locator for part in self.parts]
