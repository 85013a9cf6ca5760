"""文件记录请求/响应模型。"""

from typing import Optional

from pydantic import BaseModel, Field

from nitrofs.packages.catalog.api.v1.schemas.common import DeletionResult, ResponseEnvelope
from nitrofs.packages.catalog.records import FileRecord, Locator


class FileCreateBody(BaseModel):
    channelId: str = Field(..., min_length=1, max_length=64)
    messageId: str = Field(..., min_length=1, max_length=64)
    directoryId: int = Field(..., ge=1)
    fileName: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = ""
    size: int = Field(..., ge=0)
    mimeType: Optional[str] = None

    @property
    def locator(self) -> Locator:
        return Locator(channel_id=self.channelId, message_id=self.messageId)


FileListResponse = ResponseEnvelope[list[FileRecord]]
FileDetailResponse = ResponseEnvelope[FileRecord]
FileDeleteResponse = ResponseEnvelope[DeletionResult]
