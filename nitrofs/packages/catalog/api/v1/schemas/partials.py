"""分片文件请求/响应模型。"""

from typing import Optional

from pydantic import BaseModel, Field

from nitrofs.packages.catalog.api.v1.schemas.common import DeletionResult, ExistsResult, ResponseEnvelope
from nitrofs.packages.catalog.records import (
    FilePartialRecord,
    Locator,
    PartialGroupRecord,
    ReconstructionPlan,
)


class PartialCreateBody(BaseModel):
    channelId: str = Field(..., min_length=1, max_length=64)
    messageId: str = Field(..., min_length=1, max_length=64)
    directoryId: int = Field(..., ge=1)
    partName: str = Field(..., min_length=1, max_length=255)
    partNumber: int = Field(..., ge=1)
    partSize: int = Field(..., ge=0)
    originalFilename: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = ""
    mimeType: Optional[str] = None
    uploadedViaWebhook: bool = True

    @property
    def locator(self) -> Locator:
        return Locator(channel_id=self.channelId, message_id=self.messageId)


PartialGroupListResponse = ResponseEnvelope[list[PartialGroupRecord]]
PartialListResponse = ResponseEnvelope[list[FilePartialRecord]]
PartialDetailResponse = ResponseEnvelope[FilePartialRecord]
PartialExistsResponse = ResponseEnvelope[ExistsResult]
PartialDeleteResponse = ResponseEnvelope[DeletionResult]
ReconstructionPlanResponse = ResponseEnvelope[ReconstructionPlan]
