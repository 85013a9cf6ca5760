"""目录相关请求/响应模型。"""

from pydantic import BaseModel, Field

from nitrofs.packages.catalog.api.v1.schemas.common import DeletionResult, ResponseEnvelope
from nitrofs.packages.catalog.records import DirectoryRecord


class DirectoryCreateBody(BaseModel):
    path: str = Field(..., max_length=1024)


class DirectoryIdPayload(BaseModel):
    id: int


DirectoryListResponse = ResponseEnvelope[list[DirectoryRecord]]
DirectoryDetailResponse = ResponseEnvelope[DirectoryRecord]
DirectoryCreateResponse = ResponseEnvelope[DirectoryIdPayload]
DirectoryDeleteResponse = ResponseEnvelope[DeletionResult]
