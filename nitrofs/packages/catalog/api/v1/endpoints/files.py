"""文件记录路由：写入、按 id 查询与删除。"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from nitrofs.packages.catalog.api.v1.schemas.files import (
    FileCreateBody,
    FileDeleteResponse,
    FileDetailResponse,
)
from nitrofs.packages.catalog.core.dependencies import get_catalog
from nitrofs.packages.catalog.core.responses import create_response
from nitrofs.packages.catalog.services.catalog import Catalog

router = APIRouter(prefix="/files", tags=["files"])


@router.post("", response_model=FileDetailResponse)
def record_file(payload: FileCreateBody, catalog: Catalog = Depends(get_catalog)):
    record = catalog.files.record_file(
        payload.locator,
        payload.directoryId,
        payload.fileName,
        payload.description,
        payload.size,
        payload.mimeType,
    )
    return create_response("文件记录成功", record)


@router.get("/{file_id}", response_model=FileDetailResponse)
def get_file(file_id: int = Path(..., ge=1), catalog: Catalog = Depends(get_catalog)):
    return create_response("获取文件详情成功", catalog.files.get_file_by_id(file_id))


@router.delete("/{file_id}", response_model=FileDeleteResponse)
def delete_file(file_id: int = Path(..., ge=1), catalog: Catalog = Depends(get_catalog)):
    deleted = catalog.files.delete_file(file_id)
    return create_response("删除文件成功" if deleted else "文件不存在", {"deleted": deleted})
