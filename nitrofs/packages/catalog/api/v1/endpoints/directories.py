"""目录相关路由：列表、幂等创建、详情、删除以及目录下的文件列表。"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from nitrofs.packages.catalog.api.v1.schemas.directories import (
    DirectoryCreateBody,
    DirectoryCreateResponse,
    DirectoryDeleteResponse,
    DirectoryDetailResponse,
    DirectoryListResponse,
)
from nitrofs.packages.catalog.api.v1.schemas.files import FileListResponse
from nitrofs.packages.catalog.core.dependencies import get_catalog
from nitrofs.packages.catalog.core.responses import create_response
from nitrofs.packages.catalog.services.catalog import Catalog

router = APIRouter(prefix="/directories", tags=["directories"])


@router.get("", response_model=DirectoryListResponse)
def list_directories(
    search: Optional[str] = Query(default=None),
    catalog: Catalog = Depends(get_catalog),
):
    return create_response("获取目录列表成功", catalog.directories.list_directories(search=search))


@router.post("", response_model=DirectoryCreateResponse)
def create_directory(payload: DirectoryCreateBody, catalog: Catalog = Depends(get_catalog)):
    directory_id = catalog.directories.create_or_get_directory(payload.path)
    return create_response("目录已就绪", {"id": directory_id})


@router.get("/{directory_id}", response_model=DirectoryDetailResponse)
def get_directory(directory_id: int = Path(..., ge=1), catalog: Catalog = Depends(get_catalog)):
    return create_response("获取目录详情成功", catalog.directories.get_directory(directory_id))


@router.delete("/{directory_id}", response_model=DirectoryDeleteResponse)
def delete_directory(directory_id: int = Path(..., ge=1), catalog: Catalog = Depends(get_catalog)):
    deleted = catalog.directories.delete_directory(directory_id)
    return create_response("删除目录成功" if deleted else "目录不存在", {"deleted": deleted})


@router.get("/{directory_id}/files", response_model=FileListResponse)
def list_files(
    directory_id: int = Path(..., ge=1),
    search: Optional[str] = Query(default=None),
    mime_type: Optional[str] = Query(default=None, alias="mimeType"),
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    catalog: Catalog = Depends(get_catalog),
):
    files = catalog.files.list_files(
        directory_id,
        search=search,
        mime_type_prefix=mime_type,
        sort_by=sort_by,
    )
    return create_response("获取文件列表成功", files)
