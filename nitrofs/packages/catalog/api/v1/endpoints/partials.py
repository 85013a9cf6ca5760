"""分片文件路由。

逻辑文件通过 (directoryId, originalFilename) 定位，originalFilename 以查询参数传入，
避免文件名中的特殊字符与路径段冲突。
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from nitrofs.packages.catalog.api.v1.schemas.partials import (
    PartialCreateBody,
    PartialDeleteResponse,
    PartialDetailResponse,
    PartialExistsResponse,
    PartialGroupListResponse,
    PartialListResponse,
    ReconstructionPlanResponse,
)
from nitrofs.packages.catalog.core.dependencies import get_catalog
from nitrofs.packages.catalog.core.responses import create_response
from nitrofs.packages.catalog.services.catalog import Catalog

router = APIRouter(tags=["partials"])


@router.post("/partials", response_model=PartialDetailResponse)
def record_partial(payload: PartialCreateBody, catalog: Catalog = Depends(get_catalog)):
    record = catalog.partials.record_partial(
        payload.locator,
        payload.directoryId,
        payload.partName,
        payload.partNumber,
        payload.partSize,
        payload.originalFilename,
        payload.description,
        payload.mimeType,
        uploaded_via_webhook=payload.uploadedViaWebhook,
    )
    return create_response("分片记录成功", record)


@router.get("/directories/{directory_id}/partials", response_model=PartialGroupListResponse)
def list_grouped_partials(
    directory_id: int = Path(..., ge=1),
    search: Optional[str] = Query(default=None),
    catalog: Catalog = Depends(get_catalog),
):
    return create_response("获取分片文件列表成功", catalog.partials.list_grouped_partials(directory_id, search=search))


@router.get("/directories/{directory_id}/partials/exists", response_model=PartialExistsResponse)
def check_partial_exists(
    directory_id: int = Path(..., ge=1),
    part_name: str = Query(..., alias="partName", min_length=1),
    catalog: Catalog = Depends(get_catalog),
):
    exists = catalog.partials.check_partial_exists(part_name, directory_id)
    return create_response("查询成功", {"exists": exists})


@router.get("/directories/{directory_id}/partials/parts", response_model=PartialListResponse)
def list_parts(
    directory_id: int = Path(..., ge=1),
    original_filename: str = Query(..., alias="originalFilename", min_length=1),
    catalog: Catalog = Depends(get_catalog),
):
    parts = catalog.partials.get_partials_by_original_filename(original_filename, directory_id)
    return create_response("获取分片成功", parts)


@router.get("/directories/{directory_id}/partials/plan", response_model=ReconstructionPlanResponse)
def get_reconstruction_plan(
    directory_id: int = Path(..., ge=1),
    original_filename: str = Query(..., alias="originalFilename", min_length=1),
    catalog: Catalog = Depends(get_catalog),
):
    plan = catalog.partials.get_reconstruction_plan(original_filename, directory_id)
    return create_response("获取重组清单成功", plan)


@router.delete("/directories/{directory_id}/partials", response_model=PartialDeleteResponse)
def delete_partials(
    directory_id: int = Path(..., ge=1),
    original_filename: str = Query(..., alias="originalFilename", min_length=1),
    catalog: Catalog = Depends(get_catalog),
):
    deleted = catalog.partials.delete_partials(original_filename, directory_id)
    return create_response("删除分片文件成功" if deleted else "分片文件不存在", {"deleted": deleted})
