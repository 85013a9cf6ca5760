"""异常处理模块：定义目录索引的错误分类、数据库异常转换与统一响应格式。

错误分类：
- NotFoundError：按 id 查找不到记录（文件、目录、分片文件）；
- ConflictError：违反不变量（删除根目录、删除仍有文件的目录、重复分片）；
- InfrastructureError：底层存储不可用、超时或返回未归类的约束错误。

目录索引内部从不重试，所有错误同步抛给调用方，并在 ``context`` 中携带出错的 id 或键。
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from nitrofs.packages.catalog.core.logger import logger


class CatalogError(Exception):
    """目录索引错误基类。"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, msg: str, **context: Any) -> None:
        super().__init__(msg)
        self.msg = msg
        self.context: Dict[str, Any] = context

    def __str__(self) -> str:
        if not self.context:
            return self.msg
        details = ", ".join(f"{key}={value!r}" for key, value in self.context.items())
        return f"{self.msg} ({details})"


class NotFoundError(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(CatalogError):
    status_code = status.HTTP_409_CONFLICT


class DuplicatePartialError(ConflictError):
    """同一目录下重复提交了相同 part_name 的分片，属于可预期、可恢复的结果。"""


class InfrastructureError(CatalogError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


@contextmanager
def translate_errors(operation: str, **context: Any) -> Iterator[None]:
    """把 SQLAlchemy 抛出的异常统一转换为 ``InfrastructureError``。

    已经是 ``CatalogError`` 的异常原样抛出。
    """
    try:
        yield
    except CatalogError:
        raise
    except SQLAlchemyError as exc:
        logger.error(
            "Catalog operation %s failed: %s",
            operation,
            exc,
            exc_info=True,
            extra={"operation": operation, "context": context},
        )
        raise InfrastructureError(f"{operation} failed: {exc.__class__.__name__}", **context) from exc


def _envelope(msg: str, code: int, data: Optional[Any] = None) -> Dict[str, Any]:
    return {"msg": msg, "data": data, "code": code}


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:  # pragma: no cover - framework glue
    """将 FastAPI 的 ``HTTPException`` 转换为统一响应格式。"""
    payload = _envelope(exc.detail, exc.status_code, getattr(exc, "data", None))
    return JSONResponse(status_code=exc.status_code, content=payload)


async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """NotFound→404、Conflict→409、Infrastructure→503，并把上下文放进 data。"""
    if isinstance(exc, ConflictError):
        logger.warning("Catalog conflict: %s", exc)
    payload = _envelope(exc.msg, exc.status_code, exc.context or None)
    return JSONResponse(status_code=exc.status_code, content=payload)


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    payload = _envelope(str(exc), status.HTTP_400_BAD_REQUEST)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=payload)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # pragma: no cover - framework glue
    """兜底处理：将未捕获异常转换为标准的 500 响应结构。"""
    logger.exception("Unhandled error while serving %s", request.url.path)
    payload = _envelope("服务器内部错误", status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)
