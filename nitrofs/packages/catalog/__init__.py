"""目录索引业务包：目录、文件与分片文件的元数据索引。"""

from typing import Optional

from fastapi import HTTPException

from nitrofs.packages.types import AppPackage

from .api.v1 import api_router
from .core.config import get_settings
from .core.exceptions import (
    CatalogError,
    catalog_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    value_error_handler,
)
from .core.logger import logger, setup_logging
from .core.responses import create_response
from .db.init_db import init_db
from .db.session import SessionPool
from .services.catalog import Catalog


def startup() -> Catalog:
    """创建会话池、初始化表结构与根目录，返回绑定该池的目录索引。"""
    pool = SessionPool.from_settings(get_settings())
    try:
        init_db(pool)
    except Exception:
        pool.close()
        raise
    return Catalog(pool)


def shutdown(catalog: Optional[Catalog]) -> None:
    """关闭 ``startup`` 返回的目录索引所持有的会话池。"""
    if catalog is not None:
        catalog.close()


package = AppPackage(
    name="catalog",
    api_router=api_router,
    get_settings=get_settings,
    setup_logging=setup_logging,
    logger=logger,
    startup=startup,
    shutdown=shutdown,
    create_response=create_response,
    exception_handlers={
        CatalogError: catalog_exception_handler,
        ValueError: value_error_handler,
        HTTPException: http_exception_handler,
        Exception: generic_exception_handler,
    },
)

__all__ = ["package", "api_router", "get_settings", "Catalog"]
