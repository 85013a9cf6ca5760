"""依赖注入模块：封装 FastAPI 中复用度高的依赖函数。"""

from fastapi import Request

from nitrofs.packages.catalog.services.catalog import Catalog


def get_catalog(request: Request) -> Catalog:
    """返回启动阶段挂在 ``app.state`` 上的目录索引实例。"""
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise RuntimeError("Catalog is not initialized; the application startup hook has not run")
    return catalog
