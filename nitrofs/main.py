"""应用入口：负责创建 FastAPI 实例并绑定生命周期事件。"""

from typing import Any

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from nitrofs.middleware.request_id import RequestIdMiddleware
from nitrofs.packages import get_active_package

package = get_active_package()
package.setup_logging()
settings = package.get_settings()
logger = package.logger
create_response = package.create_response

app = FastAPI(title=settings.project_name, debug=settings.debug)
app.add_middleware(RequestIdMiddleware)

for exc_class, handler in package.exception_handlers.items():
    app.add_exception_handler(exc_class, handler)


@app.on_event("startup")
def startup_event() -> None:
    """创建会话池并初始化数据库，目录索引实例挂在 ``app.state`` 上供路由注入。"""
    app.state.catalog = package.startup()
    logger.info("SUCCESS - Catalog running at http://127.0.0.1:%s", settings.app_port)


@app.on_event("shutdown")
def shutdown_event() -> None:
    """释放会话池，保证没有任何目录操作活得比连接池更久。"""
    catalog = getattr(app.state, "catalog", None)
    app.state.catalog = None
    package.shutdown(catalog)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):  # pragma: no cover - framework glue
    """统一处理请求体验证失败的场景。"""
    def _serialize(obj: Any) -> Any:
        if isinstance(obj, Exception):
            return str(obj)
        if isinstance(obj, dict):
            return {key: _serialize(value) for key, value in obj.items()}
        if isinstance(obj, (list, tuple)):
            return [_serialize(item) for item in obj]
        return obj

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=create_response("请求参数验证失败", _serialize(exc.errors()), status.HTTP_422_UNPROCESSABLE_ENTITY),
    )


@app.get("/health")
def health_check() -> JSONResponse:
    """健康检查：确认会话池能拿到可用连接。"""
    catalog = getattr(app.state, "catalog", None)
    healthy = catalog is not None and catalog.health_check()
    code = status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE
    payload = create_response("OK" if healthy else "UNAVAILABLE", {"status": "healthy" if healthy else "unhealthy"}, code)
    return JSONResponse(status_code=code, content=payload)


app.include_router(package.api_router, prefix=settings.api_v1_str)
