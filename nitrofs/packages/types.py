"""业务包元数据定义。"""

from __future__ import annotations

from dataclasses import dataclass
from logging import Logger
from typing import Any, Callable, Mapping

from fastapi import APIRouter


@dataclass(frozen=True)
class AppPackage:
    """描述一个业务包暴露给主应用的必要接口。"""

    name: str
    api_router: APIRouter
    get_settings: Callable[[], Any]
    setup_logging: Callable[[], None]
    logger: Logger
    startup: Callable[[], Any]
    shutdown: Callable[[Any], None]
    create_response: Callable[..., dict]
    exception_handlers: Mapping[type, Callable[..., Any]]
