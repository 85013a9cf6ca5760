"""请求 ID 中间件。

优先沿用调用方传入的 ``X-Request-ID``，否则生成 UUID4；该值写入日志上下文，
并在响应头中原样返回，便于把调用方日志与目录索引日志对应起来。
"""

from __future__ import annotations

import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from nitrofs.packages.catalog.core.logger import set_request_id

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware:
    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER) -> None:
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(self.header_name) or uuid.uuid4().hex
        set_request_id(request_id)

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).setdefault(self.header_name, request_id)
            await send(message)

        await self.app(scope, receive, send_with_request_id)
