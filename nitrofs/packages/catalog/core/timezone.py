"""时区工具方法：支持根据配置动态获取当前时区。"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from nitrofs.packages.catalog.core.config import get_settings


def get_timezone() -> ZoneInfo:
    return get_settings().timezone_info


def to_local(value: Optional[datetime]) -> Optional[datetime]:
    """将 ``datetime`` 转换为配置时区。

    SQLite 返回的时间不带时区，数据库侧以 UTC 写入，因此按 UTC 解释后再转换。
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=ZoneInfo("UTC"))
    return value.astimezone(get_timezone())


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    """将时间格式化为 ISO-8601 字符串。"""
    localized = to_local(value)
    if localized is None:
        return None
    return localized.isoformat()
