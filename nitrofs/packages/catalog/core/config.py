"""配置模块：负责加载和缓存基于环境变量的目录索引服务设置。"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional
from urllib.parse import quote_plus
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# 探测项目根目录并加载环境文件，支持通过 ENV_FILE/ENVIRONMENT 定制优先级。
def _detect_base_dir() -> Path:
    """向上遍历目录树，寻找包含 `nitrofs` 目录的项目根路径。"""
    current = Path(__file__).resolve()
    for candidate in current.parents:
        if (candidate / "nitrofs").is_dir():
            return candidate
    return current.parent


BASE_DIR = _detect_base_dir()


def _as_bool(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _load_environment() -> None:
    env_file_override = os.getenv("ENV_FILE")
    if env_file_override:
        candidate = BASE_DIR / env_file_override
        if candidate.exists():
            load_dotenv(candidate, override=True, encoding="utf-8")
        return

    base_env = BASE_DIR / ".env"
    if base_env.exists():
        load_dotenv(base_env, override=False, encoding="utf-8")

    environment = os.getenv("ENVIRONMENT")
    if environment is None and _as_bool(os.getenv("DEBUG")):
        environment = "development"

    if environment:
        candidate_name = environment if environment.startswith(".env") else f".env.{environment}"
        candidate_path = BASE_DIR / candidate_name
        if candidate_path.exists():
            load_dotenv(candidate_path, override=True, encoding="utf-8")


_load_environment()


class Settings(BaseSettings):
    """
    封装服务运行所需的所有配置项，每个字段都可以通过环境变量重写。
    数据库连接沿用 PostgreSQL 的标准 PG* 变量；也可以直接给出 DATABASE_URL。
    """

    project_name: str = Field(default="NitroFS Catalog", alias="PROJECT_NAME")
    api_v1_str: str = Field(default="/api/v1", alias="API_V1_STR")
    debug: bool = Field(default=False, alias="DEBUG")

    database_url_override: Optional[str] = Field(default=None, alias="DATABASE_URL")
    database_host: str = Field(default="localhost", alias="PGHOST")
    database_port: int = Field(default=5432, alias="PGPORT")
    database_user: str = Field(default="postgres", alias="PGUSER")
    database_password: str = Field(default="postgres", alias="PGPASSWORD")
    database_name: str = Field(default="nitrofs", alias="PGDATABASE")
    database_sslmode: Optional[str] = Field(default=None, alias="PGSSLMODE")
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # 连接池：pool_size 为常驻空闲连接数，上限为 pool_size + max_overflow
    db_pool_size: int = Field(default=2, ge=1, alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=3, ge=0, alias="DB_MAX_OVERFLOW")
    db_pool_timeout: float = Field(default=30.0, gt=0, alias="DB_POOL_TIMEOUT")
    db_pool_recycle: int = Field(default=1800, alias="DB_POOL_RECYCLE")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="log", alias="LOG_DIR")
    log_file_name: str = Field(default="catalog.log", alias="LOG_FILE_NAME")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    app_port: int = Field(default=8000, alias="APP_PORT")
    timezone: str = Field(default="UTC", alias="TIMEZONE")

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    @property
    def sql_database_url(self) -> str:
        """优先使用 DATABASE_URL，否则根据 PG* 设置拼接 PostgreSQL 连接串。"""
        if self.database_url_override:
            return self.database_url_override
        url = (
            f"postgresql+psycopg2://{quote_plus(self.database_user)}:{quote_plus(self.database_password)}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )
        if self.database_sslmode:
            url += f"?sslmode={self.database_sslmode}"
        return url

    def _resolve_path(self, raw: str) -> Path:
        path = Path(raw)
        if not path.is_absolute():
            path = BASE_DIR / path
        return path

    @property
    def log_directory(self) -> Path:
        """返回日志目录的绝对路径，支持相对路径配置。"""
        return self._resolve_path(self.log_dir)

    @property
    def log_file_path(self) -> Path:
        return self.log_directory / self.log_file_name

    @property
    def timezone_info(self) -> ZoneInfo:
        """返回当前配置对应的时区信息，无法解析时回退到 UTC。"""
        try:
            return ZoneInfo(self.timezone)
        except ZoneInfoNotFoundError:
            return ZoneInfo("UTC")


@lru_cache
def get_settings() -> Settings:
    """返回单例化的配置对象，避免重复解析环境变量。"""
    return Settings()
