"""Database engine, bounded connection pool and scoped session acquisition.

The catalog components never create engines themselves: a single
``SessionPool`` is constructed at startup, handed to every component and
disposed at shutdown.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

from nitrofs.packages.catalog.core.config import Settings, get_settings
from nitrofs.packages.catalog.core.exceptions import InfrastructureError
from nitrofs.packages.catalog.core.logger import logger


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # pragma: no cover - driver glue
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class SessionPool:
    """进程级数据库会话池，在启动时显式创建并注入各组件。

    - ``pool_size``：常驻的空闲连接数；
    - ``max_overflow``：高峰期允许额外创建的连接数，上限为两者之和；
    - ``pool_timeout``：等待可用连接的最长秒数，超时抛出 ``sqlalchemy.exc.TimeoutError``；
    - ``pool_recycle``：连接的最长存活秒数。
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 2,
        max_overflow: int = 3,
        pool_timeout: float = 30.0,
        pool_recycle: int = 1800,
        echo: bool = False,
    ) -> None:
        self.url = url
        connect_args: Dict[str, Any] = {}
        backend = make_url(url).get_backend_name()
        if backend == "sqlite":
            # TestClient 与服务线程不同，需要关闭 SQLite 的同线程检查
            connect_args["check_same_thread"] = False

        # ``pool_pre_ping`` keeps the pool healthy across database restarts.
        self.engine: Engine = create_engine(
            url,
            poolclass=QueuePool,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
            pool_recycle=pool_recycle,
            pool_pre_ping=True,
            echo=echo,
            connect_args=connect_args,
        )
        if backend == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self._factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )
        self._closed = False
        logger.info(
            "Session pool initialized (backend=%s, pool_size=%s, max_overflow=%s)",
            backend,
            pool_size,
            max_overflow,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SessionPool":
        settings = settings or get_settings()
        return cls(
            settings.sql_database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            echo=settings.database_echo,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    @contextmanager
    def session(self) -> Iterator[Session]:
        """获取一个会话，异常时回滚，任何退出路径都会归还连接。"""
        if self._closed:
            raise InfrastructureError("Session pool has been closed", backend=self.engine.dialect.name)
        session = self._factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """获取一个会话并开启事务，正常退出时提交，异常时整体回滚。"""
        with self.session() as session:
            with session.begin():
                yield session

    def health_check(self) -> bool:
        if self._closed:
            return False
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            logger.error("Database health check failed: %s", exc)
            return False

    def close(self) -> None:
        if self._closed:
            return
        self.engine.dispose()
        self._closed = True
        logger.info("Session pool closed")
