"""测试夹具：为 pytest 提供会话池、目录索引组件与 API 客户端。"""

import os
import tempfile
from typing import Generator

import pytest

TEST_DB_PATH = os.path.join(os.path.dirname(__file__), "test_app.db")
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "nitrofs-test-logs"))

from fastapi.testclient import TestClient  # noqa: E402

from nitrofs.main import app  # noqa: E402
from nitrofs.packages.catalog.core.dependencies import get_catalog  # noqa: E402
from nitrofs.packages.catalog.db.init_db import init_db  # noqa: E402
from nitrofs.packages.catalog.db.session import SessionPool  # noqa: E402
from nitrofs.packages.catalog.services.catalog import Catalog  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def clean_app_database() -> Generator[None, None, None]:
    """应用启动时使用的 SQLite 文件，在会话前后清理。"""
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)
    yield
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)


@pytest.fixture()
def pool(tmp_path) -> Generator[SessionPool, None, None]:
    """每个用例一个全新的 SQLite 数据库，已建表并写入根目录。"""
    session_pool = SessionPool(f"sqlite:///{tmp_path / 'catalog.db'}", pool_size=2, max_overflow=1)
    init_db(session_pool)
    try:
        yield session_pool
    finally:
        session_pool.close()


@pytest.fixture()
def catalog(pool: SessionPool) -> Catalog:
    return Catalog(pool)


@pytest.fixture()
def directories(catalog: Catalog):
    return catalog.directories


@pytest.fixture()
def files(catalog: Catalog):
    return catalog.files


@pytest.fixture()
def partials(catalog: Catalog):
    return catalog.partials


@pytest.fixture()
def client(catalog: Catalog) -> Generator[TestClient, None, None]:
    """构建 FastAPI TestClient，并把目录索引依赖替换为测试专用实例。"""
    app.dependency_overrides[get_catalog] = lambda: catalog

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
