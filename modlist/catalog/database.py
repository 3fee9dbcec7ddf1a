"""
数据库引擎管理

Catalog 持有异步引擎，并按请求提供绑定单个连接的 CatalogReader。
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from modlist.catalog.reader import CatalogReader, wrap_db_error
from modlist.catalog.schema import metadata
from modlist.exceptions import CatalogUnavailableError
from modlist.models import DatabaseConfig


def create_catalog_engine(config: DatabaseConfig) -> AsyncEngine:
    """根据配置创建异步引擎"""
    engine_kwargs = {"echo": config.echo}
    if not config.is_sqlite:
        engine_kwargs.update(pool_size=config.pool_size, pool_pre_ping=True)
    return create_async_engine(config.async_url, **engine_kwargs)


class Catalog:
    """目录数据库"""

    def __init__(
        self,
        config: Optional[DatabaseConfig] = None,
        engine: Optional[AsyncEngine] = None,
    ):
        self.config = config or DatabaseConfig()
        self._engine = engine
        self._owned_engine = engine is None

    @property
    def engine(self) -> AsyncEngine:
        """
        获取或创建异步引擎

        URL 无效或缺少驱动（例如未安装 aiomysql）时抛出 CatalogUnavailableError。
        """
        if self._engine is None:
            try:
                self._engine = create_catalog_engine(self.config)
            except (SQLAlchemyError, ImportError) as e:
                logger.error(f"[数据库] 创建引擎失败: {e.__class__.__name__}: {e}")
                raise CatalogUnavailableError(
                    "数据库不可用", context={"operation": "create_engine"}
                ) from e
            logger.debug(f"[数据库] 已创建引擎: {self._engine.url.render_as_string()}")
        return self._engine

    @asynccontextmanager
    async def reader(self) -> AsyncIterator[CatalogReader]:
        """
        获取一个读取器

        连接在进入时从连接池取出，退出时归还。
        """
        conn = self.engine.connect()
        try:
            await conn.start()
        except (SQLAlchemyError, ImportError) as e:
            logger.error(f"[数据库] 获取连接失败: {e.__class__.__name__}")
            raise CatalogUnavailableError(
                "数据库不可用", context={"operation": "connect"}
            ) from e

        try:
            yield CatalogReader(conn)
        finally:
            await conn.close()

    async def create_schema(self) -> None:
        """创建目录表（用于本地开发和测试数据库）"""
        engine = self.engine
        try:
            async with engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
        except SQLAlchemyError as e:
            raise wrap_db_error(e, "create_schema") from e
        logger.info("[数据库] 目录表已创建")

    async def close(self):
        """释放引擎"""
        if self._owned_engine and self._engine is not None:
            await self._engine.dispose()
            self._engine = None

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
