"""
目录读取器

对四张目录表的只读参数化查询。一个读取器绑定一个连接，由 Catalog.reader() 按请求创建和释放。
"""

from typing import Any, Iterable, List, Optional, Sequence

from loguru import logger
from sqlalchemy import func, or_, select, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import DBAPIError, InterfaceError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.sql import Select

from modlist.catalog.schema import mod_dependencies, mod_files, mod_versions, mods
from modlist.exceptions import CatalogError, CatalogQueryError, CatalogUnavailableError
from modlist.models import Mod, ModDependency, ModFile, ModVersion


def wrap_db_error(error: SQLAlchemyError, operation: str) -> CatalogError:
    """
    将 SQLAlchemy 异常转换为 CatalogError

    只保留操作名，不把 SQL 文本放进异常上下文。
    """
    unavailable = isinstance(error, InterfaceError) or (
        isinstance(error, DBAPIError) and error.connection_invalidated
    )
    if unavailable:
        return CatalogUnavailableError(
            "数据库不可用", context={"operation": operation}
        )
    return CatalogQueryError("数据库查询失败", context={"operation": operation})


def _unique(values: Iterable[Any]) -> List[Any]:
    """去重并保持顺序"""
    return list(dict.fromkeys(values))


class CatalogReader:
    """目录只读访问器"""

    def __init__(self, conn: AsyncConnection):
        self.conn = conn

    async def _fetch(self, stmt: Select, operation: str) -> Sequence[RowMapping]:
        """执行查询并返回行映射"""
        try:
            result = await self.conn.execute(stmt)
            return result.mappings().all()
        except SQLAlchemyError as e:
            logger.error(f"[数据库] {operation} 失败: {e.__class__.__name__}")
            raise wrap_db_error(e, operation) from e

    async def _fetch_one(self, stmt: Select, operation: str) -> Optional[RowMapping]:
        rows = await self._fetch(stmt.limit(1), operation)
        return rows[0] if rows else None

    # ---- 依赖解析使用的查询 ----

    async def get_dependencies_by_version_ids(
        self, version_ids: Iterable[int]
    ) -> List[ModDependency]:
        """批量获取一组版本的依赖行"""
        ids = _unique(version_ids)
        if not ids:
            return []
        stmt = (
            select(mod_dependencies)
            .where(mod_dependencies.c.modVersionID.in_(ids))
            .order_by(mod_dependencies.c.id)
        )
        rows = await self._fetch(stmt, "get_dependencies_by_version_ids")
        return [ModDependency.from_row(row) for row in rows]

    async def get_versions_by_mod_ids(self, mod_ids: Iterable[str]) -> List[ModVersion]:
        """批量获取一组模组的全部版本"""
        ids = _unique(mod_ids)
        if not ids:
            return []
        stmt = (
            select(mod_versions)
            .where(mod_versions.c.modID.in_(ids))
            .order_by(mod_versions.c.modVersionID)
        )
        rows = await self._fetch(stmt, "get_versions_by_mod_ids")
        return [ModVersion.from_row(row) for row in rows]

    async def get_files_by_version_ids(self, version_ids: Iterable[int]) -> List[ModFile]:
        """批量获取一组版本的文件"""
        ids = _unique(version_ids)
        if not ids:
            return []
        stmt = (
            select(mod_files)
            .where(mod_files.c.modVersionID.in_(ids))
            .order_by(mod_files.c.fileID)
        )
        rows = await self._fetch(stmt, "get_files_by_version_ids")
        return [ModFile.from_row(row) for row in rows]

    async def get_mod_by_id(self, mod_id: str) -> Optional[Mod]:
        row = await self._fetch_one(
            select(mods).where(mods.c.modID == mod_id), "get_mod_by_id"
        )
        return Mod.from_row(row) if row else None

    async def get_version_by_mod_and_number(
        self, mod_id: str, version_number: str
    ) -> Optional[ModVersion]:
        stmt = select(mod_versions).where(
            mod_versions.c.modID == mod_id,
            mod_versions.c.versionNumber == version_number,
        )
        row = await self._fetch_one(stmt, "get_version_by_mod_and_number")
        return ModVersion.from_row(row) if row else None

    async def get_latest_version(self, mod_id: str) -> Optional[ModVersion]:
        """
        获取最新版本

        按存储的版本字符串降序取第一条。这是字符串排序而非语义化版本比较，
        例如 "2.0" 会排在 "10.0" 之前。
        """
        stmt = (
            select(mod_versions)
            .where(mod_versions.c.modID == mod_id)
            .order_by(mod_versions.c.versionNumber.desc())
        )
        row = await self._fetch_one(stmt, "get_latest_version")
        return ModVersion.from_row(row) if row else None

    # ---- 目录浏览查询 ----

    async def get_versions_for_mod(self, mod_id: str) -> List[ModVersion]:
        """获取单个模组的全部版本，按版本字符串降序"""
        stmt = (
            select(mod_versions)
            .where(mod_versions.c.modID == mod_id)
            .order_by(mod_versions.c.versionNumber.desc())
        )
        rows = await self._fetch(stmt, "get_versions_for_mod")
        return [ModVersion.from_row(row) for row in rows]

    async def list_mods(self, limit: int, offset: int) -> List[Mod]:
        stmt = select(mods).order_by(mods.c.modID).limit(limit).offset(offset)
        rows = await self._fetch(stmt, "list_mods")
        return [Mod.from_row(row) for row in rows]

    async def search_mods(self, query: str, limit: int, offset: int) -> List[Mod]:
        """按名称、作者、描述做大小写不敏感的子串匹配"""
        needle = query.lower()
        stmt = (
            select(mods)
            .where(
                or_(
                    func.lower(mods.c.modName).contains(needle, autoescape=True),
                    func.lower(mods.c.modAuthor).contains(needle, autoescape=True),
                    func.lower(mods.c.modDescription).contains(needle, autoescape=True),
                )
            )
            .order_by(mods.c.modID)
            .limit(limit)
            .offset(offset)
        )
        rows = await self._fetch(stmt, "search_mods")
        return [Mod.from_row(row) for row in rows]

    async def get_mods_by_tag(self, tag: str, limit: int, offset: int) -> List[Mod]:
        """
        按标签筛选

        先用 LIKE 粗筛，再在逗号分隔的标签列表里做精确匹配，最后分页。
        """
        wanted = tag.strip().lower()
        stmt = (
            select(mods)
            .where(func.lower(mods.c.modTags).contains(wanted, autoescape=True))
            .order_by(mods.c.modID)
        )
        rows = await self._fetch(stmt, "get_mods_by_tag")
        matched = [
            mod
            for mod in (Mod.from_row(row) for row in rows)
            if wanted in (t.lower() for t in mod.tag_list)
        ]
        return matched[offset : offset + limit]

    async def ping(self) -> bool:
        """检查数据库连接"""
        try:
            await self.conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise wrap_db_error(e, "ping") from e
        return True
