"""
目录浏览服务

模组列表、搜索、标签筛选和版本列表，负责分页参数的解析与限制。
"""

from typing import List, Optional, Tuple, Union

from modlist.catalog import CatalogReader
from modlist.exceptions import ModNotFoundError, ValidationError
from modlist.models import Mod, ModVersion, PaginationConfig

PageValue = Union[str, int, None]


def _to_int(value: PageValue, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def clamp_page(
    limit: PageValue, offset: PageValue, pagination: PaginationConfig
) -> Tuple[int, int]:
    """
    解析并限制分页参数

    limit 缺省或非法时使用默认值，并限制在 [1, max_limit]；offset 不小于 0。
    """
    page_limit = _to_int(limit, pagination.default_limit)
    if page_limit < 1:
        page_limit = pagination.default_limit
    page_limit = min(page_limit, pagination.max_limit)
    page_offset = max(_to_int(offset, 0), 0)
    return page_limit, page_offset


class CatalogBrowser:
    """目录浏览"""

    def __init__(self, reader: CatalogReader, pagination: Optional[PaginationConfig] = None):
        self.reader = reader
        self.pagination = pagination or PaginationConfig()

    async def list_mods(self, limit: PageValue = None, offset: PageValue = None) -> List[Mod]:
        page_limit, page_offset = clamp_page(limit, offset, self.pagination)
        return await self.reader.list_mods(page_limit, page_offset)

    async def get_mod(self, mod_id: str) -> Mod:
        mod = await self.reader.get_mod_by_id(mod_id)
        if mod is None:
            raise ModNotFoundError(context={"modID": mod_id})
        return mod

    async def search_mods(
        self, query: Optional[str], limit: PageValue = None, offset: PageValue = None
    ) -> List[Mod]:
        if not query or not query.strip():
            raise ValidationError("Missing search query")
        page_limit, page_offset = clamp_page(limit, offset, self.pagination)
        return await self.reader.search_mods(query.strip(), page_limit, page_offset)

    async def mods_by_tag(
        self, tag: str, limit: PageValue = None, offset: PageValue = None
    ) -> List[Mod]:
        if not tag or not tag.strip():
            raise ValidationError("Missing tag")
        page_limit, page_offset = clamp_page(limit, offset, self.pagination)
        return await self.reader.get_mods_by_tag(tag, page_limit, page_offset)

    async def list_versions(self, mod_id: str) -> List[ModVersion]:
        """获取模组的全部版本（按版本字符串降序）"""
        await self.get_mod(mod_id)
        return await self.reader.get_versions_for_mod(mod_id)
