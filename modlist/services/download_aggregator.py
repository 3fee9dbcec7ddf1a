"""
下载列表服务

计算某个版本的完整依赖闭包，并汇总闭包内所有版本的文件下载地址。
"""

from typing import List, Optional

from loguru import logger

from modlist.catalog import CatalogReader
from modlist.models import DownloadRef
from modlist.services.dependency_resolver import DependencyResolver


class DownloadAggregator:
    """下载汇总器"""

    def __init__(
        self, reader: CatalogReader, resolver: Optional[DependencyResolver] = None
    ):
        self.reader = reader
        self.resolver = resolver or DependencyResolver(reader)

    async def resolve_download_set(self, version_id: int) -> List[DownloadRef]:
        """
        解析下载列表

        闭包包含起始版本本身，并且不区分 required / optional：
        与清单接口只默认包含 required 依赖的策略不同。

        Args:
            version_id: 起始版本 ID

        Returns:
            扁平的下载引用列表
        """
        closure = await self.resolver.resolve_closure([version_id])
        files = await self.reader.get_files_by_version_ids(sorted(closure))
        logger.debug(
            f"[下载] 版本 {version_id}: 闭包 {len(closure)} 个版本, {len(files)} 个文件"
        )
        return [DownloadRef.from_file(file) for file in files]
