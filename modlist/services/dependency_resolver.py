"""
依赖处理服务

按轮次广度优先展开依赖图，计算依赖闭包；已访问的版本不会再次展开，循环依赖可以安全终止。
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Set

from loguru import logger

from modlist.catalog import CatalogReader
from modlist.models import ModDependency


@dataclass
class Expansion:
    """一次展开的结果"""

    visited: Set[int] = field(default_factory=set)  # 已展开的版本（含起点）
    discovered: Set[int] = field(default_factory=set)  # 通过依赖边发现的版本
    rows: List[ModDependency] = field(default_factory=list)  # 沿途收集的依赖行
    rounds: int = 0


class DependencyResolver:
    """依赖解析器"""

    def __init__(self, reader: CatalogReader):
        self.reader = reader

    async def _expand(self, seeds: Iterable[int], required_only: bool) -> Expansion:
        """
        广度优先展开

        每一轮只做两次批量查询：frontier 的依赖行，以及这些依赖模组的全部版本。
        依赖记录的最小/最大版本不参与筛选，依赖模组的所有版本都会被纳入。

        Args:
            seeds: 起始版本 ID
            required_only: 只沿 required 类型的依赖边展开

        Returns:
            展开结果；任何读取失败都会直接抛出，不返回部分结果
        """
        result = Expansion()
        expanded_mods: Set[str] = set()
        frontier = list(dict.fromkeys(seeds))

        while True:
            frontier = [vid for vid in frontier if vid not in result.visited]
            if not frontier:
                break
            result.rounds += 1

            rows = await self.reader.get_dependencies_by_version_ids(frontier)
            if required_only:
                rows = [row for row in rows if row.is_required]
            result.rows.extend(rows)

            # 同一次解析中已取过版本的模组不再重复查询
            mod_ids = [
                mod_id
                for mod_id in dict.fromkeys(row.dependency_mod_id for row in rows)
                if mod_id not in expanded_mods
            ]
            expanded_mods.update(mod_ids)
            versions = (
                await self.reader.get_versions_by_mod_ids(mod_ids) if mod_ids else []
            )

            result.visited.update(frontier)
            next_frontier = [version.mod_version_id for version in versions]
            result.discovered.update(next_frontier)

            logger.debug(
                f"[依赖] 第 {result.rounds} 轮: 展开 {len(frontier)} 个版本, "
                f"{len(rows)} 条依赖, 发现 {len(next_frontier)} 个版本"
            )
            frontier = next_frontier

        return result

    async def resolve_closure(self, version_ids: Iterable[int]) -> Set[int]:
        """
        计算依赖闭包

        Args:
            version_ids: 起始版本 ID

        Returns:
            起始版本以及所有可达依赖版本的 ID 集合（无序）
        """
        expansion = await self._expand(version_ids, required_only=False)
        logger.debug(
            f"[依赖] 闭包包含 {len(expansion.visited)} 个版本 ({expansion.rounds} 轮)"
        )
        return expansion.visited

    async def resolve_dependencies(self, version_id: int) -> Set[int]:
        """
        只返回依赖版本

        起始版本本身只有在依赖环绕回它所属的模组时才会出现在结果中。
        """
        expansion = await self._expand([version_id], required_only=False)
        return expansion.discovered

    async def collect_required_dependencies(self, version_id: int) -> List[ModDependency]:
        """
        逐层收集所有 required 依赖行

        结果不做跨分支去重：两个分支都依赖同一个模组时会出现两条记录。
        """
        expansion = await self._expand([version_id], required_only=True)
        return expansion.rows
