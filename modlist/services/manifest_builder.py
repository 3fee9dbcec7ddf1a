"""
安装清单服务

组装单个模组版本的安装清单：模组信息、版本信息、文件列表以及直接依赖。
"""

from typing import List, Optional

from loguru import logger

from modlist.catalog import CatalogReader
from modlist.exceptions import (
    DependenciesNotFoundError,
    FilesNotFoundError,
    ModNotFoundError,
    VersionNotFoundError,
)
from modlist.models import Manifest, Mod, ModDependency, ModVersion
from modlist.services.dependency_resolver import DependencyResolver

LATEST = "latest"


def select_dependencies(
    rows: List[ModDependency], include_optional: bool
) -> Optional[List[ModDependency]]:
    """
    应用依赖包含策略

    Returns:
        清单中的依赖列表；返回 None 表示清单不包含依赖部分
    """
    if not rows:
        return None
    if include_optional:
        return list(rows)
    required = [row for row in rows if row.is_required]
    # 只有 optional 依赖时不算错误
    return required or None


class ManifestBuilder:
    """清单构建器"""

    def __init__(
        self, reader: CatalogReader, resolver: Optional[DependencyResolver] = None
    ):
        self.reader = reader
        self.resolver = resolver or DependencyResolver(reader)

    async def get_mod(self, mod_id: str) -> Mod:
        mod = await self.reader.get_mod_by_id(mod_id)
        if mod is None:
            raise ModNotFoundError(context={"modID": mod_id})
        return mod

    async def get_version(self, mod_id: str, version_selector: str) -> ModVersion:
        """
        解析版本选择器

        "latest" 按存储的版本字符串降序取第一个，与语义化版本顺序可能不一致。
        模组没有任何版本时同样报告版本不存在。
        """
        if version_selector == LATEST:
            version = await self.reader.get_latest_version(mod_id)
        else:
            version = await self.reader.get_version_by_mod_and_number(
                mod_id, version_selector
            )
        if version is None:
            raise VersionNotFoundError(
                context={"modID": mod_id, "version": version_selector}
            )
        return version

    async def build_manifest(
        self,
        mod_id: str,
        version_selector: str = LATEST,
        include_optional: bool = False,
    ) -> Manifest:
        """
        构建安装清单

        只包含所请求版本的直接依赖，不做递归展开。

        Args:
            mod_id: 模组 ID
            version_selector: 版本号或 "latest"
            include_optional: 是否包含 optional 依赖

        Returns:
            安装清单
        """
        mod = await self.get_mod(mod_id)
        version = await self.get_version(mod_id, version_selector)

        files = await self.reader.get_files_by_version_ids([version.mod_version_id])
        if not files:
            # 没有文件的版本视为数据错误
            raise FilesNotFoundError(
                context={"modID": mod_id, "version": version.version_number}
            )

        rows = await self.reader.get_dependencies_by_version_ids(
            [version.mod_version_id]
        )
        dependencies = select_dependencies(rows, include_optional)

        logger.debug(
            f"[清单] {mod_id}@{version.version_number}: {len(files)} 个文件, "
            f"{len(dependencies or [])}/{len(rows)} 条依赖"
        )
        return Manifest(mod=mod, version=version, files=files, dependencies=dependencies)

    async def build_required_dependencies(
        self, mod_id: str, version_selector: str = LATEST
    ) -> List[ModDependency]:
        """获取某个版本递归展开后的全部 required 依赖行"""
        await self.get_mod(mod_id)
        version = await self.get_version(mod_id, version_selector)

        rows = await self.resolver.collect_required_dependencies(version.mod_version_id)
        if not rows:
            raise DependenciesNotFoundError(
                context={"modID": mod_id, "version": version.version_number}
            )
        return rows
