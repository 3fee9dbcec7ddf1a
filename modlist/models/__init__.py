"""
ModList 数据模型包

包含配置模型和目录数据模型定义。
"""

from modlist.models.config import (
    ServerConfig,
    DatabaseConfig,
    PaginationConfig,
    ModListConfig,
)
from modlist.models.catalog import (
    DependencyType,
    Mod,
    ModVersion,
    ModFile,
    ModDependency,
    DownloadRef,
    Manifest,
)

__all__ = [
    # 配置模型
    "ServerConfig",
    "DatabaseConfig",
    "PaginationConfig",
    "ModListConfig",
    # 目录模型
    "DependencyType",
    "Mod",
    "ModVersion",
    "ModFile",
    "ModDependency",
    "DownloadRef",
    "Manifest",
]
