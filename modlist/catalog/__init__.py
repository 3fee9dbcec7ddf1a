"""
ModList 目录数据层

包含表结构、只读查询和引擎管理。
"""

from modlist.catalog.database import Catalog, create_catalog_engine
from modlist.catalog.reader import CatalogReader
from modlist.catalog.schema import (
    MAX_ID,
    metadata,
    mods,
    mod_versions,
    mod_files,
    mod_dependencies,
)

__all__ = [
    "Catalog",
    "CatalogReader",
    "create_catalog_engine",
    "MAX_ID",
    "metadata",
    "mods",
    "mod_versions",
    "mod_files",
    "mod_dependencies",
]
