"""
ModList 服务层

包含业务逻辑服务：依赖闭包解析、安装清单、下载列表、目录浏览。
"""

from modlist.services.dependency_resolver import DependencyResolver, Expansion
from modlist.services.manifest_builder import LATEST, ManifestBuilder, select_dependencies
from modlist.services.download_aggregator import DownloadAggregator
from modlist.services.catalog_browser import CatalogBrowser, clamp_page

__all__ = [
    "DependencyResolver",
    "Expansion",
    "ManifestBuilder",
    "select_dependencies",
    "LATEST",
    "DownloadAggregator",
    "CatalogBrowser",
    "clamp_page",
]
