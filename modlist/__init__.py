"""
ModList API

模组目录查询与依赖解析服务。
"""

__version__ = "0.9.1"

__all__ = ["__version__"]
