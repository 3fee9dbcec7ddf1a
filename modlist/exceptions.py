"""
ModList 统一异常体系

每个异常类带有固定的错误代码和默认消息，context 保存便于排查的附加信息
（不包含 SQL 文本）。
"""

from typing import Any, Dict, Optional


class ModListError(Exception):
    """ModList 基础异常类"""

    code = "E000"
    default_message = "Internal error"

    def __init__(
        self,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigError(ModListError):
    """配置相关错误"""

    code = "E100"
    default_message = "Invalid configuration"


class ConfigParseError(ConfigError):
    """配置文件无法解析"""

    code = "E101"


class ConfigValidationError(ConfigError):
    """配置值不合法"""

    code = "E102"


class CatalogError(ModListError):
    """数据库读取失败（上游错误）"""

    code = "E200"
    default_message = "Catalog error"


class CatalogQueryError(CatalogError):
    code = "E201"


class CatalogUnavailableError(CatalogError):
    code = "E202"
    default_message = "Catalog unavailable"


class NotFoundError(ModListError):
    """
    资源不存在

    属于预期结果而非故障，不应按错误级别记录日志。
    """

    code = "E404"
    default_message = "Not found"


class ModNotFoundError(NotFoundError):
    default_message = "Mod not found"


class VersionNotFoundError(NotFoundError):
    default_message = "Version not found"


class FilesNotFoundError(NotFoundError):
    default_message = "Files not found"


class DependenciesNotFoundError(NotFoundError):
    default_message = "Dependencies not found"


class ValidationError(ModListError):
    """请求参数验证错误"""

    code = "E400"
    default_message = "Invalid request"


__all__ = [
    "ModListError",
    # 配置
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    # 数据库
    "CatalogError",
    "CatalogQueryError",
    "CatalogUnavailableError",
    # 资源不存在
    "NotFoundError",
    "ModNotFoundError",
    "VersionNotFoundError",
    "FilesNotFoundError",
    "DependenciesNotFoundError",
    "ValidationError",
]
