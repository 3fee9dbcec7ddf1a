"""
配置数据模型

服务、数据库、分页三部分配置，以及从字典构建配置的入口。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from modlist.exceptions import ConfigValidationError

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///modlist.db"


@dataclass
class ServerConfig:
    """HTTP 服务配置"""

    host: str = "0.0.0.0"
    port: int = 3000

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServerConfig":
        return cls(
            host=str(data.get("host", cls.host)),
            port=int(data.get("port", cls.port)),
        )


@dataclass
class DatabaseConfig:
    """数据库配置"""

    url: str = DEFAULT_DATABASE_URL
    pool_size: int = 5
    echo: bool = False

    @property
    def async_url(self) -> str:
        """
        返回异步驱动的连接串

        mysql:// 改写为 mysql+aiomysql://，sqlite:// 改写为 sqlite+aiosqlite://。
        """
        scheme, sep, rest = self.url.partition("://")
        if not sep:
            return self.url
        if scheme == "mysql":
            return f"mysql+aiomysql://{rest}"
        if scheme == "sqlite":
            return f"sqlite+aiosqlite://{rest}"
        return self.url

    @property
    def is_sqlite(self) -> bool:
        return self.async_url.startswith("sqlite")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DatabaseConfig":
        return cls(
            url=str(data.get("url", DEFAULT_DATABASE_URL)),
            pool_size=int(data.get("pool_size", cls.pool_size)),
            echo=bool(data.get("echo", False)),
        )


@dataclass
class PaginationConfig:
    """列表接口分页配置"""

    default_limit: int = 10
    max_limit: int = 100

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PaginationConfig":
        return cls(
            default_limit=int(data.get("default_limit", cls.default_limit)),
            max_limit=int(data.get("max_limit", cls.max_limit)),
        )


@dataclass
class ModListConfig:
    """ModList 完整配置"""

    server: ServerConfig = field(default_factory=ServerConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    debug: bool = False
    log_file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ModListConfig":
        """
        从配置字典构建配置对象

        Args:
            data: toml / json / yaml 解析得到的字典

        Returns:
            已验证的配置对象
        """
        data = data or {}
        try:
            config = cls(
                server=ServerConfig.from_dict(data.get("server") or {}),
                database=DatabaseConfig.from_dict(data.get("database") or {}),
                pagination=PaginationConfig.from_dict(data.get("pagination") or {}),
                debug=bool(data.get("debug", False)),
                log_file=data.get("log_file"),
            )
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(f"配置值类型错误: {e}") from e
        config.validate()
        return config

    def validate(self) -> None:
        """验证配置"""
        if not 1 <= self.server.port <= 65535:
            raise ConfigValidationError(
                "端口必须在 1-65535 之间", context={"port": self.server.port}
            )
        if self.database.pool_size < 1:
            raise ConfigValidationError(
                "连接池大小必须为正数", context={"pool_size": self.database.pool_size}
            )
        pagination = self.pagination
        if pagination.default_limit < 1 or pagination.max_limit < 1:
            raise ConfigValidationError("分页限制必须为正数")
        if pagination.default_limit > pagination.max_limit:
            raise ConfigValidationError(
                "default_limit 不能大于 max_limit",
                context={
                    "default_limit": pagination.default_limit,
                    "max_limit": pagination.max_limit,
                },
            )
