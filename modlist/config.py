"""
配置加载

支持 toml / json / yaml 配置文件，并允许环境变量（含 .env 文件）覆盖。
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import toml
import yaml
from dotenv import load_dotenv
from loguru import logger

from modlist.exceptions import ConfigError, ConfigParseError
from modlist.models import ModListConfig

TRUTHY = ("1", "true", "yes", "on")


def load_config(config_path: str) -> Dict[str, Any]:
    """加载配置文件"""
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"配置文件不存在: {config_path}", context={"path": config_path})

    suffix = path.suffix.lower()

    try:
        if suffix == ".toml":
            return toml.load(config_path)
        elif suffix == ".json":
            return json.loads(path.read_text(encoding="utf-8"))
        elif suffix in (".yaml", ".yml"):
            return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (toml.TomlDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(
            f"配置文件解析失败: {e}", context={"path": config_path}
        ) from e

    raise ConfigParseError(f"不支持的配置文件格式: {suffix}", context={"path": config_path})


def apply_env_overrides(
    data: Dict[str, Any], environ: Optional[Mapping[str, str]] = None
) -> Dict[str, Any]:
    """
    用环境变量覆盖配置字典

    支持 DATABASE_URL、HOST、PORT、MODLIST_DEBUG。
    """
    env = os.environ if environ is None else environ
    data = dict(data)

    if env.get("DATABASE_URL"):
        data["database"] = {**(data.get("database") or {}), "url": env["DATABASE_URL"]}
    if env.get("HOST"):
        data["server"] = {**(data.get("server") or {}), "host": env["HOST"]}
    if env.get("PORT"):
        data["server"] = {**(data.get("server") or {}), "port": env["PORT"]}
    if env.get("MODLIST_DEBUG"):
        data["debug"] = env["MODLIST_DEBUG"].lower() in TRUTHY

    return data


def build_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    use_dotenv: bool = True,
) -> ModListConfig:
    """
    构建最终配置

    Args:
        config_path: 配置文件路径，为空时只使用默认值和环境变量
        environ: 环境变量映射，默认为 os.environ
        use_dotenv: 是否先加载当前目录的 .env 文件

    Returns:
        已验证的配置
    """
    if use_dotenv and environ is None:
        load_dotenv()

    data: Dict[str, Any] = {}
    if config_path:
        data = load_config(config_path)
        logger.debug(f"已加载配置文件: {config_path}")

    return ModListConfig.from_dict(apply_env_overrides(data, environ))
