"""
CLI 模块

命令行接口实现：启动服务，以及直接在终端里查询清单、下载列表和依赖闭包。
"""

import asyncio
import json
from typing import Any, Awaitable, Callable, Optional

import click
from loguru import logger

from modlist import __version__
from modlist.catalog import MAX_ID, Catalog, CatalogReader
from modlist.config import build_config
from modlist.exceptions import ModListError
from modlist.logger import setup_logger
from modlist.models import ModListConfig
from modlist.services import DependencyResolver, DownloadAggregator, ManifestBuilder, LATEST


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, ensure_ascii=False, indent=2))


async def run_async(
    config: ModListConfig, action: Callable[[CatalogReader], Awaitable[Any]]
) -> Any:
    """打开目录数据库，用一个读取器执行查询"""
    async with Catalog(config.database) as catalog:
        async with catalog.reader() as reader:
            return await action(reader)


def run_query(ctx: click.Context, action: Callable[[CatalogReader], Awaitable[Any]]) -> Any:
    """执行查询并把 ModListError 转换为 ClickException"""
    config: ModListConfig = ctx.obj
    try:
        return asyncio.run(run_async(config, action))
    except ModListError as e:
        logger.debug(f"查询失败: {e}")
        raise click.ClickException(e.message)


@click.group()
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="配置文件路径 (toml/json/yaml)",
)
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], debug: bool):
    """ModList - 模组目录与依赖解析服务"""
    try:
        config = build_config(config_path)
    except ModListError as e:
        raise click.ClickException(f"配置错误: {e}")

    if debug:
        config.debug = True
    setup_logger(level="DEBUG" if config.debug else None, log_file=config.log_file)
    ctx.obj = config


@main.command()
@click.option("--host", help="监听地址")
@click.option("--port", type=click.IntRange(1, 65535), help="监听端口")
@click.pass_obj
def serve(config: ModListConfig, host: Optional[str], port: Optional[int]):
    """启动 HTTP 服务"""
    from modlist.server import run_server

    run_server(config, host=host, port=port)


@main.command("init-db")
@click.pass_obj
def init_db(config: ModListConfig):
    """在配置的数据库中创建目录表"""

    async def create() -> None:
        async with Catalog(config.database) as catalog:
            await catalog.create_schema()

    try:
        asyncio.run(create())
    except ModListError as e:
        raise click.ClickException(e.message)
    logger.success("目录表创建完成")


@main.command()
@click.argument("mod_id")
@click.argument("version", default=LATEST)
@click.option("--optional", "include_optional", is_flag=True, help="包含 optional 依赖")
@click.pass_context
def manifest(ctx: click.Context, mod_id: str, version: str, include_optional: bool):
    """输出模组版本的安装清单"""
    result = run_query(
        ctx,
        lambda reader: ManifestBuilder(reader).build_manifest(
            mod_id, version, include_optional
        ),
    )
    _echo_json(result.to_dict())


@main.command()
@click.argument("version_id", type=click.IntRange(0, MAX_ID))
@click.pass_context
def downloads(ctx: click.Context, version_id: int):
    """输出版本及其全部依赖的下载列表"""
    refs = run_query(
        ctx, lambda reader: DownloadAggregator(reader).resolve_download_set(version_id)
    )
    _echo_json([ref.to_dict() for ref in refs])


@main.command()
@click.argument("version_id", type=click.IntRange(0, MAX_ID))
@click.pass_context
def closure(ctx: click.Context, version_id: int):
    """输出版本的依赖闭包"""
    ids = run_query(
        ctx, lambda reader: DependencyResolver(reader).resolve_closure([version_id])
    )
    _echo_json(sorted(ids))


if __name__ == "__main__":
    main()
