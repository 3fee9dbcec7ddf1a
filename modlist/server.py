"""
HTTP 服务

基于 aiohttp.web 的只读 API：目录浏览、安装清单、下载列表。
"""

from typing import Any, Optional

import aiohttp_cors
from aiohttp import web
from loguru import logger

from modlist import __version__
from modlist.catalog import MAX_ID, Catalog
from modlist.exceptions import CatalogError, NotFoundError, ValidationError
from modlist.models import ModListConfig
from modlist.services import (
    CatalogBrowser,
    DependencyResolver,
    DownloadAggregator,
    ManifestBuilder,
)

CATALOG_KEY = web.AppKey("catalog", Catalog)
CONFIG_KEY = web.AppKey("config", ModListConfig)

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off", "")

routes = web.RouteTableDef()


def json_error(message: str, status: int) -> web.Response:
    """错误响应统一为 {"message": ...}"""
    return web.json_response({"message": message}, status=status)


def parse_flag(value: Optional[str], name: str) -> bool:
    """解析布尔查询参数"""
    if value is None:
        return False
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValidationError(f"Invalid value for {name}", context={name: value})


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    """
    异常到 HTTP 状态码的映射

    NotFoundError 是预期结果，只记录 DEBUG 日志；其余异常一律 500，
    响应中不包含 SQL 或堆栈信息。
    """
    try:
        return await handler(request)
    except NotFoundError as e:
        logger.debug(f"[请求] {request.method} {request.path} -> 404 {e.message}")
        return json_error(e.message, 404)
    except ValidationError as e:
        logger.debug(f"[请求] {request.method} {request.path} -> 400 {e.message}")
        return json_error(e.message, 400)
    except web.HTTPNotFound:
        return json_error("Not found", 404)
    except web.HTTPException:
        raise
    except CatalogError as e:
        logger.error(
            f"[请求] {request.method} {request.path} 数据库错误: {e} {e.context}"
        )
        return json_error("Internal server error", 500)
    except Exception as e:
        logger.exception(f"[请求] {request.method} {request.path} 未处理的异常: {e}")
        return json_error("Internal server error", 500)


def _dump(items: Any) -> list:
    return [item.to_dict() for item in items]


def _version_id(request: web.Request) -> int:
    """路由只保证是数字，超出主键范围的 id 按参数错误处理"""
    raw = request.match_info["version_id"]
    version_id = int(raw)
    if version_id > MAX_ID:
        raise ValidationError("Invalid version id", context={"versionID": raw})
    return version_id


@routes.get("/healthz")
async def health(request: web.Request) -> web.Response:
    try:
        async with request.app[CATALOG_KEY].reader() as reader:
            await reader.ping()
    except CatalogError as e:
        logger.warning(f"[健康检查] 数据库不可用: {e}")
        return json_error("Database unavailable", 503)
    return web.Response(text="OK")


@routes.get("/mods")
async def list_mods(request: web.Request) -> web.Response:
    pagination = request.app[CONFIG_KEY].pagination
    async with request.app[CATALOG_KEY].reader() as reader:
        mods = await CatalogBrowser(reader, pagination).list_mods(
            request.query.get("limit"), request.query.get("offset")
        )
    return web.json_response(_dump(mods))


@routes.get("/mods/search")
async def search_mods(request: web.Request) -> web.Response:
    pagination = request.app[CONFIG_KEY].pagination
    async with request.app[CATALOG_KEY].reader() as reader:
        mods = await CatalogBrowser(reader, pagination).search_mods(
            request.query.get("q"),
            request.query.get("limit"),
            request.query.get("offset"),
        )
    return web.json_response(_dump(mods))


@routes.get("/mods/tags/{tag}")
async def mods_by_tag(request: web.Request) -> web.Response:
    pagination = request.app[CONFIG_KEY].pagination
    async with request.app[CATALOG_KEY].reader() as reader:
        mods = await CatalogBrowser(reader, pagination).mods_by_tag(
            request.match_info["tag"],
            request.query.get("limit"),
            request.query.get("offset"),
        )
    return web.json_response(_dump(mods))


@routes.get("/mods/{mod_id}")
async def get_mod(request: web.Request) -> web.Response:
    async with request.app[CATALOG_KEY].reader() as reader:
        mod = await CatalogBrowser(reader).get_mod(request.match_info["mod_id"])
    return web.json_response(mod.to_dict())


@routes.get("/mods/{mod_id}/versions")
async def list_versions(request: web.Request) -> web.Response:
    async with request.app[CATALOG_KEY].reader() as reader:
        versions = await CatalogBrowser(reader).list_versions(
            request.match_info["mod_id"]
        )
    return web.json_response(_dump(versions))


@routes.get("/mods/{mod_id}/versions/{version}/manifest")
async def get_manifest(request: web.Request) -> web.Response:
    include_optional = parse_flag(
        request.query.get("includeOptional"), "includeOptional"
    )
    async with request.app[CATALOG_KEY].reader() as reader:
        manifest = await ManifestBuilder(reader).build_manifest(
            request.match_info["mod_id"],
            request.match_info["version"],
            include_optional,
        )
    return web.json_response(manifest.to_dict())


@routes.get("/mods/{mod_id}/versions/{version}/dependencies")
async def get_required_dependencies(request: web.Request) -> web.Response:
    async with request.app[CATALOG_KEY].reader() as reader:
        rows = await ManifestBuilder(reader).build_required_dependencies(
            request.match_info["mod_id"], request.match_info["version"]
        )
    return web.json_response(_dump(rows))


@routes.get(r"/versions/{version_id:\d+}/downloads")
async def get_downloads(request: web.Request) -> web.Response:
    version_id = _version_id(request)
    async with request.app[CATALOG_KEY].reader() as reader:
        refs = await DownloadAggregator(reader).resolve_download_set(version_id)
    return web.json_response(_dump(refs))


@routes.get(r"/versions/{version_id:\d+}/closure")
async def get_closure(request: web.Request) -> web.Response:
    version_id = _version_id(request)
    async with request.app[CATALOG_KEY].reader() as reader:
        closure = await DependencyResolver(reader).resolve_closure([version_id])
    return web.json_response(sorted(closure))


def setup_cors(app: web.Application) -> None:
    """为全部路由开启跨域访问（任意来源，只读接口不携带凭据）"""
    cors = aiohttp_cors.setup(
        app,
        defaults={
            "*": aiohttp_cors.ResourceOptions(
                allow_credentials=False, expose_headers="*", allow_headers="*"
            )
        },
    )
    for route in list(app.router.routes()):
        cors.add(route)


def create_app(
    config: Optional[ModListConfig] = None, catalog: Optional[Catalog] = None
) -> web.Application:
    """
    创建 aiohttp 应用

    Args:
        config: 服务配置，默认使用内置默认值
        catalog: 外部传入的目录数据库；为空时根据配置创建，并在应用关闭时释放
    """
    config = config or ModListConfig()
    app = web.Application(middlewares=[error_middleware])
    app[CONFIG_KEY] = config
    app[CATALOG_KEY] = catalog or Catalog(config.database)

    async def on_startup(app: web.Application) -> None:
        logger.info(f"[启动] ModList API v{__version__}")
        try:
            async with app[CATALOG_KEY].reader() as reader:
                await reader.ping()
            logger.success("[启动] 数据库连接正常")
        except CatalogError as e:
            logger.warning(f"[启动] 数据库暂不可用: {e}")

    async def on_cleanup(app: web.Application) -> None:
        await app[CATALOG_KEY].close()
        logger.info("[停止] 数据库引擎已释放")

    app.on_startup.append(on_startup)
    app.on_cleanup.append(on_cleanup)
    app.add_routes(routes)
    setup_cors(app)
    return app


def run_server(
    config: ModListConfig, host: Optional[str] = None, port: Optional[int] = None
) -> None:
    """启动 HTTP 服务（阻塞）"""
    host = host or config.server.host
    port = port or config.server.port
    logger.info(f"[启动] 监听 {host}:{port}")
    web.run_app(create_app(config), host=host, port=port, print=None)
