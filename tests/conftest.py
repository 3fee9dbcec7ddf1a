from pathlib import Path

import pytest
import pytest_asyncio
from loguru import logger

from modlist.catalog import Catalog
from modlist.models import DatabaseConfig, ModListConfig

from tests.support import seed_catalog


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep loguru output out of the test report."""
    logger.remove()
    yield
    logger.remove()


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"


@pytest.fixture
def config(database_url: str) -> ModListConfig:
    return ModListConfig(database=DatabaseConfig(url=database_url))


@pytest_asyncio.fixture
async def catalog(config: ModListConfig):
    catalog = Catalog(config.database)
    await seed_catalog(catalog)
    yield catalog
    await catalog.close()


@pytest_asyncio.fixture
async def reader(catalog: Catalog):
    async with catalog.reader() as reader:
        yield reader
