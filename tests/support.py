"""Shared catalog fixtures: seed rows for a SQLite catalog and an in-memory reader."""

from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from modlist.catalog import Catalog, mod_dependencies, mod_files, mod_versions, mods
from modlist.exceptions import CatalogQueryError
from modlist.models import ModDependency, ModFile, ModVersion

RELEASED = datetime(2023, 5, 4, 4, 0, 0)

# Dependency graph used by the SQLite-backed tests:
#   astro-ui 1.0 (3)  -> core-lib (required), fancy-fx (optional)
#   pack 1.0 (11)     -> astro-ui (required), core-lib (required)
#   loop-a 1.0 (5)   <-> loop-b 1.0 (6)   (both required)
#   only-optional (10) -> fancy-fx (optional)
MODS = [
    {"modID": "core-lib", "modName": "Core Library", "modAuthor": "nim",
     "modDescription": "Shared helpers for other mods.", "modTags": "library,official",
     "modVersion": "2.0.0", "modReleaseDate": RELEASED},
    {"modID": "astro-ui", "modName": "Astro UI", "modAuthor": "vega",
     "modDescription": "User interface overhaul.", "modTags": "ui, official",
     "modGithubURL": "https://github.com/example/astro-ui",
     "modVersion": "1.0", "modReleaseDate": RELEASED},
    {"modID": "fancy-fx", "modName": "Fancy FX", "modAuthor": "vega",
     "modDescription": "Optional particle effects.", "modTags": "graphics",
     "modVersion": "0.9", "modReleaseDate": RELEASED},
    {"modID": "loop-a", "modName": "Loop A", "modAuthor": "nim", "modTags": "test"},
    {"modID": "loop-b", "modName": "Loop B", "modAuthor": "nim", "modTags": "test"},
    {"modID": "empty-mod", "modName": "Empty Mod", "modAuthor": "nim",
     "modDescription": "A mod without any versions.", "modTags": "test"},
    {"modID": "no-files", "modName": "No Files", "modAuthor": "nim", "modTags": "test"},
    {"modID": "latest-test", "modName": "Latest Test", "modAuthor": "nim",
     "modTags": "test,official"},
    {"modID": "only-optional", "modName": "Only Optional", "modAuthor": "orion",
     "modTags": "testing"},
    {"modID": "pack", "modName": "Starter Pack", "modAuthor": "orion",
     "modDescription": "Bundles the 100% essential mods.", "modTags": "pack"},
]

VERSIONS = [
    {"modVersionID": 1, "modID": "core-lib", "versionNumber": "1.0.0", "releaseDate": RELEASED},
    {"modVersionID": 2, "modID": "core-lib", "versionNumber": "2.0.0", "releaseDate": RELEASED},
    {"modVersionID": 3, "modID": "astro-ui", "versionNumber": "1.0", "changelog": "First release"},
    {"modVersionID": 4, "modID": "fancy-fx", "versionNumber": "0.9"},
    {"modVersionID": 5, "modID": "loop-a", "versionNumber": "1.0"},
    {"modVersionID": 6, "modID": "loop-b", "versionNumber": "1.0"},
    {"modVersionID": 7, "modID": "no-files", "versionNumber": "1.0"},
    {"modVersionID": 8, "modID": "latest-test", "versionNumber": "2.0"},
    {"modVersionID": 9, "modID": "latest-test", "versionNumber": "10.0"},
    {"modVersionID": 10, "modID": "only-optional", "versionNumber": "1.0"},
    {"modVersionID": 11, "modID": "pack", "versionNumber": "1.0"},
]

FILES = [
    {"fileID": 1, "modVersionID": 1, "fileType": "mod", "fileSize": 1024,
     "fileURL": "https://cdn.example.com/core-lib-1.0.0.zip"},
    {"fileID": 2, "modVersionID": 2, "fileType": "mod", "fileSize": 2048,
     "fileURL": "https://cdn.example.com/core-lib-2.0.0.zip", "uploadDate": RELEASED},
    {"fileID": 3, "modVersionID": 3, "fileType": "mod", "fileSize": 4096,
     "fileURL": "https://cdn.example.com/astro-ui-1.0.zip"},
    {"fileID": 4, "modVersionID": 3, "fileType": "assets", "fileSize": 8192,
     "fileURL": "https://cdn.example.com/astro-ui-1.0-assets.zip"},
    {"fileID": 5, "modVersionID": 4, "fileType": "mod", "fileSize": 512,
     "fileURL": "https://cdn.example.com/fancy-fx-0.9.zip"},
    {"fileID": 6, "modVersionID": 5, "fileType": "mod", "fileURL": "https://cdn.example.com/loop-a.zip"},
    {"fileID": 7, "modVersionID": 6, "fileType": "mod", "fileURL": "https://cdn.example.com/loop-b.zip"},
    {"fileID": 8, "modVersionID": 8, "fileType": "mod", "fileURL": "https://cdn.example.com/latest-2.0.zip"},
    {"fileID": 9, "modVersionID": 9, "fileType": "mod", "fileURL": "https://cdn.example.com/latest-10.0.zip"},
    {"fileID": 10, "modVersionID": 10, "fileType": "mod", "fileURL": "https://cdn.example.com/only-optional.zip"},
    {"fileID": 11, "modVersionID": 11, "fileType": "mod", "fileURL": "https://cdn.example.com/pack.zip"},
]

DEPENDENCIES = [
    {"id": 1, "modVersionID": 3, "dependencyModID": "core-lib",
     "minimumDependencyVersion": "1.0.0", "maximumDependencyVersion": "1.9.9",
     "dependencyType": "required"},
    {"id": 2, "modVersionID": 3, "dependencyModID": "fancy-fx", "dependencyType": "optional"},
    {"id": 3, "modVersionID": 5, "dependencyModID": "loop-b", "dependencyType": "required"},
    {"id": 4, "modVersionID": 6, "dependencyModID": "loop-a", "dependencyType": "required"},
    {"id": 5, "modVersionID": 10, "dependencyModID": "fancy-fx", "dependencyType": "optional"},
    {"id": 6, "modVersionID": 11, "dependencyModID": "astro-ui", "dependencyType": "required"},
    {"id": 7, "modVersionID": 11, "dependencyModID": "core-lib", "dependencyType": "required"},
]


def _complete(table, rows: List[dict]) -> List[dict]:
    # executemany needs the same keys in every row
    return [{column.name: row.get(column.name) for column in table.columns} for row in rows]


async def seed_catalog(catalog: Catalog) -> None:
    """Create the schema and insert the fixture graph."""
    await catalog.create_schema()
    async with catalog.engine.begin() as conn:
        for table, rows in (
            (mods, MODS),
            (mod_versions, VERSIONS),
            (mod_files, FILES),
            (mod_dependencies, DEPENDENCIES),
        ):
            await conn.execute(table.insert(), _complete(table, rows))


class InMemoryCatalog:
    """
    Reader double holding a dependency graph in dictionaries.

    Records every batched lookup so tests can check that no version is
    expanded twice, and can be told to fail after a number of reads.
    """

    def __init__(self, fail_after: Optional[int] = None):
        self.versions: Dict[int, ModVersion] = {}
        self.dependencies: Dict[int, List[ModDependency]] = defaultdict(list)
        self.files: Dict[int, List[ModFile]] = defaultdict(list)
        self.dependency_lookups: List[List[int]] = []
        self.version_lookups: List[List[str]] = []
        self.reads = 0
        self.fail_after = fail_after
        self._next_id = 1

    def add_version(self, version_id: int, mod_id: str, number: str = "1.0") -> None:
        self.versions[version_id] = ModVersion(version_id, mod_id, number)
        self.files[version_id].append(
            ModFile(
                file_id=version_id,
                mod_version_id=version_id,
                file_url=f"https://cdn.example.com/{mod_id}-{number}-{version_id}.zip",
                file_type="mod",
            )
        )

    def add_dependency(self, version_id: int, mod_id: str, dependency_type: str = "required") -> None:
        self.dependencies[version_id].append(
            ModDependency(self._next_id, version_id, mod_id, dependency_type)
        )
        self._next_id += 1

    def _read(self) -> None:
        self.reads += 1
        if self.fail_after is not None and self.reads > self.fail_after:
            raise CatalogQueryError("数据库查询失败", context={"operation": "fake"})

    async def get_dependencies_by_version_ids(self, version_ids: Iterable[int]) -> List[ModDependency]:
        self._read()
        ids = list(version_ids)
        self.dependency_lookups.append(ids)
        return [row for vid in ids for row in self.dependencies.get(vid, [])]

    async def get_versions_by_mod_ids(self, mod_ids: Iterable[str]) -> List[ModVersion]:
        self._read()
        wanted: Set[str] = set(mod_ids)
        self.version_lookups.append(sorted(wanted))
        return [v for _, v in sorted(self.versions.items()) if v.mod_id in wanted]

    async def get_files_by_version_ids(self, version_ids: Iterable[int]) -> List[ModFile]:
        self._read()
        ids = set(version_ids)
        return [f for vid in sorted(ids) for f in self.files.get(vid, [])]
