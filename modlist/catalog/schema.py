"""
目录表结构

四张表由外部的上传/导入流程写入，本服务只读。
"""

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)

# 主键列的取值上限（有符号 64 位整数）
MAX_ID = 2**63 - 1

metadata = MetaData()

mods = Table(
    "Mods",
    metadata,
    Column("modID", String(64), primary_key=True),
    Column("modName", String(255)),
    Column("modAuthor", String(255)),
    Column("modDescription", Text),
    Column("modTags", String(255)),
    Column("modIcon", String(512)),
    Column("modForumURL", String(512)),
    Column("modGithubURL", String(512)),
    Column("modDonationURL", String(512)),
    Column("modVersion", String(64)),
    Column("modReleaseDate", DateTime),
)

mod_versions = Table(
    "ModVersions",
    metadata,
    Column("modVersionID", Integer, primary_key=True, autoincrement=True),
    Column("modID", String(64), ForeignKey("Mods.modID"), nullable=False, index=True),
    Column("versionNumber", String(64), nullable=False),
    Column("releaseDate", DateTime),
    Column("changelog", Text),
    UniqueConstraint("modID", "versionNumber", name="uq_mod_version_number"),
)

mod_files = Table(
    "ModFiles",
    metadata,
    Column("fileID", Integer, primary_key=True, autoincrement=True),
    Column(
        "modVersionID",
        Integer,
        ForeignKey("ModVersions.modVersionID"),
        nullable=False,
        index=True,
    ),
    Column("fileType", String(64)),
    Column("fileSize", BigInteger),
    Column("fileURL", String(1024), nullable=False),
    Column("uploadDate", DateTime),
)

mod_dependencies = Table(
    "ModDependencies",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "modVersionID",
        Integer,
        ForeignKey("ModVersions.modVersionID"),
        nullable=False,
        index=True,
    ),
    Column("dependencyModID", String(64), ForeignKey("Mods.modID"), nullable=False),
    Column("minimumDependencyVersion", String(64)),
    Column("maximumDependencyVersion", String(64)),
    Column("dependencyType", String(16), nullable=False, default="required"),
)

__all__ = ["metadata", "mods", "mod_versions", "mod_files", "mod_dependencies"]
