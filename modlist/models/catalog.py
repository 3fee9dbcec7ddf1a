"""
目录数据模型

定义 Mods / ModVersions / ModFiles / ModDependencies 四张表的行对象，
以及清单 (Manifest) 和下载引用 (DownloadRef)。
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class DependencyType(Enum):
    """依赖类型"""

    REQUIRED = "required"
    OPTIONAL = "optional"


def _iso(value: Any) -> Any:
    """
    日期转为 ISO 8601 字符串，其它值原样返回

    时间统一输出为 UTC 毫秒精度并带 Z 后缀，例如 2023-05-04T04:00:00.000Z；
    不带时区的时间按 UTC 处理。
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.isoformat(timespec="milliseconds") + "Z"
    if isinstance(value, date):
        return value.isoformat()
    return value


@dataclass
class Mod:
    """
    模组信息。

    mod_id 是人工指定的稳定 slug，其余描述字段均可为空。
    """

    mod_id: str
    name: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[str] = None
    icon: Optional[str] = None
    forum_url: Optional[str] = None
    github_url: Optional[str] = None
    donation_url: Optional[str] = None
    version: Optional[str] = None
    release_date: Optional[datetime] = None

    @property
    def tag_list(self) -> List[str]:
        """以逗号分隔的标签列表"""
        if not self.tags:
            return []
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Mod":
        """将 Mods 表的一行转换为 Mod 对象。"""
        return cls(
            mod_id=row["modID"],
            name=row.get("modName"),
            author=row.get("modAuthor"),
            description=row.get("modDescription"),
            tags=row.get("modTags"),
            icon=row.get("modIcon"),
            forum_url=row.get("modForumURL"),
            github_url=row.get("modGithubURL"),
            donation_url=row.get("modDonationURL"),
            version=row.get("modVersion"),
            release_date=row.get("modReleaseDate"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "modID": self.mod_id,
            "modIcon": self.icon,
            "modName": self.name,
            "modAuthor": self.author,
            "modDescription": self.description,
            "modVersion": self.version,
            "modReleaseDate": _iso(self.release_date),
            "modTags": self.tags,
            "modForumURL": self.forum_url,
            "modGithubURL": self.github_url,
            "modDonationURL": self.donation_url,
        }


@dataclass
class ModVersion:
    """
    模组版本信息。

    version_number 是原样存储的字符串，不保证能按数值排序。
    """

    mod_version_id: int
    mod_id: str
    version_number: str
    release_date: Optional[datetime] = None
    changelog: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ModVersion":
        return cls(
            mod_version_id=row["modVersionID"],
            mod_id=row["modID"],
            version_number=row["versionNumber"],
            release_date=row.get("releaseDate"),
            changelog=row.get("changelog"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "modVersionID": self.mod_version_id,
            "modID": self.mod_id,
            "versionNumber": self.version_number,
            "releaseDate": _iso(self.release_date),
            "changelog": self.changelog,
        }


@dataclass
class ModFile:
    """版本文件信息"""

    file_id: int
    mod_version_id: int
    file_url: str
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    upload_date: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ModFile":
        return cls(
            file_id=row["fileID"],
            mod_version_id=row["modVersionID"],
            file_url=row["fileURL"],
            file_type=row.get("fileType"),
            file_size=row.get("fileSize"),
            upload_date=row.get("uploadDate"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileID": self.file_id,
            "modVersionID": self.mod_version_id,
            "fileType": self.file_type,
            "fileSize": self.file_size,
            "fileURL": self.file_url,
            "uploadDate": _iso(self.upload_date),
        }


@dataclass
class ModDependency:
    """
    依赖信息。

    依赖指向的是模组 (dependency_mod_id)，而不是某个具体版本；
    最小/最大版本只做记录，解析时不会据此过滤。
    """

    id: int
    mod_version_id: int
    dependency_mod_id: str
    dependency_type: str  # required, optional
    minimum_version: Optional[str] = None
    maximum_version: Optional[str] = None

    @property
    def is_required(self) -> bool:
        return self.dependency_type == DependencyType.REQUIRED.value

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ModDependency":
        return cls(
            id=row["id"],
            mod_version_id=row["modVersionID"],
            dependency_mod_id=row["dependencyModID"],
            dependency_type=row["dependencyType"],
            minimum_version=row.get("minimumDependencyVersion"),
            maximum_version=row.get("maximumDependencyVersion"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "modVersionID": self.mod_version_id,
            "dependencyModID": self.dependency_mod_id,
            "minimumDependencyVersion": self.minimum_version,
            "maximumDependencyVersion": self.maximum_version,
            "dependencyType": self.dependency_type,
        }


@dataclass
class DownloadRef:
    """下载列表中的一项"""

    file_url: str
    file_type: Optional[str] = None

    @classmethod
    def from_file(cls, file: ModFile) -> "DownloadRef":
        return cls(file_url=file.file_url, file_type=file.file_type)

    def to_dict(self) -> Dict[str, Any]:
        return {"fileURL": self.file_url, "fileType": self.file_type}


@dataclass
class Manifest:
    """
    安装清单。

    dependencies 为 None 时表示清单不包含依赖部分，序列化时省略该键。
    """

    mod: Mod
    version: ModVersion
    files: List[ModFile] = field(default_factory=list)
    dependencies: Optional[List[ModDependency]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "mod": self.mod.to_dict(),
            "version": self.version.to_dict(),
            "files": [file.to_dict() for file in self.files],
        }
        if self.dependencies is not None:
            data["dependencies"] = [dep.to_dict() for dep in self.dependencies]
        return data
