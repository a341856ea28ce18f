from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping

from gopacked.domain.json_types import JsonDict, as_json_dict

NO_NEST = "//"


class ManifestFormatError(ValueError):
    pass


class FileType(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    ZIP_ARCHIVE = "zip-archive"


class Side(str, Enum):
    CLIENT = "client"
    SERVER = "server"
    BOTH = "both"


def _no_children() -> dict[str, FileEntry]:
    return {}


@dataclass(frozen=True)
class FileEntry:
    """A node of a modpack file tree.

    ``version`` is kept as the raw manifest text so that a malformed version
    only fails the comparison that needs it, not the whole manifest.
    """

    type: FileType
    filename: str = ""
    version: str = ""
    side: Side | None = None
    url: str = ""
    children: Mapping[str, FileEntry] = field(default_factory=_no_children)

    @property
    def is_container(self) -> bool:
        return self.type in (FileType.DIRECTORY, FileType.ZIP_ARCHIVE)

    @classmethod
    def directory(
        cls,
        children: Mapping[str, FileEntry] | None = None,
        *,
        filename: str = "",
        side: Side | None = None,
    ) -> FileEntry:
        return cls(FileType.DIRECTORY, filename=filename, side=side, children=dict(children or {}))

    @classmethod
    def file(cls, url: str, version: str, *, filename: str = "", side: Side | None = None) -> FileEntry:
        return cls(FileType.FILE, filename=filename, version=version, side=side, url=url)

    @classmethod
    def zip_archive(
        cls, url: str, version: str, *, filename: str = "", side: Side | None = None
    ) -> FileEntry:
        return cls(FileType.ZIP_ARCHIVE, filename=filename, version=version, side=side, url=url)


def side_matches(entry_side: Side | None, requested: Side) -> bool:
    if entry_side is None or entry_side == Side.BOTH:
        return True
    return entry_side == requested


def url_basename(url: str) -> str:
    return url.split("/")[-1]


def resolve_path(parent: Path, key: str, entry: FileEntry) -> Path:
    """Return where ``entry``, stored under ``key``, lives below ``parent``."""
    if entry.is_container:
        if entry.filename:
            if entry.filename == NO_NEST:
                return parent
            return parent / entry.filename
        if key:
            return parent / key
        return parent
    if entry.filename:
        return parent / entry.filename
    return parent / url_basename(entry.url)


def display_name(key: str, entry: FileEntry) -> str:
    if key:
        return key
    if entry.filename and entry.filename != NO_NEST:
        return entry.filename
    if entry.url:
        return url_basename(entry.url)
    return "<root>"


def _parse_side(raw: object, where: str) -> Side | None:
    if raw is None or raw == "":
        return None
    try:
        return Side(str(raw).lower())
    except ValueError:
        raise ManifestFormatError(f"{where}: unknown side {raw!r}") from None


def entry_from_json(data: object, where: str = "files") -> FileEntry:
    if not isinstance(data, dict):
        raise ManifestFormatError(f"{where}: file entry must be an object")
    raw = as_json_dict(data)
    try:
        entry_type = FileType(str(raw.get("type", "")))
    except ValueError:
        raise ManifestFormatError(f"{where}: unknown entry type {raw.get('type')!r}") from None

    raw_children = raw.get("children") or {}
    if not isinstance(raw_children, dict):
        raise ManifestFormatError(f"{where}: children must be an object")
    children = {
        str(key): entry_from_json(value, f"{where}.{key}")
        for key, value in raw_children.items()
    }
    if entry_type != FileType.DIRECTORY and children:
        raise ManifestFormatError(f"{where}: only directories may have children")

    url = str(raw.get("url") or "")
    if entry_type != FileType.DIRECTORY and not url:
        raise ManifestFormatError(f"{where}: {entry_type.value} entries require a url")

    version = raw.get("version")
    return FileEntry(
        type=entry_type,
        filename=str(raw.get("filename") or ""),
        version="" if version is None else str(version),
        side=_parse_side(raw.get("side"), where),
        url=url,
        children=children,
    )


def entry_to_json(entry: FileEntry) -> JsonDict:
    data: JsonDict = {"type": entry.type.value}
    if entry.filename:
        data["filename"] = entry.filename
    if entry.version:
        data["version"] = entry.version
    if entry.side is not None:
        data["side"] = entry.side.value
    if entry.url:
        data["url"] = entry.url
    if entry.children:
        data["children"] = {key: entry_to_json(child) for key, child in entry.children.items()}
    return data
