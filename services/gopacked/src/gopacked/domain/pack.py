from __future__ import annotations

from dataclasses import dataclass, field

from gopacked.domain.file_entry import (
    FileEntry,
    ManifestFormatError,
    entry_from_json,
    entry_to_json,
)
from gopacked.domain.json_types import JsonDict, JsonValue, as_json_dict
from gopacked.domain.version import Version, VersionParseError

DEFINITION_FILENAME = "gopacked.json"


def _empty_tree() -> FileEntry:
    return FileEntry.directory()


def _no_settings() -> JsonDict:
    return {}


@dataclass(frozen=True)
class GoPack:
    name: str
    simple_name: str
    version: Version
    update_url: str = ""
    author: str = ""
    forge_version: str = ""
    gopacked_min: Version | None = None
    gopacked_max: Version | None = None
    profile_settings: JsonDict = field(default_factory=_no_settings)
    mcl_version: FileEntry = field(default_factory=_empty_tree)
    files: FileEntry = field(default_factory=_empty_tree)


def _parse_required_version(raw: JsonValue, key: str) -> Version:
    if raw is None or raw == "":
        raise ManifestFormatError(f"{key} is required")
    try:
        return Version.parse(str(raw))
    except VersionParseError as e:
        raise ManifestFormatError(f"{key}: {e}") from e


def _parse_optional_version(raw: JsonValue, key: str) -> Version | None:
    if raw is None or raw == "":
        return None
    return _parse_required_version(raw, key)


def _parse_tree(raw: JsonValue, key: str) -> FileEntry:
    if raw is None or raw == {}:
        return _empty_tree()
    return entry_from_json(raw, key)


def pack_from_json(data: object) -> GoPack:
    if not isinstance(data, dict):
        raise ManifestFormatError("goPack definition must be an object")
    raw = as_json_dict(data)
    name = str(raw.get("name") or "")
    if not name:
        raise ManifestFormatError("name is required")
    simple_name = str(raw.get("simplename") or "")
    if not simple_name:
        raise ManifestFormatError("simplename is required")
    version = _parse_required_version(raw.get("version"), "version")
    settings = raw.get("profile-settings")
    if settings is not None and not isinstance(settings, dict):
        raise ManifestFormatError("profile-settings must be an object")
    return GoPack(
        name=name,
        simple_name=simple_name,
        version=version,
        update_url=str(raw.get("update-url") or ""),
        author=str(raw.get("author") or ""),
        forge_version=str(raw.get("forge-version") or ""),
        gopacked_min=_parse_optional_version(raw.get("gopacked-version-minimum"), "gopacked-version-minimum"),
        gopacked_max=_parse_optional_version(raw.get("gopacked-version-maximum"), "gopacked-version-maximum"),
        profile_settings=as_json_dict(settings),
        mcl_version=_parse_tree(raw.get("mcl-version"), "mcl-version"),
        files=_parse_tree(raw.get("files"), "files"),
    )


def pack_to_json(pack: GoPack) -> JsonDict:
    data: JsonDict = {
        "name": pack.name,
        "simplename": pack.simple_name,
        "update-url": pack.update_url,
        "author": pack.author,
        "version": str(pack.version),
    }
    if pack.forge_version:
        data["forge-version"] = pack.forge_version
    if pack.gopacked_min is not None:
        data["gopacked-version-minimum"] = str(pack.gopacked_min)
    if pack.gopacked_max is not None:
        data["gopacked-version-maximum"] = str(pack.gopacked_max)
    data["profile-settings"] = dict(pack.profile_settings)
    data["mcl-version"] = entry_to_json(pack.mcl_version)
    data["files"] = entry_to_json(pack.files)
    return data
