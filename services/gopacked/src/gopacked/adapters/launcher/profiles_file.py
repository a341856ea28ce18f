from __future__ import annotations

import json
import logging
from pathlib import Path

from gopacked.adapters.errors import ProfileReadError, ProfileWriteError
from gopacked.domain.json_types import JsonDict, as_json_dict
from gopacked.ports.launcher_profiles import ProfileRequest

logger = logging.getLogger(__name__)

PROFILES_FILENAME = "launcher_profiles.json"


def profiles_path(minecraft_path: Path) -> Path:
    return minecraft_path / PROFILES_FILENAME


def read_profiles(minecraft_path: Path) -> JsonDict:
    path = profiles_path(minecraft_path)
    try:
        raw: object = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ProfileReadError(f"Failed to read {path}", cause=e)
    except json.JSONDecodeError as e:
        raise ProfileReadError(f"Failed to parse {path}", cause=e)
    if not isinstance(raw, dict):
        raise ProfileReadError(f"{path} does not contain a JSON object")
    return as_json_dict(raw)


def write_profiles(minecraft_path: Path, document: JsonDict) -> None:
    path = profiles_path(minecraft_path)
    try:
        path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ProfileWriteError(f"Failed to save {path}", cause=e)


def _profiles_table(document: JsonDict) -> JsonDict:
    profiles = document.get("profiles")
    if not isinstance(profiles, dict):
        profiles = {}
        document["profiles"] = profiles
    return profiles


class LauncherProfilesFile:
    def register(self, minecraft_path: Path, request: ProfileRequest) -> None:
        document = read_profiles(minecraft_path)
        profiles = _profiles_table(document)
        logger.info("Adding %s to %s", request.name, PROFILES_FILENAME)
        existing = profiles.get(request.name)
        profile: JsonDict = dict(existing) if isinstance(existing, dict) else {}
        profile["name"] = request.name
        profile["gameDir"] = str(request.game_dir)
        profile["lastVersionId"] = request.version_id
        profile.update(request.settings)
        profiles[request.name] = profile
        write_profiles(minecraft_path, document)

    def unregister(self, minecraft_path: Path, name: str) -> None:
        document = read_profiles(minecraft_path)
        profiles = _profiles_table(document)
        logger.info("Removing %s from %s", name, PROFILES_FILENAME)
        if profiles.pop(name, None) is None:
            logger.warning("No launcher profile named %s", name)
            return
        write_profiles(minecraft_path, document)
