from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from gopacked.domain.json_types import JsonDict


@dataclass
class ProfileRequest:
    name: str
    game_dir: Path
    version_id: str
    settings: JsonDict


class LauncherProfilesPort(Protocol):
    def register(self, minecraft_path: Path, request: ProfileRequest) -> None: ...

    def unregister(self, minecraft_path: Path, name: str) -> None: ...
