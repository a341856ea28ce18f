from pathlib import Path
from typing import Protocol

from gopacked.domain.file_entry import Side


class LoaderInstallerPort(Protocol):
    def install(self, forge_version: str, install_path: Path, side: Side) -> None: ...
