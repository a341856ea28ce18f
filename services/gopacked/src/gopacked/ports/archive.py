from pathlib import Path
from typing import Protocol


class ArchivePort(Protocol):
    def expand(self, archive_path: Path, target_dir: Path) -> None: ...
