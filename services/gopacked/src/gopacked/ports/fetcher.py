from pathlib import Path
from typing import Protocol


class FetcherPort(Protocol):
    def fetch_bytes(self, url: str) -> bytes: ...

    def fetch_to_file(self, url: str, path: Path) -> None: ...
