from __future__ import annotations

import io
import logging
from pathlib import Path
import zipfile

import pytest

from gopacked.adapters.archive.extractor import ArchiveExtractor
from gopacked.adapters.errors import FetchError
from gopacked.application.settings import InstallContext
from gopacked.domain.file_entry import Side


class FakeFetcher:
    """Serves canned bodies by URL and records every request."""

    def __init__(self, bodies: dict[str, bytes] | None = None) -> None:
        self.bodies = dict(bodies or {})
        self.calls: list[str] = []

    def fetch_bytes(self, url: str) -> bytes:
        self.calls.append(url)
        if url not in self.bodies:
            raise FetchError(f"no body for {url}")
        return self.bodies[url]

    def fetch_to_file(self, url: str, path: Path) -> None:
        path.write_bytes(self.fetch_bytes(url))


class FakeConfirm:
    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.prompts: list[str] = []

    def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.answer


def zip_bytes(members: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buf.getvalue()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def make_zip():
    return zip_bytes


@pytest.fixture
def make_context(fetcher):
    def _make(side: Side = Side.CLIENT, **kwargs) -> InstallContext:
        kwargs.setdefault("archive", ArchiveExtractor())
        return InstallContext(side=side, fetcher=fetcher, **kwargs)

    return _make


@pytest.fixture
def confirm_yes() -> FakeConfirm:
    return FakeConfirm(True)


@pytest.fixture
def confirm_no() -> FakeConfirm:
    return FakeConfirm(False)


@pytest.fixture(autouse=True)
def _reset_gopacked_logging():
    yield
    root = logging.getLogger("gopacked")
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
