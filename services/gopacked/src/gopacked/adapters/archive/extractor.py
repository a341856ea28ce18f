from pathlib import Path
import tarfile
import zipfile

from gopacked.adapters.errors import ArchiveError
from gopacked.domain.json_types import as_json_dict

_TAR_MODES = {
    ".tar.gz": "r:gz",
    ".tgz": "r:gz",
    ".tar.bz2": "r:bz2",
    ".tbz2": "r:bz2",
    ".tar": "r:",
}


def _inside(target: Path, member: str) -> bool:
    resolved = (target / member).resolve()
    root = target.resolve()
    return resolved == root or root in resolved.parents


def _unzip(archive_path: Path, target_dir: Path) -> None:
    with zipfile.ZipFile(archive_path) as archive:
        for name in archive.namelist():
            if not _inside(target_dir, name):
                raise ArchiveError(
                    f"Archive member {name!r} escapes {target_dir}",
                    details=as_json_dict({"archive": str(archive_path), "member": name}),
                )
        archive.extractall(target_dir)


def _untar(archive_path: Path, target_dir: Path, mode: str) -> None:
    with tarfile.open(archive_path, mode) as archive:  # type: ignore[call-overload]
        archive.extractall(target_dir, filter="data")


def _tar_mode(archive_path: Path) -> str | None:
    name = archive_path.name.lower()
    for suffix, mode in _TAR_MODES.items():
        if name.endswith(suffix):
            return mode
    return None


class ArchiveExtractor:
    """Expands zip archives, and tar archives recognised by their suffix."""

    def expand(self, archive_path: Path, target_dir: Path) -> None:
        target_dir.mkdir(parents=True, exist_ok=True)
        mode = _tar_mode(archive_path)
        try:
            if mode is None:
                _unzip(archive_path, target_dir)
            else:
                _untar(archive_path, target_dir, mode)
        except ArchiveError:
            raise
        except (zipfile.BadZipFile, tarfile.TarError, OSError, EOFError) as e:
            raise ArchiveError(
                f"Failed to expand {archive_path.name}",
                details=as_json_dict({"archive": str(archive_path), "target": str(target_dir)}),
                cause=e,
            )
