from __future__ import annotations

import logging
from pathlib import Path
import shutil

from gopacked.adapters.errors import AdapterError
from gopacked.application.settings import InstallContext
from gopacked.domain.diagnostics import Severity
from gopacked.domain.file_entry import (
    NO_NEST,
    FileEntry,
    FileType,
    display_name,
    resolve_path,
    side_matches,
    url_basename,
)
from gopacked.domain.version import VersionParseError, parse_and_compare

logger = logging.getLogger(__name__)

TEMP_ARCHIVE_NAME = "temp-archive.zip"
_TAR_SUFFIXES = (".tar.gz", ".tgz", ".tar.bz2", ".tbz2", ".tar")


def temp_archive_name(url: str) -> str:
    """Name the download so the extractor can tell tar archives from zips."""
    name = url_basename(url).split("?", 1)[0].lower()
    for suffix in _TAR_SUFFIXES:
        if name.endswith(suffix):
            return "temp-archive" + suffix
    return TEMP_ARCHIVE_NAME


def _skipped(entry: FileEntry, label: str, ctx: InstallContext) -> bool:
    if side_matches(entry.side, ctx.side):
        return False
    side = entry.side.value if entry.side is not None else ""
    logger.debug("Skipping %s (%s-side only)", label, side)
    return True


def install_entry(entry: FileEntry, path: Path, ctx: InstallContext, name: str = "") -> None:
    """Install ``entry`` at ``path``, which is already resolved for this node."""
    label = display_name(name, entry)
    if _skipped(entry, label, ctx):
        return
    if entry.type == FileType.DIRECTORY:
        _install_directory(entry, path, ctx, label, is_root=not name)
    elif entry.type == FileType.FILE:
        _install_file(entry, path, ctx, label)
    else:
        _install_archive(entry, path, ctx, label)


def _install_directory(
    entry: FileEntry, path: Path, ctx: InstallContext, label: str, *, is_root: bool = False
) -> None:
    logger.info("Creating directory %s", label)
    try:
        path.mkdir(parents=True)
    except FileExistsError:
        if path.is_dir():
            # The pack root is created before traversal starts.
            if not is_root:
                logger.warning("Directory %s already exists", path)
        else:
            ctx.report(
                logger,
                "DIRECTORY_CREATE_FAILED",
                "install.directory",
                f"Failed to create {label}: {path} exists and is not a directory",
                path=path,
                entry=label,
            )
    except OSError as e:
        ctx.report(
            logger,
            "DIRECTORY_CREATE_FAILED",
            "install.directory",
            f"Failed to create {label}: {e}",
            path=path,
            entry=label,
        )
    for key in sorted(entry.children):
        child = entry.children[key]
        install_entry(child, resolve_path(path, key, child), ctx, key)


def _install_file(entry: FileEntry, path: Path, ctx: InstallContext, label: str) -> None:
    logger.info("Downloading %s v%s", label, entry.version)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        ctx.fetcher.fetch_to_file(entry.url, path)
    except (AdapterError, OSError) as e:
        ctx.report(
            logger,
            "FILE_INSTALL_FAILED",
            "install.file",
            f"Failed to install {label}: {e}",
            path=path,
            entry=label,
        )


def _install_archive(entry: FileEntry, path: Path, ctx: InstallContext, label: str) -> None:
    logger.info("Downloading and unzipping %s v%s", label, entry.version)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        ctx.report(
            logger,
            "DIRECTORY_CREATE_FAILED",
            "install.archive",
            f"Failed to create directory for {label}: {e}",
            path=path,
            entry=label,
        )
        return

    archive_path = path / temp_archive_name(entry.url)
    try:
        ctx.fetcher.fetch_to_file(entry.url, archive_path)
    except (AdapterError, OSError) as e:
        ctx.report(
            logger,
            "ARCHIVE_DOWNLOAD_FAILED",
            "install.archive",
            f"Failed to download {label}: {e}",
            path=archive_path,
            entry=label,
        )
        archive_path.unlink(missing_ok=True)
        return

    try:
        ctx.archive.expand(archive_path, path)
    except (AdapterError, OSError) as e:
        ctx.report(
            logger,
            "ARCHIVE_EXTRACT_FAILED",
            "install.archive",
            f"Failed to unzip {label}: {e}",
            path=archive_path,
            entry=label,
        )

    try:
        archive_path.unlink()
    except OSError as e:
        ctx.report(
            logger,
            "TEMP_ARCHIVE_REMOVE_FAILED",
            "install.archive",
            f"Failed to remove temp archive file: {e}",
            path=archive_path,
            entry=label,
            severity=Severity.WARN,
        )


def remove_entry(entry: FileEntry, path: Path, ctx: InstallContext, name: str = "") -> None:
    label = display_name(name, entry)
    if _skipped(entry, label, ctx):
        return
    if entry.is_container and entry.filename == NO_NEST:
        _remove_unnested(entry, path, ctx, label)
        return
    if entry.is_container:
        logger.info("Removing %s...", path)
    else:
        logger.info("Removing %s v%s...", label, entry.version)
    try:
        if entry.is_container:
            shutil.rmtree(path)
        else:
            path.unlink()
    except FileNotFoundError:
        ctx.report(
            logger,
            "REMOVE_TARGET_MISSING",
            "remove.entry",
            f"{label} is already gone ({path})",
            path=path,
            entry=label,
            severity=Severity.WARN,
        )
    except OSError as e:
        ctx.report(
            logger,
            "REMOVE_FAILED",
            "remove.entry",
            f"Failed to remove {label} ({path}): {e}",
            path=path,
            entry=label,
        )


def _remove_unnested(entry: FileEntry, path: Path, ctx: InstallContext, label: str) -> None:
    # The node shares its parent's directory, so deleting the path would take
    # unrelated files with it.
    if entry.type == FileType.DIRECTORY:
        for key in sorted(entry.children):
            child = entry.children[key]
            remove_entry(child, resolve_path(path, key, child), ctx, key)
        return
    ctx.report(
        logger,
        "REMOVE_SKIPPED_UNNESTED",
        "remove.entry",
        f"Not removing {label}: its contents were extracted straight into {path}",
        path=path,
        entry=label,
        severity=Severity.WARN,
    )


def update_entry(
    old: FileEntry,
    new: FileEntry,
    old_path: Path,
    new_path: Path,
    ctx: InstallContext,
    name: str = "",
) -> None:
    """Bring the installed ``old`` tree at ``old_path`` in line with ``new``.

    Only the old entry's side is checked here; entries that exist solely in
    the new tree go through install_entry, which checks their own side.
    """
    label = display_name(name, old)
    if _skipped(old, label, ctx):
        return
    if old.type != new.type:
        logger.info("%s changed from %s to %s", label, old.type.value, new.type.value)
        _replace(old, new, old_path, new_path, ctx, label)
    elif old.type == FileType.DIRECTORY:
        if old_path != new_path:
            logger.info("Moving %s from %s to %s", label, old_path, new_path)
            _replace(old, new, old_path, new_path, ctx, label)
        else:
            _update_directory(old, new, old_path, ctx, label)
    else:
        _update_versioned(old, new, old_path, new_path, ctx, label)


def _replace(
    old: FileEntry,
    new: FileEntry,
    old_path: Path,
    new_path: Path,
    ctx: InstallContext,
    label: str,
) -> None:
    remove_entry(old, old_path, ctx, label)
    install_entry(new, new_path, ctx, label)


def _update_directory(
    old: FileEntry, new: FileEntry, path: Path, ctx: InstallContext, label: str
) -> None:
    if not path.exists():
        logger.info("Creating directory %s", label)
        try:
            path.mkdir(parents=True)
        except OSError as e:
            ctx.report(
                logger,
                "DIRECTORY_CREATE_FAILED",
                "update.directory",
                f"Failed to create {label}: {e}",
                path=path,
                entry=label,
            )

    for key in sorted(old.children):
        old_child = old.children[key]
        old_child_path = resolve_path(path, key, old_child)
        new_child = new.children.get(key)
        if new_child is None:
            remove_entry(old_child, old_child_path, ctx, key)
        else:
            update_entry(
                old_child,
                new_child,
                old_child_path,
                resolve_path(path, key, new_child),
                ctx,
                key,
            )

    for key in sorted(new.children):
        if key in old.children:
            continue
        new_child = new.children[key]
        install_entry(new_child, resolve_path(path, key, new_child), ctx, key)


def _update_versioned(
    old: FileEntry,
    new: FileEntry,
    old_path: Path,
    new_path: Path,
    ctx: InstallContext,
    label: str,
) -> None:
    compare: int | None
    try:
        compare = parse_and_compare(new.version, old.version)
    except VersionParseError as e:
        ctx.report(
            logger,
            "VERSION_PARSE_FAILED",
            "update.version",
            f"Failed to parse version entry of {label}: {e}",
            path=old_path,
            entry=label,
            severity=Severity.WARN,
            is_execution=False,
        )
        compare = None

    if compare == 0:
        if old_path == new_path:
            logger.debug("%s v%s is up to date", label, old.version)
            return
        logger.info("Moving %s v%s to %s", label, new.version, new_path)
    elif compare == 1:
        logger.info("Updating %s from v%s to v%s", label, old.version, new.version)
    elif compare == -1:
        logger.info("Downgrading %s from v%s to v%s", label, old.version, new.version)
    else:
        logger.info("Reinstalling %s as v%s", label, new.version)

    _replace(old, new, old_path, new_path, ctx, label)
