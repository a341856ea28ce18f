from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import sys
from typing import Mapping

from gopacked.domain.diagnostics import Diagnostic, FileLocation, Severity
from gopacked.domain.file_entry import Side
from gopacked.ports.archive import ArchivePort
from gopacked.ports.fetcher import FetcherPort
from gopacked.ports.launcher_profiles import LauncherProfilesPort
from gopacked.ports.loader_installer import LoaderInstallerPort
from gopacked.ports.prompt import ConfirmPort

MINECRAFT_DIR_ENV = "GOPACKED_MINECRAFT_DIR"
PACKS_DIRNAME = "gopacked"

_LOG_LEVELS = {
    Severity.ERROR: logging.ERROR,
    Severity.WARN: logging.WARNING,
    Severity.INFO: logging.INFO,
}


def _new_diagnostics() -> list[Diagnostic]:
    return []


@dataclass
class InstallContext:
    """Everything a single install, update or uninstall run needs.

    Replaces process-wide flags: the requested side and the collaborator
    ports travel with the call, and per-node problems are collected in
    ``diagnostics`` instead of aborting the run.
    """

    side: Side
    fetcher: FetcherPort
    archive: ArchivePort
    profiles: LauncherProfilesPort | None = None
    prompt: ConfirmPort | None = None
    loader_installer: LoaderInstallerPort | None = None
    diagnostics: list[Diagnostic] = field(default_factory=_new_diagnostics)

    def report(
        self,
        logger: logging.Logger,
        code: str,
        rule: str,
        message: str,
        *,
        path: Path | None = None,
        entry: str | None = None,
        severity: Severity = Severity.ERROR,
        is_execution: bool = True,
    ) -> Diagnostic:
        logger.log(_LOG_LEVELS[severity], message)
        diagnostic = Diagnostic(
            code=code,
            rule=rule,
            severity=severity,
            message=message,
            location=FileLocation(str(path), entry) if path is not None else None,
            is_execution=is_execution,
        )
        self.diagnostics.append(diagnostic)
        return diagnostic

    def confirm(self, prompt: str) -> bool:
        if self.prompt is None:
            return False
        return self.prompt.confirm(prompt)


@dataclass(frozen=True)
class PackPaths:
    install_path: Path
    minecraft_path: Path

    def absolute(self) -> PackPaths:
        return PackPaths(self.install_path.absolute(), self.minecraft_path.absolute())

    def versions_dir(self, simple_name: str) -> Path:
        return self.minecraft_path / "versions" / simple_name


def default_minecraft_dir(
    side: Side,
    *,
    platform: str | None = None,
    env: Mapping[str, str] | None = None,
) -> Path:
    environ = os.environ if env is None else env
    override = environ.get(MINECRAFT_DIR_ENV)
    if override:
        return Path(override)
    plat = platform or sys.platform
    home = Path(environ.get("HOME") or Path.home())
    if side == Side.SERVER and not plat.startswith("win"):
        return home
    if plat.startswith("win"):
        return Path(environ.get("APPDATA", str(home))) / ".minecraft"
    if plat == "darwin":
        return home / "Library" / "Application Support" / "minecraft"
    return home / ".minecraft"


def default_install_path(minecraft_path: Path, simple_name: str) -> Path:
    return minecraft_path / PACKS_DIRNAME / simple_name
