from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import NoReturn, TypeVar

import typer

from gopacked.adapters.archive.extractor import ArchiveExtractor
from gopacked.adapters.forge.forge_installer import ForgeInstaller
from gopacked.adapters.http.requests_fetcher import RequestsFetcher
from gopacked.adapters.launcher.profiles_file import LauncherProfilesFile
from gopacked.adapters.policy.manifest_validator import ManifestPolicyEngine
from gopacked.adapters.process.subprocess_runner import SubprocessRunner
from gopacked.adapters.prompt.typer_prompt import TyperConfirm
from gopacked.application.definition_store import (
    fetch_definition,
    parse_definition,
    read_definition,
)
from gopacked.application.pack_lifecycle import install_pack, uninstall_pack, update_pack
from gopacked.application.result_serialization import pack_artifact, serialize_result
from gopacked.application.settings import (
    InstallContext,
    PackPaths,
    default_install_path,
    default_minecraft_dir,
)
from gopacked.domain.diagnostics import Diagnostic, Severity, ValueLocation
from gopacked.domain.file_entry import Side
from gopacked.domain.naming import validate_install_side
from gopacked.domain.pack import GoPack
from gopacked.domain.result import Result
from gopacked.domain.version import TOOL_VERSION
from gopacked.entrypoints.console_logging import configure_logging
from gopacked.ports.fetcher import FetcherPort
from gopacked.ports.policy_engine import PolicyEnginePort

logger = logging.getLogger(__name__)

T = TypeVar("T")

app = typer.Typer(add_completion=False, no_args_is_help=True)

PATH_OPTION = typer.Option(None, "--path", "-p", help="The path to save the modpack in.")
MINECRAFT_OPTION = typer.Option(None, "--minecraft", "-m", help="The minecraft directory.")
SIDE_OPTION = typer.Option("client", "--side", "-s", help="The side (client or server) to install.")
YES_OPTION = typer.Option(False, "--yes", "-y", help="Answer yes to every confirmation.")
JSON_OPTION = typer.Option(False, "--json", help="Print a machine-readable result.")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Show debug output.")

_LOG_LEVELS = {
    Severity.ERROR: logging.CRITICAL,
    Severity.WARN: logging.WARNING,
    Severity.INFO: logging.INFO,
}


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"goPacked v{TOOL_VERSION}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    """goPacked - Simple command-line Minecraft modpack manager."""


def _log_diagnostics(diagnostics: list[Diagnostic], fatal: bool = True) -> None:
    for diag in diagnostics:
        level = _LOG_LEVELS[diag.severity]
        if level == logging.CRITICAL and not fatal:
            level = logging.ERROR
        logger.log(level, diag.message)
        if diag.hint:
            logger.info(diag.hint)


def _finish(result: Result[T], command: str, args: list[str], json_output: bool) -> NoReturn:
    if json_output:
        typer.echo(json.dumps(serialize_result(result, command=command, args=args)))
    raise typer.Exit(result.exit_code)


def _parse_side(side: str, command: str, json_output: bool) -> Side:
    diagnostics = validate_install_side(side)
    if diagnostics:
        _log_diagnostics(diagnostics)
        _finish(Result(diagnostics=diagnostics), command, [], json_output)
    return Side(side.lower())


def _context(side: Side, fetcher: FetcherPort, yes: bool) -> InstallContext:
    return InstallContext(
        side=side,
        fetcher=fetcher,
        archive=ArchiveExtractor(),
        profiles=LauncherProfilesFile(),
        prompt=TyperConfirm(assume_yes=yes),
        loader_installer=ForgeInstaller(fetcher, SubprocessRunner()),
    )


def _fetch(url: str, fetcher: FetcherPort, policy: PolicyEnginePort) -> Result[GoPack]:
    logger.info("Fetching goPack definition from %s", url)
    fetched = fetch_definition(url, fetcher, policy)
    if fetched.value is None:
        _log_diagnostics(fetched.diagnostics)
    return fetched


def _read(install_path: Path, policy: PolicyEnginePort) -> Result[GoPack]:
    logger.info("Reading goPack definition from %s", install_path)
    loaded = read_definition(install_path, policy)
    if loaded.value is None:
        _log_diagnostics(loaded.diagnostics)
    return loaded


def _target_missing() -> Result[GoPack]:
    diag = Diagnostic(
        code="TARGET_MISSING",
        rule="cli.target",
        severity=Severity.ERROR,
        message="goPack URL or install location not specified!",
        hint="Pass a modpack URL, an installed modpack name, or --path.",
    )
    _log_diagnostics([diag])
    return Result(diagnostics=[diag])


def _locate_installed(
    target: str | None,
    path: Path | None,
    minecraft: Path,
    fetcher: FetcherPort,
    policy: PolicyEnginePort,
) -> tuple[Result[GoPack], GoPack | None, Path | None]:
    """Find the installed definition named by a URL, a bare name, or --path.

    Returns the read result for the installed pack, the freshly fetched pack
    when the target was a URL, and the resolved install path.
    """
    fetched: GoPack | None = None
    if target and target.startswith("http"):
        result = _fetch(target, fetcher, policy)
        if result.value is None:
            return result, None, None
        fetched = result.value
        install_path = path or default_install_path(minecraft, fetched.simple_name)
    elif target:
        install_path = default_install_path(minecraft, target)
    elif path is not None:
        install_path = path
    else:
        return _target_missing(), None, None
    return _read(install_path, policy), fetched, install_path


@app.command()
def install(
    url: str = typer.Argument(..., help="URL of the goPack definition."),
    path: Path | None = PATH_OPTION,
    minecraft: Path | None = MINECRAFT_OPTION,
    side: str = SIDE_OPTION,
    yes: bool = YES_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Install the modpack from the given URL."""
    configure_logging(verbose)
    install_side = _parse_side(side, "install", json_output)
    fetcher = RequestsFetcher()
    fetched = _fetch(url, fetcher, ManifestPolicyEngine())
    if fetched.value is None:
        _finish(fetched, "install", [url], json_output)
    pack = fetched.value

    minecraft_path = minecraft or default_minecraft_dir(install_side)
    install_path = path or default_install_path(minecraft_path, pack.simple_name)
    result = install_pack(pack, PackPaths(install_path, minecraft_path), _context(install_side, fetcher, yes))
    result.diagnostics[:0] = fetched.diagnostics
    result.artifacts.append(pack_artifact(pack, str(install_path.absolute())))
    _finish(result, "install", [url], json_output)


@app.command()
def update(
    target: str | None = typer.Argument(None, help="Modpack URL or installed modpack name."),
    path: Path | None = PATH_OPTION,
    minecraft: Path | None = MINECRAFT_OPTION,
    side: str = SIDE_OPTION,
    yes: bool = YES_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Update the modpack by URL, name or install path."""
    configure_logging(verbose)
    install_side = _parse_side(side, "update", json_output)
    args = [target] if target else []
    fetcher = RequestsFetcher()
    policy = ManifestPolicyEngine()
    minecraft_path = minecraft or default_minecraft_dir(install_side)

    installed, new, install_path = _locate_installed(target, path, minecraft_path, fetcher, policy)
    if installed.value is None or install_path is None:
        _finish(installed, "update", args, json_output)
    old = installed.value

    diagnostics = list(installed.diagnostics)
    if new is None:
        if not old.update_url:
            diag = Diagnostic(
                code="UPDATE_URL_MISSING",
                rule="definition.update-url",
                severity=Severity.ERROR,
                message=f"{old.name} has no update-url; pass the modpack URL instead",
                location=ValueLocation("simplename", old.simple_name),
            )
            _log_diagnostics([diag])
            _finish(Result(diagnostics=[*diagnostics, diag]), "update", args, json_output)
        fetched = _fetch(old.update_url, fetcher, policy)
        diagnostics.extend(fetched.diagnostics)
        if fetched.value is None:
            _finish(Result(diagnostics=diagnostics), "update", args, json_output)
        new = fetched.value

    result = update_pack(old, new, PackPaths(install_path, minecraft_path), _context(install_side, fetcher, yes))
    result.diagnostics[:0] = diagnostics
    result.artifacts.append(pack_artifact(new, str(install_path.absolute())))
    _finish(result, "update", args, json_output)


@app.command()
def uninstall(
    target: str | None = typer.Argument(None, help="Modpack URL or installed modpack name."),
    path: Path | None = PATH_OPTION,
    minecraft: Path | None = MINECRAFT_OPTION,
    side: str = SIDE_OPTION,
    yes: bool = YES_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Uninstall the modpack by URL, name or install path."""
    configure_logging(verbose)
    install_side = _parse_side(side, "uninstall", json_output)
    args = [target] if target else []
    fetcher = RequestsFetcher()
    minecraft_path = minecraft or default_minecraft_dir(install_side)

    installed, _, install_path = _locate_installed(
        target, path, minecraft_path, fetcher, ManifestPolicyEngine()
    )
    if installed.value is None or install_path is None:
        _finish(installed, "uninstall", args, json_output)
    pack = installed.value

    result = uninstall_pack(pack, PackPaths(install_path, minecraft_path), _context(install_side, fetcher, yes))
    result.diagnostics[:0] = installed.diagnostics
    result.artifacts.append(pack_artifact(pack, str(install_path.absolute())))
    _finish(result, "uninstall", args, json_output)


@app.command()
def validate(
    source: str = typer.Argument(..., help="URL, definition file or install directory to check."),
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Check a goPack definition without installing anything."""
    configure_logging(verbose)
    policy = ManifestPolicyEngine()
    if source.startswith("http"):
        loaded = fetch_definition(source, RequestsFetcher(), policy)
    elif Path(source).is_dir():
        loaded = read_definition(Path(source), policy)
    else:
        try:
            text = Path(source).read_text(encoding="utf-8")
        except OSError as e:
            loaded = Result(
                diagnostics=[
                    Diagnostic(
                        code="DEFINITION_READ_FAILED",
                        rule="definition.read",
                        severity=Severity.ERROR,
                        message=f"Failed to read {source}: {e}",
                        location=ValueLocation("source", source),
                        is_execution=True,
                    )
                ]
            )
        else:
            loaded = parse_definition(text, source, policy)

    _log_diagnostics(loaded.diagnostics, fatal=False)
    result: Result[GoPack] = Result(diagnostics=list(loaded.diagnostics))
    if loaded.value is not None:
        pack = loaded.value
        logger.info("%s v%s by %s is a valid goPack definition", pack.name, pack.version, pack.author)
        result.artifacts.append(pack_artifact(pack))
    _finish(result, "validate", [source], json_output)
