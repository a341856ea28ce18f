from __future__ import annotations

import logging
import shutil

from gopacked.adapters.errors import AdapterError
from gopacked.application.definition_store import definition_path, write_definition
from gopacked.application.reconcile import install_entry, remove_entry, update_entry
from gopacked.application.settings import InstallContext, PackPaths
from gopacked.application.version_gate import check_tool_version
from gopacked.domain.diagnostics import Severity
from gopacked.domain.file_entry import Side
from gopacked.domain.pack import GoPack
from gopacked.domain.result import Result
from gopacked.ports.launcher_profiles import ProfileRequest

logger = logging.getLogger(__name__)


def _finish(ctx: InstallContext) -> Result[None]:
    return Result(diagnostics=list(ctx.diagnostics))


def _cancelled(ctx: InstallContext, message: str) -> Result[None]:
    ctx.report(
        logger,
        "RUN_CANCELLED",
        "run.confirm",
        message,
        severity=Severity.INFO,
        is_execution=False,
    )
    return _finish(ctx)


def _prepare_install_root(paths: PackPaths, ctx: InstallContext) -> bool:
    root = paths.install_path
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        ctx.report(
            logger,
            "INSTALL_PATH_FAILED",
            "install.path",
            f"Failed to create install path {root}: {e}",
            path=root,
        )
        return False
    return True


def _register_profile(pack: GoPack, paths: PackPaths, ctx: InstallContext) -> None:
    if ctx.profiles is None:
        return
    request = ProfileRequest(
        name=pack.name,
        game_dir=paths.install_path,
        version_id=pack.simple_name,
        settings=dict(pack.profile_settings),
    )
    try:
        ctx.profiles.register(paths.minecraft_path, request)
    except AdapterError as e:
        ctx.report(
            logger,
            "PROFILE_INSTALL_FAILED",
            "profile.install",
            f"Profile install failed: {e}",
            path=paths.minecraft_path,
        )


def _unregister_profile(pack: GoPack, paths: PackPaths, ctx: InstallContext) -> None:
    if ctx.profiles is None:
        return
    try:
        ctx.profiles.unregister(paths.minecraft_path, pack.name)
    except AdapterError as e:
        ctx.report(
            logger,
            "PROFILE_UNINSTALL_FAILED",
            "profile.uninstall",
            f"Profile uninstall failed: {e}",
            path=paths.minecraft_path,
        )


def _install_forge(pack: GoPack, paths: PackPaths, ctx: InstallContext) -> None:
    if not pack.forge_version or ctx.loader_installer is None:
        return
    if not ctx.confirm(f"Would you like to install Forge v{pack.forge_version}?"):
        logger.info("Skipping Forge v%s install", pack.forge_version)
        return
    try:
        ctx.loader_installer.install(pack.forge_version, paths.install_path, ctx.side)
    except (AdapterError, OSError) as e:
        ctx.report(
            logger,
            "FORGE_INSTALL_FAILED",
            "forge.install",
            f"Forge v{pack.forge_version} install failed: {e}",
            path=paths.install_path,
        )


def _save(pack: GoPack, paths: PackPaths, ctx: InstallContext) -> None:
    path = definition_path(paths.install_path)
    logger.info("Saving goPack definition to %s", path)
    try:
        write_definition(path, pack)
    except OSError as e:
        ctx.report(
            logger,
            "DEFINITION_SAVE_FAILED",
            "definition.save",
            f"goPack definition save failed: {e}",
            path=path,
        )


def install_pack(pack: GoPack, paths: PackPaths, ctx: InstallContext) -> Result[None]:
    if not check_tool_version(pack, ctx):
        return _cancelled(ctx, "Install cancelled")

    paths = paths.absolute()
    if not _prepare_install_root(paths, ctx):
        return _finish(ctx)

    logger.info(
        "Installing %s v%s by %s to %s (%s-side)",
        pack.name,
        pack.version,
        pack.author,
        paths.install_path,
        ctx.side.value,
    )
    if ctx.side == Side.CLIENT:
        _register_profile(pack, paths, ctx)
        install_entry(pack.mcl_version, paths.versions_dir(pack.simple_name), ctx)
    install_entry(pack.files, paths.install_path, ctx)
    _install_forge(pack, paths, ctx)
    _save(pack, paths, ctx)
    return _finish(ctx)


def update_pack(old: GoPack, new: GoPack, paths: PackPaths, ctx: InstallContext) -> Result[None]:
    if not check_tool_version(new, ctx):
        return _cancelled(ctx, "Update cancelled")

    paths = paths.absolute()
    if not _prepare_install_root(paths, ctx):
        return _finish(ctx)

    logger.info(
        "Updating %s by %s from v%s to v%s (%s-side)",
        old.name,
        new.author,
        old.version,
        new.version,
        ctx.side.value,
    )
    if ctx.side == Side.CLIENT:
        if old.name != new.name:
            _unregister_profile(old, paths, ctx)
        _register_profile(new, paths, ctx)
        update_entry(
            old.mcl_version,
            new.mcl_version,
            paths.versions_dir(old.simple_name),
            paths.versions_dir(new.simple_name),
            ctx,
        )
    update_entry(old.files, new.files, paths.install_path, paths.install_path, ctx)
    if new.forge_version != old.forge_version:
        _install_forge(new, paths, ctx)
    _save(new, paths, ctx)
    return _finish(ctx)


def uninstall_pack(pack: GoPack, paths: PackPaths, ctx: InstallContext) -> Result[None]:
    if not ctx.confirm(f"Are you sure you wish to uninstall {pack.name} v{pack.version}?"):
        return _cancelled(ctx, "Uninstall cancelled")

    paths = paths.absolute()
    logger.info(
        "Uninstalling %s v%s by %s from %s (%s-side)",
        pack.name,
        pack.version,
        pack.author,
        paths.install_path,
        ctx.side.value,
    )
    if ctx.side == Side.CLIENT:
        _unregister_profile(pack, paths, ctx)
        remove_entry(pack.mcl_version, paths.versions_dir(pack.simple_name), ctx)
    remove_entry(pack.files, paths.install_path, ctx)
    if paths.install_path.exists():
        try:
            shutil.rmtree(paths.install_path)
        except OSError as e:
            ctx.report(
                logger,
                "UNINSTALL_PATH_FAILED",
                "uninstall.path",
                f"Failed to remove {paths.install_path}: {e}",
                path=paths.install_path,
            )
    return _finish(ctx)
