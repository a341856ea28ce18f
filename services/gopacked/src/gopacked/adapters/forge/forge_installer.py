from __future__ import annotations

import logging
from pathlib import Path

from gopacked.adapters.errors import CommandFailed
from gopacked.domain.file_entry import Side
from gopacked.domain.json_types import as_json_dict
from gopacked.ports.command_runner import CommandRunnerPort
from gopacked.ports.fetcher import FetcherPort

logger = logging.getLogger(__name__)

FORGE_MAVEN = "https://maven.minecraftforge.net/net/minecraftforge/forge"
INSTALLER_FILENAME = "forge-installer.jar"


def installer_url(forge_version: str) -> str:
    return f"{FORGE_MAVEN}/{forge_version}/forge-{forge_version}-installer.jar"


def installer_command(jar_path: Path, side: Side) -> list[str]:
    args = ["java", "-jar", str(jar_path)]
    if side == Side.SERVER:
        args.append("--installServer")
    return args


class ForgeInstaller:
    def __init__(self, fetcher: FetcherPort, runner: CommandRunnerPort) -> None:
        self.fetcher = fetcher
        self.runner = runner

    def install(self, forge_version: str, install_path: Path, side: Side) -> None:
        jar_path = install_path / INSTALLER_FILENAME
        logger.info("Downloading Forge v%s installer", forge_version)
        self.fetcher.fetch_to_file(installer_url(forge_version), jar_path)
        try:
            logger.info("Starting Forge installer...")
            result = self.runner.run(installer_command(jar_path, side), cwd=install_path)
        finally:
            jar_path.unlink(missing_ok=True)
        if result.exit_code != 0:
            raise CommandFailed(
                f"Forge installer exited with status {result.exit_code}",
                details=as_json_dict({"stderr": result.stderr[-2000:]}),
            )
        logger.info("Forge installer finished")
