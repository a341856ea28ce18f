from pathlib import Path
import shutil
import subprocess

from gopacked.adapters.errors import CommandNotFound
from gopacked.ports.command_runner import CommandResult


class SubprocessRunner:
    def run(self, args: list[str], cwd: Path | None = None) -> CommandResult:
        executable = shutil.which(args[0])
        if executable is None:
            raise CommandNotFound(f"{args[0]} not found on PATH", hint="Install Java to run the Forge installer.")
        completed = subprocess.run(
            [executable, *args[1:]],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        return CommandResult(
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
