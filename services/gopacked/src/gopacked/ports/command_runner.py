from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass
class CommandResult:
    exit_code: int
    stdout: str
    stderr: str


class CommandRunnerPort(Protocol):
    def run(self, args: list[str], cwd: Path | None = None) -> CommandResult: ...
