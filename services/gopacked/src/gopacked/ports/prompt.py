from typing import Protocol


class ConfirmPort(Protocol):
    def confirm(self, prompt: str) -> bool: ...
