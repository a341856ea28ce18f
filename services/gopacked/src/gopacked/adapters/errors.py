from dataclasses import dataclass

from gopacked.domain.json_types import JsonDict


@dataclass
class AdapterError(Exception):
    message: str
    details: JsonDict | None = None
    hint: str | None = None
    cause: Exception | None = None

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class FetchError(AdapterError):
    pass


class ArchiveError(AdapterError):
    pass


class ProfileReadError(AdapterError):
    pass


class ProfileWriteError(AdapterError):
    pass


class CommandNotFound(AdapterError):
    pass


class CommandFailed(AdapterError):
    pass
