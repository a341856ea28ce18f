from typing import Protocol

from gopacked.domain.json_types import JsonDict
from gopacked.domain.result import Result


class PolicyEnginePort(Protocol):
    def validate_manifest(self, manifest: JsonDict) -> Result[JsonDict]: ...
