from __future__ import annotations

import json
from pathlib import Path

from gopacked.adapters.errors import FetchError
from gopacked.domain.diagnostics import Diagnostic, FileLocation, Severity, ValueLocation, has_errors
from gopacked.domain.file_entry import ManifestFormatError
from gopacked.domain.json_types import as_json_dict
from gopacked.domain.pack import DEFINITION_FILENAME, GoPack, pack_from_json, pack_to_json
from gopacked.domain.result import Result
from gopacked.ports.fetcher import FetcherPort
from gopacked.ports.policy_engine import PolicyEnginePort


def _parse_failed(message: str, source: str) -> Result[GoPack]:
    return Result(
        diagnostics=[
            Diagnostic(
                code="DEFINITION_PARSE_FAILED",
                rule="definition.parse",
                severity=Severity.ERROR,
                message=message,
                location=ValueLocation("source", source),
            )
        ]
    )


def parse_definition(
    text: str,
    source: str,
    policy_engine: PolicyEnginePort | None = None,
) -> Result[GoPack]:
    try:
        raw: object = json.loads(text)
    except json.JSONDecodeError as e:
        return _parse_failed(f"Failed to parse goPack definition from {source}: {e}", source)
    if not isinstance(raw, dict):
        return _parse_failed(f"goPack definition from {source} is not a JSON object", source)

    diagnostics: list[Diagnostic] = []
    if policy_engine is not None:
        validation = policy_engine.validate_manifest(as_json_dict(raw))
        diagnostics.extend(validation.diagnostics)
        if has_errors(validation.diagnostics):
            return Result(diagnostics=diagnostics)

    try:
        pack = pack_from_json(raw)
    except ManifestFormatError as e:
        result = _parse_failed(f"Invalid goPack definition from {source}: {e}", source)
        result.diagnostics[:0] = diagnostics
        return result
    return Result(value=pack, diagnostics=diagnostics)


def definition_path(install_path: Path) -> Path:
    return install_path / DEFINITION_FILENAME


def read_definition(
    install_path: Path,
    policy_engine: PolicyEnginePort | None = None,
) -> Result[GoPack]:
    path = definition_path(install_path)
    if not path.exists():
        return Result(
            diagnostics=[
                Diagnostic(
                    code="DEFINITION_MISSING",
                    rule="definition.exists",
                    severity=Severity.ERROR,
                    message=f"{DEFINITION_FILENAME} not found in {install_path}",
                    location=FileLocation(str(path)),
                    hint="Pass the modpack URL, or --path pointing at an existing install.",
                )
            ]
        )
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Result(
            diagnostics=[
                Diagnostic(
                    code="DEFINITION_READ_FAILED",
                    rule="definition.read",
                    severity=Severity.ERROR,
                    message=f"Failed to read {path}: {e}",
                    location=FileLocation(str(path)),
                    is_execution=True,
                )
            ]
        )
    return parse_definition(text, str(path), policy_engine)


def fetch_definition(
    url: str,
    fetcher: FetcherPort,
    policy_engine: PolicyEnginePort | None = None,
) -> Result[GoPack]:
    try:
        data = fetcher.fetch_bytes(url)
    except FetchError as e:
        return Result(
            diagnostics=[
                Diagnostic(
                    code="DEFINITION_FETCH_FAILED",
                    rule="definition.fetch",
                    severity=Severity.ERROR,
                    message=f"Failed to fetch goPack definition: {e}",
                    location=ValueLocation("url", url),
                    is_execution=True,
                )
            ]
        )
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        return _parse_failed(f"goPack definition from {url} is not UTF-8: {e}", url)
    return parse_definition(text, url, policy_engine)


def write_definition(path: Path, pack: GoPack) -> None:
    path.write_text(json.dumps(pack_to_json(pack), indent=2) + "\n", encoding="utf-8")
