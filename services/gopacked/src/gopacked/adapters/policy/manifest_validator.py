from __future__ import annotations

import json
from pathlib import Path

import jsonschema

from gopacked.domain.diagnostics import Diagnostic, Severity, ValueLocation
from gopacked.domain.json_types import JsonDict, as_json_dict
from gopacked.domain.naming import validate_path_segment, validate_simple_name
from gopacked.domain.result import Result
from gopacked.domain.version import Version, VersionParseError

Manifest = JsonDict

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "schemas" / "gopack.schema.v1.json"


def load_schema(path: Path = SCHEMA_PATH) -> JsonDict:
    return as_json_dict(json.loads(path.read_text(encoding="utf-8")))


def validate_manifest_schema(manifest: Manifest, schema: JsonDict | None = None) -> list[Diagnostic]:
    validator = jsonschema.Draft202012Validator(schema or load_schema())
    diagnostics: list[Diagnostic] = []
    for error in sorted(validator.iter_errors(manifest), key=lambda e: list(e.absolute_path)):
        where = "/".join(str(part) for part in error.absolute_path) or "<root>"
        diagnostics.append(
            Diagnostic(
                code="DEFINITION_SCHEMA_INVALID",
                rule="definition.schema",
                severity=Severity.ERROR,
                message=f"{where}: {error.message}",
                location=ValueLocation("definition", where),
            )
        )
    return diagnostics


def validate_simple_name_field(manifest: Manifest) -> list[Diagnostic]:
    simple_name = str(manifest.get("simplename") or "").strip()
    if not simple_name:
        return []
    return validate_simple_name(simple_name)


def _walk_entry_paths(entry: object, where: str) -> list[Diagnostic]:
    if not isinstance(entry, dict):
        return []
    data = as_json_dict(entry)
    diagnostics = validate_path_segment(str(data.get("filename") or ""), "filename", where)
    children = data.get("children")
    if isinstance(children, dict):
        for key, child in children.items():
            child_where = f"{where}/{key}"
            diagnostics.extend(validate_path_segment(key, "key", child_where))
            diagnostics.extend(_walk_entry_paths(child, child_where))
    return diagnostics


def validate_entry_paths(manifest: Manifest) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for tree in ("mcl-version", "files"):
        diagnostics.extend(_walk_entry_paths(manifest.get(tree), tree))
    return diagnostics


def _tool_bounds_ordered(manifest: Manifest) -> list[Diagnostic]:
    minimum = manifest.get("gopacked-version-minimum")
    maximum = manifest.get("gopacked-version-maximum")
    if not minimum or not maximum:
        return []
    try:
        low = Version.parse(str(minimum))
        high = Version.parse(str(maximum))
    except VersionParseError:
        return []
    if low > high:
        return [
            Diagnostic(
                code="TOOL_VERSION_BOUNDS_INVERTED",
                rule="definition.tool_version",
                severity=Severity.WARN,
                message=f"gopacked-version-minimum {low} is greater than maximum {high}",
            )
        ]
    return []


class ManifestPolicyEngine:
    def __init__(self, schema_path: Path = SCHEMA_PATH) -> None:
        self.schema = load_schema(schema_path)

    def validate_manifest(self, manifest: Manifest) -> Result[Manifest]:
        diagnostics: list[Diagnostic] = []
        diagnostics.extend(validate_manifest_schema(manifest, self.schema))
        diagnostics.extend(validate_simple_name_field(manifest))
        diagnostics.extend(validate_entry_paths(manifest))
        diagnostics.extend(_tool_bounds_ordered(manifest))
        return Result(value=manifest, diagnostics=diagnostics)
