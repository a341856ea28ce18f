from __future__ import annotations

import re

from gopacked.domain.diagnostics import Diagnostic, Severity, ValueLocation
from gopacked.domain.file_entry import NO_NEST, Side

SIMPLE_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9._-]*$")
RESERVED_SIMPLE_NAMES = {".", "..", "gopacked"}
INSTALL_SIDES = {Side.CLIENT.value, Side.SERVER.value}


def validate_simple_name(name: str) -> list[Diagnostic]:
    if not SIMPLE_NAME_PATTERN.match(name):
        return [
            Diagnostic(
                code="SIMPLE_NAME_INVALID",
                rule="naming.pack.simplename",
                severity=Severity.ERROR,
                message=f"Invalid pack simple name: {name!r}",
                location=ValueLocation("simplename", name),
                hint="Use lowercase letters, digits, '.', '_' and '-'.",
            )
        ]
    if name in RESERVED_SIMPLE_NAMES:
        return [
            Diagnostic(
                code="SIMPLE_NAME_RESERVED",
                rule="naming.pack.simplename",
                severity=Severity.ERROR,
                message=f"Pack simple name is reserved: {name}",
                location=ValueLocation("simplename", name),
            )
        ]
    return []


def validate_install_side(side: str) -> list[Diagnostic]:
    if side.lower() in INSTALL_SIDES:
        return []
    return [
        Diagnostic(
            code="SIDE_INVALID",
            rule="naming.side",
            severity=Severity.ERROR,
            message=f"Couldn't recognize side {side}",
            location=ValueLocation("side", side),
            hint="Use 'client' or 'server'.",
        )
    ]


def validate_path_segment(value: str, field: str, where: str) -> list[Diagnostic]:
    if not value or value == NO_NEST:
        return []
    parts = value.replace("\\", "/").split("/")
    if value.startswith(("/", "\\")) or ".." in parts:
        return [
            Diagnostic(
                code="ENTRY_PATH_UNSAFE",
                rule="naming.entry.path",
                severity=Severity.ERROR,
                message=f"{field} {value!r} at {where} escapes its parent directory",
                location=ValueLocation(field, where),
            )
        ]
    return []
