from __future__ import annotations

import logging

from gopacked.application.settings import InstallContext
from gopacked.domain.diagnostics import Severity
from gopacked.domain.pack import GoPack
from gopacked.domain.version import TOOL_VERSION, Version

logger = logging.getLogger(__name__)


def unsupported_reasons(pack: GoPack, tool_version: Version = TOOL_VERSION) -> list[str]:
    reasons: list[str] = []
    if pack.gopacked_max is not None and tool_version > pack.gopacked_max:
        reasons.append(
            f"goPacked v{tool_version} is newer than the maximum v{pack.gopacked_max} supported by {pack.name}"
        )
    if pack.gopacked_min is not None and tool_version < pack.gopacked_min:
        reasons.append(
            f"goPacked v{tool_version} is older than the minimum v{pack.gopacked_min} required by {pack.name}"
        )
    return reasons


def check_tool_version(
    pack: GoPack,
    ctx: InstallContext,
    tool_version: Version = TOOL_VERSION,
) -> bool:
    """Return whether the run may go ahead, asking the user when out of bounds."""
    reasons = unsupported_reasons(pack, tool_version)
    if not reasons:
        return True
    for reason in reasons:
        ctx.report(
            logger,
            "TOOL_VERSION_UNSUPPORTED",
            "definition.tool_version",
            reason,
            severity=Severity.WARN,
            is_execution=False,
        )
    return ctx.confirm("Would you like to continue anyway?")
