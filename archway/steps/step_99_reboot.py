from __future__ import annotations

import logging
from typing import Any, Dict, Sequence

from ..lib.command import privileged_argv, run_cmd
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class RebootStep:
    """Last step of either phase."""

    def __init__(self, step_id: str, argv: Sequence[str]) -> None:
        self.step_id = step_id
        self.argv = list(argv)

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        logger.info("Finalize summary: %s", (state.get("execution") or {}).get("decisions") or {})

        if not ctx.reboot:
            logger.info("Reboot disabled; reboot manually to continue")
            return state

        run_cmd(["sync"], dry_run=ctx.dry_run)
        run_cmd(privileged_argv(self.argv), dry_run=ctx.dry_run)
        return state
