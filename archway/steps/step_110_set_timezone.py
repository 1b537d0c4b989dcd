from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.command import privileged_argv, run_cmd
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class SetTimezoneStep:
    step_id = "110_set_timezone"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        tz = ctx.config.timezone
        run_cmd(privileged_argv(["timedatectl", "set-timezone", tz]), dry_run=ctx.dry_run)
        run_cmd(privileged_argv(["timedatectl", "set-ntp", "true"]), dry_run=ctx.dry_run)
        logger.info("Timezone set to %s (NTP on)", tz)
        return state
