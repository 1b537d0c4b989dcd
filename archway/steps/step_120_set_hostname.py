from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.command import privileged_argv, run_cmd
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


def hosts_entries(hostname: str) -> str:
    return f"127.0.0.1 localhost\n127.0.1.1 {hostname}\n"


class SetHostnameStep:
    step_id = "120_set_hostname"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        hostname = ctx.config.hostname
        run_cmd(privileged_argv(["hostnamectl", "set-hostname", hostname]), dry_run=ctx.dry_run)
        run_cmd(
            privileged_argv(["tee", "-a", "/etc/hosts"]),
            input_text=hosts_entries(hostname),
            dry_run=ctx.dry_run,
        )
        logger.info("Hostname set to %s", hostname)
        return state
