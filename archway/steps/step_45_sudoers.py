from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..lib.command import run_cmd
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)

WHEEL_RULE = "%wheel ALL=(ALL:ALL) NOPASSWD: ALL\n"


class SudoersStep:
    step_id = "45_sudoers"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        dropin = Path(ctx.config.mount_prefix) / "etc/sudoers.d/wheel"

        if ctx.dry_run:
            logger.info("Would write %s", str(dropin))
        else:
            dropin.parent.mkdir(parents=True, exist_ok=True)
            with dropin.open("a", encoding="utf-8") as f:
                f.write(WHEEL_RULE)
            dropin.chmod(0o440)

        r = run_cmd(["visudo", "-c", "-f", str(dropin)], check=False, dry_run=ctx.dry_run)
        nopasswd = r.returncode == 0
        if not nopasswd:
            # Non-fatal: the wheel group just keeps password prompts.
            logger.warning("Invalid sudoers file, wheel group will not have NOPASSWD tag")
            dropin.unlink(missing_ok=True)

        state.setdefault("execution", {}).setdefault("decisions", {})["wheel_nopasswd"] = nopasswd
        return state
