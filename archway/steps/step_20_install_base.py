from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.pkg import pacman_install, pacstrap
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class InstallBaseStep:
    step_id = "20_install_base"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config
        pacstrap(cfg.mount_prefix, ["base"], dry_run=ctx.dry_run)
        pacman_install(cfg.mount_prefix, cfg.initial_packages, dry_run=ctx.dry_run)

        state.setdefault("execution", {}).setdefault("decisions", {})["initial_packages"] = list(cfg.initial_packages)
        logger.info("Base system installed at %s", cfg.mount_prefix)
        return state
