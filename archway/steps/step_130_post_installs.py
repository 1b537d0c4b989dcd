from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.pkg import enable_services, pacman_install_live
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class PostInstallsStep:
    step_id = "130_post_installs"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config
        pacman_install_live(cfg.post_packages, dry_run=ctx.dry_run)
        enable_services(cfg.post_services, dry_run=ctx.dry_run)
        logger.info("Desktop packages installed: %s", " ".join(cfg.post_packages))
        return state
