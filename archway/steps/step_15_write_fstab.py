from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.storage import create_swapfile, generate_fstab
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class WriteFstabStep:
    step_id = "15_write_fstab"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config
        generate_fstab(cfg.mount_prefix, dry_run=ctx.dry_run)
        create_swapfile(cfg.mount_prefix, cfg.swap_size_mib, dry_run=ctx.dry_run)
        logger.info("Wrote fstab with swapfile")
        return state
