from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..lib.chroot import chroot_cmd
from ..lib.hooks import add_hook
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class BootHooksStep:
    step_id = "35_boot_hooks"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config
        conf = Path(cfg.mount_prefix) / "etc/mkinitcpio.conf"

        hooks = add_hook(conf, anchor=cfg.hook_anchor, token=cfg.hook_token, dry_run=ctx.dry_run)

        argv = ["mkinitcpio"]
        for preset in cfg.kernel_presets:
            argv += ["-p", preset]
        chroot_cmd(cfg.mount_prefix, argv, dry_run=ctx.dry_run)

        state.setdefault("execution", {}).setdefault("decisions", {})["hooks"] = hooks
        logger.info("Initramfs regenerated for presets: %s", ", ".join(cfg.kernel_presets))
        return state
