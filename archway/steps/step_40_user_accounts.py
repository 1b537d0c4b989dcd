from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..errors import ConfigError
from ..lib.chroot import chroot_cmd
from ..lib.command import run_cmd
from ..lib.shadow import verify_credential
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class UserAccountsStep:
    step_id = "40_user_accounts"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config
        usernames = ["root", cfg.username]

        missing = [u for u in usernames if not ctx.credentials.get(u)]
        if missing:
            raise ConfigError(f"No password provided for: {', '.join(missing)}")

        chroot_cmd(cfg.mount_prefix, ["useradd", "-mG", "wheel", cfg.username], dry_run=ctx.dry_run)

        # Passwords go through stdin only; run_cmd never logs input.
        lines = "".join(f"{u}:{ctx.credentials[u]}\n" for u in usernames)
        run_cmd(
            ["chpasswd", "-R", cfg.mount_prefix, "-c", cfg.crypt_method],
            input_text=lines,
            dry_run=ctx.dry_run,
        )

        shadow = Path(cfg.mount_prefix) / "etc/shadow"
        for u in usernames:
            if ctx.dry_run:
                logger.info("Would verify password for %s against %s", u, str(shadow))
                continue
            verify_credential(u, ctx.credentials[u], shadow)

        state.setdefault("execution", {}).setdefault("decisions", {})["user"] = {
            "username": cfg.username,
            "groups": ["wheel"],
            "crypt_method": cfg.crypt_method,
        }
        logger.info("Created user %s and set verified passwords", cfg.username)
        return state
