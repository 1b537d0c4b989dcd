from __future__ import annotations

import logging
from typing import Sequence

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)


def chroot_cmd(
    target_root: str,
    argv: Sequence[str],
    *,
    input_text: str | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command inside target root.

    arch-chroot sets up the /dev, /proc, /sys and resolv.conf binds itself
    and tears them down when the command exits.
    """

    return run_cmd(["arch-chroot", target_root, *argv], input_text=input_text, dry_run=dry_run)
