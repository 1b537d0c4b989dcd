from __future__ import annotations

import logging
from typing import Sequence

from .chroot import chroot_cmd
from .command import privileged_argv, run_cmd

logger = logging.getLogger(__name__)


def pacstrap(target_root: str, packages: Sequence[str] = ("base",), *, dry_run: bool = False) -> None:
    run_cmd(["pacstrap", target_root, *packages], dry_run=dry_run)


def pacman_install(target_root: str, packages: Sequence[str], *, dry_run: bool = False) -> None:
    """Install packages inside the target root."""
    if not packages:
        return
    chroot_cmd(target_root, ["pacman", "-S", "--noconfirm", *packages], dry_run=dry_run)


def pacman_install_live(packages: Sequence[str], *, dry_run: bool = False) -> None:
    """Install packages on the running (installed) system."""
    if not packages:
        return
    run_cmd(privileged_argv(["pacman", "-S", "--noconfirm", *packages]), dry_run=dry_run)


def enable_services(services: Sequence[str], *, target_root: str | None = None, dry_run: bool = False) -> None:
    if not services:
        return
    argv = ["systemctl", "enable", *services]
    if target_root:
        chroot_cmd(target_root, argv, dry_run=dry_run)
    else:
        run_cmd(privileged_argv(argv), dry_run=dry_run)
    logger.info("Enabled services: %s", ", ".join(services))
