from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .chroot import chroot_cmd

logger = logging.getLogger(__name__)

GRUB_DEFAULTS_APPEND = "GRUB_DEFAULT=saved\nGRUB_SAVEDEFAULT=true\n"


def mount_efi_volume(*, target_root: str, boot_part: str, efi_mount: str, dry_run: bool = False) -> None:
    chroot_cmd(target_root, ["mount", "--mkdir", boot_part, efi_mount], dry_run=dry_run)


def install_grub_efi(
    *,
    target_root: str,
    efi_mount: str,
    bootloader_id: str,
    dry_run: bool = False,
) -> None:
    """Install GRUB for x86_64 EFI targets and generate grub.cfg."""

    # Assumes efi_mount is mounted in target.
    chroot_cmd(
        target_root,
        [
            "grub-install",
            "--target=x86_64-efi",
            f"--efi-directory={efi_mount}",
            f"--bootloader-id={bootloader_id}",
            "--recheck",
        ],
        dry_run=dry_run,
    )

    root = Path(target_root)
    locale_src = root / "usr/share/locale/en@quot/LC_MESSAGES/grub.mo"
    locale_dst = root / "boot/grub/locale/en.mo"
    defaults = root / "etc/default/grub"

    if dry_run:
        logger.info("Would copy %s and update %s", str(locale_src), str(defaults))
    else:
        locale_dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(locale_src, locale_dst)
        shutil.copy2(defaults, defaults.with_name("grub.bak"))
        with defaults.open("a", encoding="utf-8") as f:
            f.write(GRUB_DEFAULTS_APPEND)

    chroot_cmd(target_root, ["grub-mkconfig", "-o", "/boot/grub/grub.cfg"], dry_run=dry_run)
    logger.info("GRUB EFI installed (bootloader_id=%s)", bootloader_id)
