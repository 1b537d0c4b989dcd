from __future__ import annotations

from typing import Any, Dict

from ..lib.bootloader import install_grub_efi, mount_efi_volume
from ..pipeline import InstallCtx


class InstallBootloaderStep:
    step_id = "50_install_bootloader"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config
        mount_efi_volume(
            target_root=cfg.mount_prefix,
            boot_part=cfg.boot_partition,
            efi_mount=cfg.efi_mount,
            dry_run=ctx.dry_run,
        )
        install_grub_efi(
            target_root=cfg.mount_prefix,
            efi_mount=cfg.efi_mount,
            bootloader_id=cfg.grub_bootloader_id,
            dry_run=ctx.dry_run,
        )
        state.setdefault("execution", {}).setdefault("decisions", {})["bootloader"] = "grub-efi"
        return state
