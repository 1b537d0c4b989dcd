from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .command import run_cmd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartitionPlan:
    disk: str
    boot_part: str
    lvm_part: str
    volgroup: str
    root_lv_size: str
    boot_size_mib: int = 500

    @property
    def root_lv(self) -> str:
        return f"/dev/{self.volgroup}/lv_root"

    @property
    def home_lv(self) -> str:
        return f"/dev/{self.volgroup}/lv_home"


def sfdisk_script(plan: PartitionPlan) -> str:
    return "\n".join(
        [
            "label: gpt",
            "",
            f"size=+{plan.boot_size_mib}MiB, type=uefi",
            "type=lvm",
            "",
        ]
    )


def partition_and_format(*, plan: PartitionPlan, target_root: str, dry_run: bool = False) -> None:
    """Create the GPT layout, LVM volumes and filesystems, then mount them.

    Layout:
    - partition 1: EFI system partition (FAT32)
    - partition 2: LVM PV holding lv_root (fixed size) and lv_home (rest)
    """

    disk = plan.disk
    logger.info("Partitioning disk=%s", disk)

    run_cmd(["sfdisk", disk], input_text=sfdisk_script(plan), dry_run=dry_run)
    run_cmd(["mkfs.fat", "-F32", plan.boot_part], dry_run=dry_run)

    run_cmd(["pvcreate", "--dataalignment", "1m", plan.lvm_part], dry_run=dry_run)
    run_cmd(["vgcreate", plan.volgroup, plan.lvm_part], dry_run=dry_run)
    run_cmd(["lvcreate", "-L", plan.root_lv_size, plan.volgroup, "-n", "lv_root"], dry_run=dry_run)
    run_cmd(["lvcreate", "-l", "100%FREE", plan.volgroup, "-n", "lv_home"], dry_run=dry_run)

    # Activate device-mapper volumes
    run_cmd(["modprobe", "dm_mod"], dry_run=dry_run)
    run_cmd(["vgscan"], dry_run=dry_run)
    run_cmd(["vgchange", "-ay"], dry_run=dry_run)

    run_cmd(["mkfs.ext4", plan.root_lv], dry_run=dry_run)
    run_cmd(["mkfs.ext4", plan.home_lv], dry_run=dry_run)

    run_cmd(["mount", "--mkdir", plan.root_lv, target_root], dry_run=dry_run)
    run_cmd(["mount", "--mkdir", plan.home_lv, f"{target_root}/home"], dry_run=dry_run)
    run_cmd(["mkdir", "-p", f"{target_root}/etc"], dry_run=dry_run)


def _append(path: Path, contents: str, *, dry_run: bool) -> None:
    if dry_run:
        logger.info("Would append to %s", str(path))
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(contents)


def generate_fstab(target_root: str, *, dry_run: bool = False) -> None:
    r = run_cmd(["genfstab", "-U", "-p", target_root], dry_run=dry_run)
    _append(Path(target_root) / "etc/fstab", r.stdout, dry_run=dry_run)


def create_swapfile(target_root: str, size_mib: int, *, dry_run: bool = False) -> None:
    swapfile = f"{target_root}/swapfile"
    run_cmd(["dd", "if=/dev/zero", f"of={swapfile}", "bs=1M", f"count={size_mib}"], dry_run=dry_run)
    run_cmd(["chmod", "600", swapfile], dry_run=dry_run)
    run_cmd(["mkswap", swapfile], dry_run=dry_run)
    _append(Path(target_root) / "etc/fstab", "/swapfile none swap sw 0 0\n", dry_run=dry_run)
    logger.info("Swapfile created (%s MiB)", size_mib)
