from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.storage import PartitionPlan, partition_and_format
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class PartitionDiskStep:
    step_id = "10_partition_disk"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config

        plan = PartitionPlan(
            disk=cfg.device,
            boot_part=cfg.boot_partition,
            lvm_part=cfg.lvm_partition,
            volgroup=cfg.volgroup,
            root_lv_size=cfg.root_lv_size,
            boot_size_mib=cfg.boot_size_mib,
        )
        partition_and_format(plan=plan, target_root=cfg.mount_prefix, dry_run=ctx.dry_run)

        decisions = state.setdefault("execution", {}).setdefault("decisions", {})
        decisions["boot_part"] = plan.boot_part
        decisions["root_lv"] = plan.root_lv
        decisions["home_lv"] = plan.home_lv

        logger.info("Partitioned %s and mounted target at %s", cfg.device, cfg.mount_prefix)
        return state
