from __future__ import annotations

from typing import Any, Dict

from ..lib.pkg import enable_services
from ..pipeline import InstallCtx


class EnableServicesStep:
    step_id = "25_enable_services"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        enable_services(ctx.config.services, target_root=ctx.config.mount_prefix, dry_run=ctx.dry_run)
        return state
