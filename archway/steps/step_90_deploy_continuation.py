from __future__ import annotations

from typing import Any, Dict

from ..deploy import deploy_continuation
from ..pipeline import InstallCtx


class DeployContinuationStep:
    step_id = "90_deploy_continuation"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        artifact = deploy_continuation(ctx, state)
        state.setdefault("execution", {}).setdefault("decisions", {})["continuation"] = str(artifact)
        return state
