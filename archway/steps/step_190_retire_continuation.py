from __future__ import annotations

from typing import Any, Dict

from ..deploy import retire_continuation
from ..pipeline import InstallCtx


class RetireContinuationStep:
    step_id = "190_retire_continuation"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        retire_continuation(ctx)
        return state
