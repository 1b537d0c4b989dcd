from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Protocol, Sequence

from .config import InstallConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallCtx:
    """Everything a step may read; built once per invocation."""

    config: InstallConfig
    # Directory holding the marker and deployed artifact for this invocation.
    home_dir: Path
    dry_run: bool = False
    reboot: bool = True
    # username -> plaintext, only populated for the pre-boot phase.
    credentials: Mapping[str, str] = field(default_factory=dict, repr=False)


class Step(Protocol):
    """A single step; raises to abort the phase."""

    step_id: str

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]


def run_pipeline(
    *,
    ctx: InstallCtx,
    steps: Sequence[Step],
    state: Dict[str, Any] | None = None,
) -> PipelineResult:
    """Run steps strictly in order; the first exception aborts the rest.

    Completed steps are not rolled back and nothing is skipped on a re-run.
    """

    state = state if state is not None else {}
    ran: List[str] = []

    for step in steps:
        state.setdefault("execution", {})["current_step"] = step.step_id
        logger.info("Running step %s", step.step_id)
        state = step.run(ctx, state)
        ran.append(step.step_id)
        state.setdefault("execution", {}).setdefault("completed_steps", []).append(step.step_id)

    state.setdefault("execution", {})["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran)
