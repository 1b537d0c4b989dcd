from __future__ import annotations

import enum
import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from .errors import ConfigError

logger = logging.getLogger(__name__)

MARKER_NAME = ".run_postinstall"
RECORD_VERSION = 1


class Phase(enum.Enum):
    PRE_BOOT = "pre_boot"
    POST_BOOT = "post_boot"


@dataclass(frozen=True)
class PhaseRecord:
    """Contents of the marker file.

    Only the marker's existence selects the phase; the record carries what the
    next phase needs (its config) plus a summary of what the previous phase did.
    """

    phase: Phase
    config: Dict[str, Any]
    created_at: float = field(default_factory=time.time)
    summary: Dict[str, Any] = field(default_factory=dict)
    version: int = RECORD_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "phase": self.phase.value,
            "created_at": self.created_at,
            "config": self.config,
            "summary": self.summary,
        }


def detect_phase(marker_path: str | Path) -> Phase:
    """PRE_BOOT when no marker exists, POST_BOOT otherwise."""

    if Path(marker_path).exists():
        return Phase.POST_BOOT
    return Phase.PRE_BOOT


def load_record(marker_path: str | Path) -> PhaseRecord:
    p = Path(marker_path)
    text = p.read_text(encoding="utf-8")
    if not text.strip():
        # A bare (touched) marker still means post-boot; config comes from elsewhere.
        return PhaseRecord(phase=Phase.POST_BOOT, config={})

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Marker {p} is not a valid phase record: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Marker {p} must contain an object, got {type(data).__name__}")

    version = data.get("version")
    if version != RECORD_VERSION:
        raise ConfigError(f"Marker {p} has unsupported record version {version!r}")

    try:
        phase = Phase(data.get("phase"))
    except ValueError as e:
        raise ConfigError(f"Marker {p} names unknown phase {data.get('phase')!r}") from e

    config = data.get("config")
    if not isinstance(config, dict):
        raise ConfigError(f"Marker {p} carries no install config")

    return PhaseRecord(
        phase=phase,
        config=config,
        created_at=float(data.get("created_at") or 0.0),
        summary=dict(data.get("summary") or {}),
        version=version,
    )


def save_record(marker_path: str | Path, record: PhaseRecord) -> None:
    p = Path(marker_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(record.to_dict(), indent=2, sort_keys=True) + "\n", encoding="utf-8")
    logger.info("Wrote phase marker %s (next phase=%s)", str(p), record.phase.value)
