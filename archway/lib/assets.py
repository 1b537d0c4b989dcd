from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)


def copy_tree(
    src: str,
    dst: str,
    *,
    skip_dirs: Sequence[str] = ("__pycache__",),
    dry_run: bool = False,
) -> None:
    s = Path(src)
    d = Path(dst)
    if not s.is_dir():
        raise FileNotFoundError(src)

    if dry_run:
        logger.info("Would copy tree %s -> %s", str(s), str(d))
        return

    d.mkdir(parents=True, exist_ok=True)
    for item in s.rglob("*"):
        rel = item.relative_to(s)
        if any(part in skip_dirs for part in rel.parts):
            continue
        out = d / rel
        if item.is_dir():
            out.mkdir(parents=True, exist_ok=True)
        else:
            out.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, out)
