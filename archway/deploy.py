"""Hand the installer over to the installed system across the reboot.

The live environment is gone after the first reboot, so before rebooting the
pre-boot phase places a runnable copy of this package (a zipapp) and the
phase marker in the installed user's home. Booting into the new system and
running that copy with no arguments resumes at the post-boot phase.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import tempfile
import zipapp
import zipfile
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigError
from .lib.assets import copy_tree
from .lib.command import privileged_argv, run_cmd
from .phase_store import MARKER_NAME, Phase, PhaseRecord, detect_phase, load_record, save_record
from .pipeline import InstallCtx

logger = logging.getLogger(__name__)

ARTIFACT_NAME = "archway.pyz"
INTERPRETER = "/usr/bin/env python3"
ENTRY_POINT = "archway.main:entry"

_EXEC_ALL = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def _package_dir() -> Path:
    return Path(__file__).resolve().parent


def _source_archive() -> Optional[Path]:
    """The .pyz this code is running from, if any."""
    root = _package_dir().parent
    if root.is_file() and zipfile.is_zipfile(root):
        return root
    return None


def build_artifact(dest: Path) -> Path:
    """Write an executable zipapp of the archway package to dest."""

    dest.parent.mkdir(parents=True, exist_ok=True)

    archive = _source_archive()
    if archive is not None:
        shutil.copy2(archive, dest)
    else:
        with tempfile.TemporaryDirectory(prefix="archway-deploy-") as tmp:
            copy_tree(str(_package_dir()), str(Path(tmp) / "archway"))
            zipapp.create_archive(tmp, target=str(dest), interpreter=INTERPRETER, main=ENTRY_POINT)

    dest.chmod(dest.stat().st_mode | _EXEC_ALL)
    logger.info("Built continuation artifact %s", str(dest))
    return dest


def check_deployment(home: Path) -> None:
    """Raise unless home holds a runnable artifact and a post-boot marker."""

    artifact = home / ARTIFACT_NAME
    marker = home / MARKER_NAME

    if not artifact.is_file() or not os.access(artifact, os.X_OK):
        raise ConfigError(f"Continuation artifact missing or not executable: {artifact}")
    with zipfile.ZipFile(artifact) as zf:
        if "__main__.py" not in zf.namelist():
            raise ConfigError(f"Continuation artifact has no entry point: {artifact}")

    if detect_phase(marker) is not Phase.POST_BOOT or load_record(marker).phase is not Phase.POST_BOOT:
        raise ConfigError(f"Phase marker missing or unreadable: {marker}")


def deploy_continuation(ctx: InstallCtx, state: Dict[str, Any]) -> Path:
    """Deploy artifact + marker into the target and verify them.

    Must succeed before the reboot is triggered.
    """

    home = ctx.config.target_home
    artifact = home / ARTIFACT_NAME
    marker = home / MARKER_NAME

    if ctx.dry_run:
        logger.info("Would deploy %s and %s", str(artifact), str(marker))
        return artifact

    if not home.is_dir():
        raise ConfigError(f"Installed user's home does not exist: {home}")

    build_artifact(artifact)

    exe = state.get("execution") or {}
    record = PhaseRecord(
        phase=Phase.POST_BOOT,
        config=ctx.config.to_dict(),
        summary={
            "pre_boot_steps": list(exe.get("completed_steps") or []),
            "decisions": dict(exe.get("decisions") or {}),
        },
    )
    save_record(marker, record)

    check_deployment(home)
    logger.info("Continuation deployed to %s", str(home))
    return artifact


def retire_continuation(ctx: InstallCtx) -> None:
    """Delete marker and artifact from the running system's home."""

    marker = ctx.home_dir / MARKER_NAME
    artifact = ctx.home_dir / ARTIFACT_NAME

    run_cmd(privileged_argv(["rm", "-f", str(marker), str(artifact)]), dry_run=ctx.dry_run)

    if not ctx.dry_run and detect_phase(marker) is not Phase.PRE_BOOT:
        raise ConfigError(f"Phase marker still present after retirement: {marker}")
    logger.info("Continuation retired from %s", str(ctx.home_dir))
