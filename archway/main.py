from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .config import InstallConfig, load_config
from .errors import ConfigError, InstallerError
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .phase_store import MARKER_NAME, Phase, detect_phase, load_record
from .pipeline import InstallCtx, Step, run_pipeline
from .steps import (
    BootHooksStep,
    DeployContinuationStep,
    EnableServicesStep,
    InstallBaseStep,
    InstallBootloaderStep,
    PartitionDiskStep,
    PostInstallsStep,
    RebootStep,
    RetireContinuationStep,
    SetHostnameStep,
    SetTimezoneStep,
    SetupLocaleStep,
    SudoersStep,
    UserAccountsStep,
    WriteFstabStep,
)

logger = logging.getLogger(__name__)


def build_pre_boot_steps() -> List[Step]:
    return [
        PartitionDiskStep(),
        WriteFstabStep(),
        InstallBaseStep(),
        EnableServicesStep(),
        SetupLocaleStep(),
        BootHooksStep(),
        UserAccountsStep(),
        SudoersStep(),
        InstallBootloaderStep(),
        DeployContinuationStep(),
        RebootStep("99_reboot", ["systemctl", "-i", "reboot"]),
    ]


def build_post_boot_steps() -> List[Step]:
    return [
        SetTimezoneStep(),
        SetHostnameStep(),
        PostInstallsStep(),
        RetireContinuationStep(),
        RebootStep("199_reboot", ["reboot"]),
    ]


def default_home_dir() -> Path:
    """Where to look for the marker when --home is not given.

    The deployed zipapp keeps its marker next to itself; otherwise use the
    current directory.
    """

    argv0 = Path(sys.argv[0])
    if argv0.suffix == ".pyz":
        return argv0.resolve().parent
    return Path.cwd()


def prompt_credentials(username: str) -> Dict[str, str]:
    creds: Dict[str, str] = {}
    for user in ("root", username):
        pw = getpass.getpass(f"Enter the new password for '{user}': ")
        if not pw:
            raise ConfigError(f"Empty password for {user!r}")
        creds[user] = pw
    return creds


def run(
    *,
    config_path: Optional[str] = None,
    home_dir: Optional[str] = None,
    log_path: str = DEFAULT_LOG_PATH,
    dry_run: bool = False,
    reboot: bool = True,
    credentials: Optional[Mapping[str, str]] = None,
) -> Phase:
    """Detect the phase once and run exactly that phase's steps."""

    home = Path(home_dir) if home_dir else default_home_dir()
    configure_logging(log_path=log_path, fallback_dir=str(home))

    marker = home / MARKER_NAME
    phase = detect_phase(marker)
    logger.info("Detected phase %s (marker=%s)", phase.value, str(marker))

    if phase is Phase.PRE_BOOT:
        cfg = load_config(config_path)
        # Ask before anything destructive happens.
        creds = dict(credentials) if credentials is not None else prompt_credentials(cfg.username)
        steps = build_pre_boot_steps()
    else:
        record = load_record(marker)
        cfg = InstallConfig.from_dict(record.config) if record.config else load_config(config_path)
        creds = {}
        steps = build_post_boot_steps()

    ctx = InstallCtx(config=cfg, home_dir=home, dry_run=dry_run, reboot=reboot, credentials=creds)
    state: Dict[str, Any] = {"phase": phase.value}

    try:
        result = run_pipeline(ctx=ctx, steps=steps, state=state)
    except Exception:
        logger.error(
            "Phase %s aborted in step %s; re-running repeats the whole phase",
            phase.value,
            (state.get("execution") or {}).get("current_step"),
        )
        raise

    logger.info("Phase %s complete: %s", phase.value, ", ".join(result.ran_steps))
    return phase


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="archway")
    p.add_argument("--config", default=None, help="Install config (yaml|json); pre-boot only")
    p.add_argument("--home", default=None, help="Directory holding the phase marker")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument("--no-reboot", action="store_true", help="Do not reboot at the end of a phase")

    args = p.parse_args(argv)

    try:
        run(
            config_path=args.config,
            home_dir=args.home,
            log_path=args.log,
            dry_run=bool(args.dry_run),
            reboot=not args.no_reboot,
        )
    except InstallerError as e:
        logger.error("ERROR: %s", e)
        return 1
    except Exception:
        logger.exception("Installer failed")
        return 1
    return 0


def entry() -> None:
    raise SystemExit(main())
