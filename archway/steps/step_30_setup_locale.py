from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..errors import ConfigError
from ..lib.chroot import chroot_cmd
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


def locale_is_known(locale_gen: Path, entry: str) -> bool:
    """True when entry appears in locale.gen, commented out or not."""

    for ln in locale_gen.read_text(encoding="utf-8").splitlines():
        if ln.lstrip("#").strip() == entry:
            return True
    return False


class SetupLocaleStep:
    step_id = "30_setup_locale"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config
        locale_gen = Path(cfg.mount_prefix) / "etc/locale.gen"

        if ctx.dry_run:
            logger.info("Would enable locale %r in %s", cfg.locale_gen, str(locale_gen))
        else:
            if not locale_gen.exists() or not locale_is_known(locale_gen, cfg.locale_gen):
                raise ConfigError(f"Invalid locale: {cfg.locale_gen!r} not listed in {locale_gen}")
            # Append the entry uncommented instead of editing the template in place.
            with locale_gen.open("a", encoding="utf-8") as f:
                f.write(cfg.locale_gen + "\n")

        chroot_cmd(cfg.mount_prefix, ["locale-gen"], dry_run=ctx.dry_run)

        state.setdefault("execution", {}).setdefault("decisions", {})["locale"] = cfg.locale_gen
        return state
