from __future__ import annotations

import logging
import os
import re
import shlex
import tempfile
from pathlib import Path
from typing import List, Sequence, Tuple

from ..errors import ConfigError

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(r"^(?P<indent>\s*)(?P<name>[A-Za-z_][A-Za-z0-9_]*)=\((?P<body>[^)]*)\)(?P<suffix>.*)$")


def parse_hook_line(line: str) -> Tuple[str, List[str], str]:
    """Split a `NAME=( tok1 tok2 ... )` line into (name, tokens, suffix).

    suffix is whatever follows the closing parenthesis (usually a comment or
    nothing) and is kept verbatim on render.
    """

    m = _LINE_RE.match(line.rstrip("\r\n"))
    if not m:
        raise ConfigError(f"Not a hook array assignment: {line.strip()!r}")
    try:
        tokens = shlex.split(m.group("body"))
    except ValueError as e:
        raise ConfigError(f"Malformed hook array {line.strip()!r}: {e}") from e
    return m.group("name"), tokens, m.group("suffix")


def render_hook_line(name: str, tokens: Sequence[str], suffix: str = "") -> str:
    return f"{name}=({' '.join(shlex.quote(t) for t in tokens)}){suffix}"


def insert_after_last(tokens: Sequence[str], anchor: str, token: str) -> List[str]:
    """Return a copy of tokens with `token` right after the last `anchor`.

    Any existing occurrence of `token` is dropped first so the result holds
    it exactly once. Raises ConfigError when the anchor is absent.
    """

    remaining = [t for t in tokens if t != token]
    anchor_indices = [i for i, t in enumerate(remaining) if t == anchor]
    if not anchor_indices:
        raise ConfigError(f"Could not find {anchor!r} hook; refusing to add {token!r}")

    idx = max(anchor_indices) + 1
    return remaining[:idx] + [token] + remaining[idx:]


def _find_active_line(lines: Sequence[str], name: str) -> int:
    prefix = f"{name}="
    found = -1
    for i, ln in enumerate(lines):
        # Last active assignment wins, as it would when the file is sourced.
        if ln.lstrip().startswith(prefix):
            found = i
    if found < 0:
        raise ConfigError(f"No active {name}=(...) line found")
    return found


def _atomic_write(path: Path, contents: str) -> None:
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(contents)
        os.chmod(tmp, path.stat().st_mode & 0o7777)
        os.replace(tmp, path)
    except BaseException:
        os.unlink(tmp)
        raise


def add_hook(
    conf_path: str | Path,
    *,
    anchor: str,
    token: str,
    name: str = "HOOKS",
    dry_run: bool = False,
) -> List[str]:
    """Insert `token` after the last `anchor` in the active hook line of conf_path.

    Only that line is rewritten; the file is replaced atomically and left
    untouched on any failure. Returns the new token list.
    """

    p = Path(conf_path)
    if not p.exists():
        raise ConfigError(f"Hook configuration missing: {p}")

    text = p.read_text(encoding="utf-8")
    lines = text.splitlines(keepends=True)
    idx = _find_active_line(lines, name)

    line = lines[idx]
    newline = line[len(line.rstrip("\r\n")):]
    indent = line[: len(line) - len(line.lstrip())]
    found_name, tokens, suffix = parse_hook_line(line)
    new_tokens = insert_after_last(tokens, anchor, token)

    if dry_run:
        logger.info("Would rewrite %s: %s -> %s", str(p), tokens, new_tokens)
        return new_tokens

    lines[idx] = indent + render_hook_line(found_name, new_tokens, suffix) + newline
    _atomic_write(p, "".join(lines))

    logger.info("Hooks updated in %s: %s", str(p), " ".join(new_tokens))
    return new_tokens
