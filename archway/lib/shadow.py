from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from passlib.hash import sha256_crypt, sha512_crypt

from ..errors import ConfigError, CredentialMismatch, UnsupportedAlgorithm

logger = logging.getLogger(__name__)

# crypt(3) uses 5000 rounds unless the hash spells out rounds=N.
DEFAULT_ROUNDS = 5000

SCHEMES = {
    "6": sha512_crypt,
    "5": sha256_crypt,
}


@dataclass(frozen=True)
class CredentialRecord:
    username: str
    algorithm_id: str
    salt: str
    digest: str
    rounds: Optional[int] = None


def parse_record(line: str) -> CredentialRecord:
    """Parse one `username:$id$salt$digest:...` credential store line."""

    fields = line.rstrip("\n").split(":")
    if len(fields) < 2 or not fields[0]:
        raise ConfigError(f"Malformed credential store line for {fields[0]!r}")

    username, hashed = fields[0], fields[1]
    parts = hashed.split("$")
    # ['', id, salt, digest] or ['', id, 'rounds=N', salt, digest]
    if len(parts) < 3 or parts[0] != "":
        raise ConfigError(f"Credential for {username!r} is not in $id$salt$digest form")
    # Other schemes ($y$, $2b$, ...) lay out their fields differently.
    scheme_for(parts[1])

    rounds: Optional[int] = None
    rest = parts[2:]
    if rest[0].startswith("rounds="):
        try:
            rounds = int(rest[0][len("rounds="):])
        except ValueError as e:
            raise ConfigError(f"Credential for {username!r} has invalid rounds: {rest[0]!r}") from e
        rest = rest[1:]

    if len(rest) != 2:
        raise ConfigError(f"Credential for {username!r} is not in $id$salt$digest form")

    salt, digest = rest
    return CredentialRecord(username=username, algorithm_id=parts[1], salt=salt, digest=digest, rounds=rounds)


def find_record(store_path: str | Path, username: str) -> CredentialRecord:
    p = Path(store_path)
    if not p.exists():
        raise ConfigError(f"Credential store missing: {p}")

    matches = [
        ln for ln in p.read_text(encoding="utf-8").splitlines() if ln.split(":", 1)[0] == username
    ]
    if not matches:
        raise ConfigError(f"No credential record for {username!r} in {p}")
    if len(matches) > 1:
        raise ConfigError(f"Multiple credential records for {username!r} in {p}")

    return parse_record(matches[0])


def scheme_for(algorithm_id: str):
    try:
        return SCHEMES[algorithm_id]
    except KeyError:
        raise UnsupportedAlgorithm(f"Unsupported crypt scheme in credential store: {algorithm_id!r}") from None


def compute_digest(plaintext: str, record: CredentialRecord) -> str:
    """Recompute the crypt digest of plaintext with the record's scheme, salt and rounds."""

    handler = scheme_for(record.algorithm_id)
    try:
        hashed = handler.using(salt=record.salt, rounds=record.rounds or DEFAULT_ROUNDS).hash(plaintext)
    except ValueError as e:
        raise ConfigError(f"Credential for {record.username!r} has unusable salt/rounds: {e}") from e
    return hashed.rsplit("$", 1)[1]


def verify_credential(username: str, plaintext: str, store_path: str | Path) -> None:
    """Check that the stored hash for username was produced from plaintext.

    Raises UnsupportedAlgorithm for schemes other than SHA-256/SHA-512 crypt and
    CredentialMismatch when the digests differ. Success only logs.
    """

    record = find_record(store_path, username)
    actual = compute_digest(plaintext, record)
    if not hmac.compare_digest(actual.encode("utf-8"), record.digest.encode("utf-8")):
        raise CredentialMismatch(f"Password for {username!r} does not match the stored hash")

    logger.info("Password for %s verified (scheme $%s$)", username, record.algorithm_id)
