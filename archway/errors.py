from __future__ import annotations

import shlex
from typing import Sequence


class InstallerError(RuntimeError):
    """Base class for every fatal installer condition."""


class ConfigError(InstallerError):
    pass


class SecurityVerificationError(InstallerError):
    pass


class UnsupportedAlgorithm(SecurityVerificationError):
    pass


class CredentialMismatch(SecurityVerificationError):
    pass


class ExternalToolFailure(InstallerError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed ({returncode}): {shlex.join(self.argv)}"
        if stderr:
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)
