"""Installer exception hierarchy.

Every fatal failure derives from InstallerError; main() maps it to exit code 1.
"""

from __future__ import annotations

import shlex


class InstallerError(RuntimeError):
    """Base class for fatal installer failures."""


class ConfigError(InstallerError):
    """Installer configuration is unreadable or malformed."""


class NetworkPlanError(InstallerError, ValueError):
    """Access point addressing is inconsistent."""


class CommandError(InstallerError):
    """An external command exited non-zero."""

    def __init__(self, argv: list[str], returncode: int, stderr: str = "") -> None:
        self.argv = argv
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed ({returncode}): {' '.join(shlex.quote(a) for a in argv)}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)


class NotRootError(InstallerError, PermissionError):
    pass


class ConnectivityError(InstallerError):
    pass


class PackageManagerError(InstallerError):
    pass


class InstallError(InstallerError):
    pass


class UserAbortError(InstallerError):
    """Operator declined an interactive confirmation."""
