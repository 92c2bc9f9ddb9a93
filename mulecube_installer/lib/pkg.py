from __future__ import annotations

import logging
import shutil
from typing import Sequence

from ..errors import CommandError, PackageManagerError
from .command import run_cmd

logger = logging.getLogger(__name__)

_APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def command_exists(name: str) -> bool:
    return shutil.which(name) is not None


def apt_update() -> None:
    try:
        run_cmd(["apt-get", "update", "-qq"], env=_APT_ENV)
    except (CommandError, OSError) as e:
        raise PackageManagerError(f"apt-get update failed: {e}") from e


def apt_install(packages: Sequence[str]) -> None:
    """Install packages; already-installed packages are a no-op for apt."""

    if not packages:
        return
    try:
        run_cmd(["apt-get", "install", "-y", "-qq", *packages], env=_APT_ENV)
    except (CommandError, OSError) as e:
        raise PackageManagerError(f"apt-get install failed: {e}") from e
