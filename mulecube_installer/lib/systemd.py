from __future__ import annotations

import logging

from .command import run_cmd, try_cmd

logger = logging.getLogger(__name__)


def systemctl(action: str, unit: str) -> None:
    run_cmd(["systemctl", action, unit])


def stop_quietly(unit: str) -> None:
    """Stop a unit if it runs; a missing or stopped unit is fine."""

    try_cmd(["systemctl", "stop", unit])


def is_active(unit: str) -> str:
    """`systemctl is-active` state string ("active", "inactive", "failed", ...)."""

    r = try_cmd(["systemctl", "is-active", unit])
    if r is None:
        return "unknown"
    return r.stdout.strip() or "unknown"
