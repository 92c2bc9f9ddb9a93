from __future__ import annotations

import logging
from typing import List, Optional

from .command import try_cmd

logger = logging.getLogger(__name__)


def is_online(probe_host: str) -> bool:
    """Single reachability probe (one ICMP echo)."""

    r = try_cmd(["ping", "-c", "1", probe_host])
    return r is not None and r.ok


def wireless_interfaces() -> List[str]:
    """Wireless interfaces in `iw dev` enumeration order."""

    r = try_cmd(["iw", "dev"])
    if r is None or not r.ok:
        return []
    out: List[str] = []
    for line in r.stdout.splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[0] == "Interface" and parts[1] not in out:
            out.append(parts[1])
    return out


def default_route_interface() -> Optional[str]:
    """Interface of the first default route, i.e. the uplink."""

    r = try_cmd(["ip", "route", "show", "default"])
    if r is None or not r.ok:
        return None
    for line in r.stdout.splitlines():
        parts = line.split()
        if not parts or parts[0] != "default" or "dev" not in parts:
            continue
        idx = parts.index("dev")
        if idx + 1 < len(parts):
            return parts[idx + 1]
    return None
