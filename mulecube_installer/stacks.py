"""Runtime behind the generated start-all / stop-all / status helpers.

Each compose stack is an independent unit: it runs inside its own error
boundary, so one broken stack never prevents the others from starting or
stopping. The helpers always exit 0.
"""

from __future__ import annotations

import argparse
import logging
import shutil
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import CommandError
from .lib.command import run_cmd, try_cmd
from .lib.systemd import is_active
from .logging_utils import configure_logging
from .models import StackOutcome

logger = logging.getLogger(__name__)

COMPOSE_FILES = ("docker-compose.yml", "docker-compose.yaml", "compose.yml", "compose.yaml")
DEFAULT_ROOT = "/srv"
DEFAULT_DASHBOARD_URL = "http://192.168.42.1"


def discover_stacks(root: str) -> List[Path]:
    """Immediate, non-hidden subdirectories holding a compose descriptor."""

    base = Path(root)
    if not base.is_dir():
        return []
    return [
        d
        for d in sorted(base.iterdir(), key=lambda p: p.name)
        if d.is_dir() and not d.name.startswith(".") and any((d / f).is_file() for f in COMPOSE_FILES)
    ]


def _each_stack(root: str, compose_args: Sequence[str], verb: str) -> List[StackOutcome]:
    outcomes: List[StackOutcome] = []
    for stack in discover_stacks(root):
        print(f"  {verb} {stack.name}...")
        try:
            run_cmd(["docker", "compose", *compose_args], cwd=str(stack))
        except Exception as e:  # one stack's fault never aborts the batch
            reason = e.stderr.strip() if isinstance(e, CommandError) and e.stderr.strip() else str(e)
            logger.warning("%s %s failed: %s", verb, stack.name, reason)
            outcomes.append(StackOutcome(name=stack.name, ok=False, error=str(e)))
        else:
            outcomes.append(StackOutcome(name=stack.name, ok=True))
    return outcomes


def start_all(root: str = DEFAULT_ROOT, *, dashboard_url: str = DEFAULT_DASHBOARD_URL) -> List[StackOutcome]:
    print("Starting MuleCube services...")
    outcomes = _each_stack(root, ["up", "-d"], "Starting")
    failed = [o.name for o in outcomes if not o.ok]
    print("")
    print(f"Services started ({len(outcomes) - len(failed)}/{len(outcomes)}). Access dashboard at {dashboard_url}")
    if failed:
        print(f"Failed stacks: {', '.join(failed)}")
    return outcomes


def stop_all(root: str = DEFAULT_ROOT) -> List[StackOutcome]:
    print("Stopping MuleCube services...")
    outcomes = _each_stack(root, ["down"], "Stopping")
    failed = [o.name for o in outcomes if not o.ok]
    print("All services stopped" if not failed else f"Stopped with failures: {', '.join(failed)}")
    return outcomes


def cpu_temperature() -> str:
    """vcgencmd first, then the kernel thermal zone, else N/A."""

    r = try_cmd(["vcgencmd", "measure_temp"])
    if r is not None and r.ok and r.stdout.strip():
        # temp=51.1'C
        return r.stdout.strip().split("=", 1)[-1].replace("'", "°")

    zone = Path("/sys/class/thermal/thermal_zone0/temp")
    try:
        return f"{int(zone.read_text(encoding='utf-8').strip()) / 1000:.1f}°C"
    except (OSError, ValueError):
        return "N/A"


def _human(n: float) -> str:
    for unit in ("B", "K", "M", "G"):
        if n < 1024:
            return f"{n:.1f}{unit}"
        n /= 1024
    return f"{n:.1f}T"


def disk_usage(root: str) -> str:
    try:
        du = shutil.disk_usage(root)
    except OSError:
        return "N/A"
    pct = round(du.used * 100 / du.total) if du.total else 0
    return f"{pct}% used of {_human(du.total)}"


def memory_usage(meminfo: str = "/proc/meminfo") -> str:
    values = {}
    try:
        for line in Path(meminfo).read_text(encoding="utf-8").splitlines():
            key, _, rest = line.partition(":")
            parts = rest.split()
            if parts:
                values[key.strip()] = int(parts[0]) * 1024
    except (OSError, ValueError):
        return "N/A"
    total = values.get("MemTotal")
    available = values.get("MemAvailable")
    if not total or available is None:
        return "N/A"
    return f"{_human(total - available)} / {_human(total)}"


def status(root: str = DEFAULT_ROOT) -> List[str]:
    """Read-only report; returns the printed lines."""

    lines = ["MuleCube Status", "", "Docker containers:"]

    r = try_cmd(["docker", "ps", "--format", "{{.Names}}: {{.Status}}"])
    running = [ln for ln in (r.stdout.splitlines() if r is not None and r.ok else []) if ln.strip()]
    lines.extend(f"   {ln}" for ln in running[:20])
    lines += [
        "",
        f"   Total running: {len(running)}",
        "",
        f"CPU Temperature: {cpu_temperature()}",
        f"Disk Usage: {disk_usage(root)}",
        f"Memory: {memory_usage()}",
        "",
        "Network:",
        f"   WiFi AP: {is_active('hostapd')}",
        f"   DHCP: {is_active('dnsmasq')}",
        "",
    ]
    for ln in lines:
        print(ln)
    return lines


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="mulecube-stacks")
    p.add_argument("command", choices=["start-all", "stop-all", "status"])
    p.add_argument("--root", default=DEFAULT_ROOT, help="Deployment root holding one directory per stack")
    p.add_argument("--dashboard-url", default=DEFAULT_DASHBOARD_URL)
    args = p.parse_args(argv)

    configure_logging(log_path=None)

    if args.command == "start-all":
        start_all(args.root, dashboard_url=args.dashboard_url)
    elif args.command == "stop-all":
        stop_all(args.root)
    else:
        status(args.root)
    return 0
