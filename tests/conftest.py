from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional

import pytest

from mulecube_installer.config import InstallerConfig
from mulecube_installer.lib import command, hwdetect

IW_DEV_OUTPUT = """phy#0
\tInterface wlan0
\t\tifindex 3
\t\twdev 0x1
\t\ttype managed
"""

IP_ROUTE_DEFAULT = "default via 192.168.1.1 dev eth0 proto dhcp src 192.168.1.50 metric 100\n"

OS_RELEASE_BOOKWORM = """PRETTY_NAME="Debian GNU/Linux 12 (bookworm)"
NAME="Debian GNU/Linux"
VERSION_ID="12"
VERSION_CODENAME=bookworm
ID=debian
"""


class FakeHost:
    """Stands in for subprocess.run and shutil.which; records every command."""

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], Optional[str]]] = []
        self.binaries: set[str] = set()
        self._rules: list[tuple[tuple[str, ...], Optional[str], int, str, str]] = []

    def on(self, *prefix: str, returncode: int = 0, stdout: str = "", stderr: str = "", cwd: Optional[str] = None) -> None:
        # Later rules win over earlier ones.
        self._rules.insert(0, (prefix, cwd, returncode, stdout, stderr))

    def run(self, argv, **kwargs):
        argv = list(argv)
        cwd = kwargs.get("cwd")
        self.calls.append((argv, cwd))
        for prefix, rule_cwd, rc, out, err in self._rules:
            if tuple(argv[: len(prefix)]) == prefix and (rule_cwd is None or rule_cwd == cwd):
                return subprocess.CompletedProcess(argv, rc, out, err)
        return subprocess.CompletedProcess(argv, 0, "", "")

    def which(self, name, *args, **kwargs):
        return f"/usr/bin/{name}" if name in self.binaries else None

    @property
    def argvs(self) -> list[list[str]]:
        return [argv for argv, _ in self.calls]

    def ran(self, *prefix: str) -> bool:
        return any(tuple(a[: len(prefix)]) == prefix for a in self.argvs)

    def index(self, *prefix: str) -> int:
        for i, a in enumerate(self.argvs):
            if tuple(a[: len(prefix)]) == prefix:
                return i
        raise AssertionError(f"command not run: {' '.join(prefix)}")


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    # Handlers bound to pytest's captured streams would outlive the test.
    monkeypatch.setattr("mulecube_installer.main.configure_logging", lambda **kwargs: None)
    monkeypatch.setattr("mulecube_installer.stacks.configure_logging", lambda **kwargs: None)


@pytest.fixture
def host(monkeypatch: pytest.MonkeyPatch) -> FakeHost:
    h = FakeHost()
    monkeypatch.setattr(command.subprocess, "run", h.run)
    monkeypatch.setattr(shutil, "which", h.which)
    monkeypatch.setattr(hwdetect.os, "geteuid", lambda: 0)
    return h


@pytest.fixture
def pi_host(host: FakeHost) -> FakeHost:
    """A Pi with one wireless interface and an ethernet uplink."""

    host.on("iw", "dev", stdout=IW_DEV_OUTPUT)
    host.on("ip", "route", "show", "default", stdout=IP_ROUTE_DEFAULT)
    return host


def write_host_file(root: Path, path: str, content: str) -> Path:
    p = root / path.lstrip("/")
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")
    return p


@pytest.fixture
def host_root(tmp_path: Path) -> Path:
    root = tmp_path / "host"
    write_host_file(root, "/proc/device-tree/model", "Raspberry Pi 5 Model B Rev 1.0\x00")
    write_host_file(root, "/etc/os-release", OS_RELEASE_BOOKWORM)
    write_host_file(root, "/boot/firmware/config.txt", "[all]\narm_64bit=1\n")
    write_host_file(root, "/etc/default/hostapd", '# Defaults for hostapd\n#DAEMON_CONF=""\n#DAEMON_OPTS=""\n')
    write_host_file(root, "/etc/dhcpcd.conf", "hostname\nclientid\npersistent\n")
    write_host_file(root, "/etc/modules", "# /etc/modules\n")
    return root


@pytest.fixture
def config(host_root: Path) -> InstallerConfig:
    return InstallerConfig(raw={"paths": {"host_root": str(host_root)}})


@pytest.fixture
def make_state(config: InstallerConfig):
    def _make(cfg: InstallerConfig = config) -> Dict[str, Any]:
        return {
            "config": cfg,
            "plan": cfg.network_plan(),
            "execution": {"current_step": None, "warnings": [], "decisions": {}},
        }

    return _make
