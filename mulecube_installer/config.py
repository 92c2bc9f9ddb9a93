from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from .models import NetworkPlan

DEFAULT_CONFIG_PATH = "/etc/mulecube/installer.yaml"

DEFAULT_PACKAGES = [
    "git",
    "curl",
    "wget",
    "jq",
    "htop",
    "vim",
    "i2c-tools",
    "hostapd",
    "dnsmasq",
    "iptables",
    "netfilter-persistent",
    "iptables-persistent",
    "avahi-daemon",
]


@dataclass(frozen=True)
class InstallerConfig:
    raw: Dict[str, Any]

    def _section(self, name: str) -> Dict[str, Any]:
        section = self.raw.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ConfigError(f"config section '{name}' must be a mapping, got {type(section).__name__}")
        return section

    @property
    def repo_url(self) -> str:
        return str(self.raw.get("repo_url") or "https://github.com/nuclearlighters/mulecube.git")

    @property
    def install_dir(self) -> str:
        return str(self.raw.get("install_dir") or "/srv")

    @property
    def docker_user(self) -> str:
        return str(self.raw.get("docker_user") or "pi")

    @property
    def packages(self) -> List[str]:
        pkgs = self.raw.get("packages")
        if pkgs is None:
            return list(DEFAULT_PACKAGES)
        return _str_list(pkgs, "packages")

    @property
    def expected_model(self) -> str:
        return str(self._section("platform").get("expected_model") or "Raspberry Pi 5")

    @property
    def model_family(self) -> str:
        return str(self._section("platform").get("family") or "Raspberry Pi")

    @property
    def os_ids(self) -> List[str]:
        ids = self._section("os").get("ids")
        if ids is None:
            return ["debian", "raspbian"]
        return _str_list(ids, "os.ids")

    @property
    def os_codename(self) -> str:
        return str(self._section("os").get("codename") or "bookworm")

    @property
    def probe_host(self) -> str:
        return str(self._section("connectivity").get("probe_host") or "github.com")

    @property
    def host_root(self) -> str:
        return str(self._section("paths").get("host_root") or "/")

    @property
    def boot_config(self) -> str:
        return str(self._section("paths").get("boot_config") or "/boot/firmware/config.txt")

    def network_plan(self) -> NetworkPlan:
        """Build (and validate) the access point plan; interfaces are detected later."""

        wifi = self._section("wifi")
        kwargs: Dict[str, Any] = {
            "ssid": str(wifi.get("ssid") or "MuleCube"),
            "passphrase": str(wifi.get("passphrase") or "mulecube"),
            "ap_ip": str(wifi.get("ap_ip") or "192.168.42.1"),
            "subnet_cidr": str(wifi.get("subnet") or "192.168.42.0/24"),
            "dhcp_range_start": str(wifi.get("dhcp_start") or "192.168.42.10"),
            "dhcp_range_end": str(wifi.get("dhcp_end") or "192.168.42.250"),
        }
        if wifi.get("channel") is not None:
            kwargs["channel"] = _int(wifi["channel"], "wifi.channel")
        if wifi.get("lease_time"):
            kwargs["lease_time"] = str(wifi["lease_time"])
        if wifi.get("local_hostnames") is not None:
            kwargs["local_hostnames"] = tuple(_str_list(wifi["local_hostnames"], "wifi.local_hostnames"))
        if wifi.get("captive_portal_domains") is not None:
            kwargs["captive_portal_domains"] = tuple(
                _str_list(wifi["captive_portal_domains"], "wifi.captive_portal_domains")
            )
        return NetworkPlan(**kwargs)


def _str_list(value: Any, key: str) -> List[str]:
    if not isinstance(value, list):
        raise ConfigError(f"config key '{key}' must be a list, got {type(value).__name__}")
    return [str(v).strip() for v in value if str(v).strip()]


def _int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"config key '{key}' must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"config key '{key}' must be an integer, got {value!r}") from e


def load_config(path: Optional[str] = None) -> InstallerConfig:
    """Load installer config from YAML.

    An explicit path must exist; the default path is optional and falls back
    to built-in defaults.
    """

    p = Path(path or DEFAULT_CONFIG_PATH)
    if not p.exists():
        if path is not None:
            raise ConfigError(f"Config file not found: {path}")
        return InstallerConfig(raw={})

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("installer config must be YAML")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{p} must contain a mapping/object")

    return InstallerConfig(raw=raw)
