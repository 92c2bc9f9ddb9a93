from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import NetworkPlanError

PLATFORM_EXPECTED = "expected"
PLATFORM_SAME_FAMILY = "same_family"
PLATFORM_UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class HostFacts:
    """Run-time facts about the host. Recomputed on every invocation."""

    model: Optional[str]
    platform: str
    os_id: Optional[str]
    os_codename: Optional[str]
    os_pretty_name: Optional[str]
    os_matches: bool
    has_default_route: bool
    wireless_interfaces: Tuple[str, ...] = ()
    has_container_runtime: bool = False


@dataclass(frozen=True)
class NetworkPlan:
    """Addressing and credentials of the access point.

    Validated on construction; an invalid plan never reaches a step that
    writes files.
    """

    ssid: str
    passphrase: str
    ap_ip: str
    subnet_cidr: str
    dhcp_range_start: str
    dhcp_range_end: str
    wireless_interface: Optional[str] = None
    uplink_interface: Optional[str] = None
    channel: int = 7
    lease_time: str = "24h"
    local_hostnames: Tuple[str, ...] = ("mulecube.local", "cube.local")
    captive_portal_domains: Tuple[str, ...] = (
        "connectivitycheck.gstatic.com",
        "www.msftconnecttest.com",
        "captive.apple.com",
    )

    def __post_init__(self) -> None:
        if not self.ssid or len(self.ssid.encode("utf-8")) > 32:
            raise NetworkPlanError(f"SSID must be 1-32 bytes: {self.ssid!r}")
        if not 8 <= len(self.passphrase) <= 63:
            raise NetworkPlanError("WPA2 passphrase must be 8-63 characters")

        try:
            net = ipaddress.IPv4Network(self.subnet_cidr, strict=True)
            ap = ipaddress.IPv4Address(self.ap_ip)
            start = ipaddress.IPv4Address(self.dhcp_range_start)
            end = ipaddress.IPv4Address(self.dhcp_range_end)
        except ValueError as e:
            raise NetworkPlanError(str(e)) from e

        def usable(addr: ipaddress.IPv4Address) -> bool:
            return addr in net and addr not in (net.network_address, net.broadcast_address)

        if not usable(ap):
            raise NetworkPlanError(f"Access point address {ap} is not a host address of {net}")
        for name, addr in (("start", start), ("end", end)):
            if not usable(addr):
                raise NetworkPlanError(f"DHCP range {name} {addr} is not a host address of {net}")
        if start > end:
            raise NetworkPlanError(f"DHCP range start {start} is after end {end}")
        if start <= ap <= end:
            raise NetworkPlanError(f"DHCP range {start}-{end} contains the access point address {ap}")

    @property
    def network(self) -> ipaddress.IPv4Network:
        return ipaddress.IPv4Network(self.subnet_cidr)

    @property
    def netmask(self) -> str:
        return str(self.network.netmask)

    @property
    def prefixlen(self) -> int:
        return self.network.prefixlen


@dataclass(frozen=True)
class ConfigArtifact:
    """A host file and its desired content. Paths are host-absolute."""

    path: str
    content: str
    mode: int = 0o644


@dataclass(frozen=True)
class StackOutcome:
    name: str
    ok: bool
    error: Optional[str] = None
