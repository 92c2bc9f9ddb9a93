"""Renderers for every file the installer generates.

Pure functions of their inputs: the same NetworkPlan always yields
byte-identical artifacts.
"""

from __future__ import annotations

import shlex
from typing import List, Sequence

from .models import ConfigArtifact, NetworkPlan

HOSTAPD_CONF = "/etc/hostapd/hostapd.conf"
HOSTAPD_DEFAULTS = "/etc/default/hostapd"
DNSMASQ_CONF = "/etc/dnsmasq.d/mulecube.conf"
DHCPCD_CONF = "/etc/dhcpcd.conf"
DHCPCD_STANZA = "/etc/dhcpcd.conf.mulecube"
SYSCTL_CONF = "/etc/sysctl.d/90-mulecube.conf"
MODULES_FILE = "/etc/modules"

DHCPCD_MARKER = "# MuleCube network configuration"
DAEMON_CONF_LINE = f'DAEMON_CONF="{HOSTAPD_CONF}"'
I2C_BOOT_LINE = "dtparam=i2c_arm=on"
I2C_MODULE = "i2c-dev"


def _require_interface(plan: NetworkPlan) -> str:
    if not plan.wireless_interface:
        raise ValueError("NetworkPlan has no wireless interface")
    return plan.wireless_interface


def render_hostapd(plan: NetworkPlan) -> ConfigArtifact:
    iface = _require_interface(plan)
    lines = [
        "# MuleCube WiFi Access Point Configuration",
        f"interface={iface}",
        "driver=nl80211",
        f"ssid={plan.ssid}",
        "hw_mode=g",
        f"channel={plan.channel}",
        "wmm_enabled=0",
        "macaddr_acl=0",
        "auth_algs=1",
        "ignore_broadcast_ssid=0",
        "wpa=2",
        f"wpa_passphrase={plan.passphrase}",
        "wpa_key_mgmt=WPA-PSK",
        "wpa_pairwise=TKIP",
        "rsn_pairwise=CCMP",
        "",
        "# Enable WiFi 5 (802.11ac) if supported",
        "ieee80211n=1",
        "ieee80211ac=1",
    ]
    # Contains the WPA passphrase.
    return ConfigArtifact(path=HOSTAPD_CONF, content="\n".join(lines) + "\n", mode=0o600)


def render_dnsmasq(plan: NetworkPlan) -> ConfigArtifact:
    iface = _require_interface(plan)
    lines = [
        "# MuleCube DHCP and DNS Configuration",
        f"interface={iface}",
        "bind-interfaces",
        f"dhcp-range={plan.dhcp_range_start},{plan.dhcp_range_end},{plan.netmask},{plan.lease_time}",
        f"dhcp-option=option:router,{plan.ap_ip}",
        f"dhcp-option=option:dns-server,{plan.ap_ip}",
        "",
        "# Local DNS entries",
        *[f"address=/{name}/{plan.ap_ip}" for name in plan.local_hostnames],
        "",
        "# Captive portal detection",
        *[f"address=/{name}/{plan.ap_ip}" for name in plan.captive_portal_domains],
    ]
    return ConfigArtifact(path=DNSMASQ_CONF, content="\n".join(lines) + "\n")


def render_dhcpcd_stanza(plan: NetworkPlan) -> ConfigArtifact:
    iface = _require_interface(plan)
    lines = [
        DHCPCD_MARKER,
        f"interface {iface}",
        f"    static ip_address={plan.ap_ip}/{plan.prefixlen}",
        "    nohook wpa_supplicant",
    ]
    return ConfigArtifact(path=DHCPCD_STANZA, content="\n".join(lines) + "\n")


def render_sysctl() -> ConfigArtifact:
    return ConfigArtifact(path=SYSCTL_CONF, content="net.ipv4.ip_forward=1\n")


def render_launcher(
    *,
    interpreter: str,
    scripts_dir: str,
    name: str,
    argv: Sequence[str],
) -> ConfigArtifact:
    """A tiny executable that runs one stack helper with a fixed argument vector."""

    args: List[str] = [name, *argv]
    lines = [
        f"#!{interpreter}",
        f'"""MuleCube: {name} (generated by mulecube-installer, no arguments)."""',
        "from mulecube_installer.stacks import main",
        "",
        f"raise SystemExit(main({args!r}))",
    ]
    return ConfigArtifact(
        path=f"{scripts_dir.rstrip('/')}/{name}",
        content="\n".join(lines) + "\n",
        mode=0o755,
    )


def render_summary(
    *,
    install_dir: str,
    plan: NetworkPlan,
    warnings: Sequence[str] = (),
) -> str:
    scripts = f"{install_dir.rstrip('/')}/scripts"
    lines = [
        "",
        "=" * 64,
        "  MuleCube Installation Complete!",
        "=" * 64,
        "",
        f"Installation directory: {install_dir}",
        "",
        "WiFi Access Point:",
        f"   SSID:     {plan.ssid}",
        f"   Password: {plan.passphrase}",
        f"   IP:       {plan.ap_ip}",
        "",
    ]
    if warnings:
        lines.append("Warnings:")
        lines.extend(f"   - {w}" for w in warnings)
        lines.append("")
    lines += [
        "Next steps:",
        "   1. Reboot to apply all changes:",
        "      sudo reboot",
        "",
        "   2. After reboot, start services:",
        f"      sudo {shlex.quote(scripts + '/start-all')}",
        "",
        f"   3. Connect to '{plan.ssid}' WiFi and open:",
        f"      http://{plan.ap_ip}",
        "",
        "Documentation: https://mulecube.com/docs/",
        "Report issues: https://github.com/nuclearlighters/mulecube/issues",
        "",
        "IMPORTANT: You should change the default WiFi password!",
        f"   Edit: {HOSTAPD_CONF}",
        "",
    ]
    return "\n".join(lines)
