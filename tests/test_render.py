from __future__ import annotations

import dataclasses

import pytest

from mulecube_installer.models import NetworkPlan
from mulecube_installer.render import (
    render_dhcpcd_stanza,
    render_dnsmasq,
    render_hostapd,
    render_launcher,
    render_summary,
)


@pytest.fixture
def plan() -> NetworkPlan:
    return NetworkPlan(
        ssid="MuleCube",
        passphrase="mulecube",
        ap_ip="192.168.42.1",
        subnet_cidr="192.168.42.0/24",
        dhcp_range_start="192.168.42.10",
        dhcp_range_end="192.168.42.250",
        wireless_interface="wlan0",
    )


def test_dnsmasq_binds_router_dns_and_range(plan):
    lines = render_dnsmasq(plan).content.splitlines()
    assert "interface=wlan0" in lines
    assert "bind-interfaces" in lines
    assert "dhcp-range=192.168.42.10,192.168.42.250,255.255.255.0,24h" in lines
    assert "dhcp-option=option:router,192.168.42.1" in lines
    assert "dhcp-option=option:dns-server,192.168.42.1" in lines


def test_dnsmasq_overrides_local_names_and_captive_probes(plan):
    content = render_dnsmasq(plan).content
    for name in ("mulecube.local", "cube.local", "connectivitycheck.gstatic.com", "captive.apple.com"):
        assert f"address=/{name}/192.168.42.1" in content


def test_hostapd_security_settings(plan):
    artifact = render_hostapd(plan)
    lines = artifact.content.splitlines()
    assert artifact.path == "/etc/hostapd/hostapd.conf"
    for expected in (
        "interface=wlan0",
        "ssid=MuleCube",
        "channel=7",
        "ignore_broadcast_ssid=0",
        "wpa=2",
        "wpa_passphrase=mulecube",
        "wpa_key_mgmt=WPA-PSK",
        "wpa_pairwise=TKIP",
        "rsn_pairwise=CCMP",
    ):
        assert expected in lines


def test_dhcpcd_stanza(plan):
    content = render_dhcpcd_stanza(plan).content
    assert content.startswith("# MuleCube network configuration\n")
    assert "interface wlan0\n" in content
    assert "static ip_address=192.168.42.1/24" in content
    assert "nohook wpa_supplicant" in content


def test_rendering_is_byte_identical(plan):
    again = dataclasses.replace(plan)
    for render in (render_hostapd, render_dnsmasq, render_dhcpcd_stanza):
        assert render(plan) == render(again)


def test_renderers_need_an_interface(plan):
    with pytest.raises(ValueError):
        render_hostapd(dataclasses.replace(plan, wireless_interface=None))


def test_launcher_calls_stacks_main():
    artifact = render_launcher(
        interpreter="/usr/bin/python3",
        scripts_dir="/srv/scripts",
        name="start-all",
        argv=["--root", "/srv"],
    )
    assert artifact.path == "/srv/scripts/start-all"
    assert artifact.mode == 0o755
    assert artifact.content.startswith("#!/usr/bin/python3\n")
    assert "main(['start-all', '--root', '/srv'])" in artifact.content


def test_summary_lists_next_steps_and_warnings(plan):
    text = render_summary(install_dir="/srv", plan=plan, warnings=["No WiFi interface found."])
    assert "SSID:     MuleCube" in text
    assert "sudo reboot" in text
    assert "/srv/scripts/start-all" in text
    assert "No WiFi interface found." in text
    assert text.index("sudo reboot") < text.index("start-all")
