from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict

from ..config import InstallerConfig
from ..lib.command import try_cmd
from ..lib.files import append_block_once, set_assignment, write_artifact
from ..lib.net import wireless_interfaces
from ..lib.systemd import stop_quietly
from ..models import NetworkPlan
from ..pipeline import record_decision, record_warning
from ..render import (
    DAEMON_CONF_LINE,
    DHCPCD_CONF,
    DHCPCD_MARKER,
    HOSTAPD_DEFAULTS,
    render_dhcpcd_stanza,
    render_dnsmasq,
    render_hostapd,
)

logger = logging.getLogger(__name__)


class ConfigureAccessPointStep:
    """WiFi access point: interface discovery, hostapd, dnsmasq, static address.

    Without a wireless interface the remaining stages are skipped and a
    warning is recorded; the run continues.
    """

    step_id = "50_configure_access_point"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg: InstallerConfig = state["config"]
        plan: NetworkPlan = state["plan"]
        root = cfg.host_root

        logger.info("Configuring WiFi Access Point...")

        # Stage A: first interface in enumeration order wins.
        ifaces = wireless_interfaces()
        if not ifaces:
            record_warning(state, "No WiFi interface found. Skipping AP configuration.")
            record_decision(state, "access_point", "skipped")
            return state
        plan = dataclasses.replace(plan, wireless_interface=ifaces[0])
        state["plan"] = plan
        logger.info("Using WiFi interface: %s", plan.wireless_interface)

        # Stage B: hostapd.
        stop_quietly("hostapd")
        stop_quietly("dnsmasq")
        try_cmd(["rfkill", "unblock", "wlan"])

        write_artifact(root, render_hostapd(plan))
        set_assignment(root, HOSTAPD_DEFAULTS, "DAEMON_CONF", DAEMON_CONF_LINE)

        # Stage C: dnsmasq fragment in its own conf-dir file.
        write_artifact(root, render_dnsmasq(plan))

        # Stage D: static address, appended to dhcpcd.conf at most once.
        stanza = render_dhcpcd_stanza(plan)
        write_artifact(root, stanza)
        if append_block_once(root, DHCPCD_CONF, stanza.content, DHCPCD_MARKER):
            logger.info("Added static address block to %s", DHCPCD_CONF)

        record_decision(state, "access_point", {"interface": plan.wireless_interface, "ssid": plan.ssid})
        logger.info("WiFi AP configured (SSID: %s)", plan.ssid)
        return state
