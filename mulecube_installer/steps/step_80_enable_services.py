from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.systemd import systemctl

logger = logging.getLogger(__name__)


class EnableServicesStep:
    """Boot-time activation only; nothing is started here."""

    step_id = "80_enable_services"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        logger.info("Enabling system services...")

        # Some images ship hostapd masked; unmask must come first.
        systemctl("unmask", "hostapd")
        systemctl("enable", "hostapd")
        systemctl("enable", "dnsmasq")
        # .local name resolution
        systemctl("enable", "avahi-daemon")

        logger.info("System services enabled")
        return state
