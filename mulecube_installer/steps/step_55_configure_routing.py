from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict

from ..config import InstallerConfig
from ..lib.command import run_cmd
from ..lib.files import host_path, write_artifact
from ..lib.firewall import ensure_rule, nat_rules, save_rules
from ..lib.net import default_route_interface
from ..models import NetworkPlan
from ..pipeline import record_decision, record_warning
from ..render import render_sysctl

logger = logging.getLogger(__name__)


class ConfigureRoutingStep:
    step_id = "55_configure_routing"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg: InstallerConfig = state["config"]
        plan: NetworkPlan = state["plan"]

        logger.info("Configuring networking and NAT...")

        sysctl = render_sysctl()
        write_artifact(cfg.host_root, sysctl)
        run_cmd(["sysctl", "-p", str(host_path(cfg.host_root, sysctl.path))])

        uplink = default_route_interface()
        plan = dataclasses.replace(plan, uplink_interface=uplink)
        state["plan"] = plan

        if not (uplink and plan.wireless_interface):
            record_warning(state, "No uplink or WiFi interface; skipping NAT setup")
            record_decision(state, "nat", False)
            return state
        if uplink == plan.wireless_interface:
            record_warning(state, f"Default route uses the AP interface {uplink}; skipping NAT setup")
            record_decision(state, "nat", False)
            return state

        added = [ensure_rule(r) for r in nat_rules(uplink=uplink, wireless=plan.wireless_interface)]
        save_rules()

        record_decision(state, "nat", {"uplink": uplink, "rules_added": sum(added)})
        logger.info("Networking configured (NAT %s -> %s)", plan.wireless_interface, uplink)
        return state
