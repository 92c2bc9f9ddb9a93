from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from ..config import InstallerConfig
from ..errors import ConnectivityError, NotRootError, UserAbortError
from ..lib.hwdetect import classify_platform, is_root, read_model, read_os_release
from ..lib.net import default_route_interface, is_online, wireless_interfaces
from ..lib.pkg import command_exists
from ..models import PLATFORM_EXPECTED, PLATFORM_SAME_FAMILY, HostFacts
from ..pipeline import record_decision, record_warning

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


def prompt_yes_no(question: str) -> bool:
    """Interactive [y/N] gate; anything but y/yes (including EOF) declines."""

    try:
        reply = input(f"{question} [y/N] ")
    except EOFError:
        return False
    return reply.strip().lower() in {"y", "yes"}


class PreflightStep:
    step_id = "10_preflight"

    def __init__(self, confirm: Confirm = prompt_yes_no) -> None:
        self.confirm = confirm

    def _check_platform(self, cfg: InstallerConfig) -> tuple[str | None, str]:
        model = read_model(cfg.host_root)
        platform = classify_platform(model, expected=cfg.expected_model, family=cfg.model_family)
        if platform == PLATFORM_EXPECTED:
            logger.info("Detected %s", model)
            return model, platform

        if platform == PLATFORM_SAME_FAMILY:
            logger.warning("Detected %s (not %s) - some features may not work", model, cfg.expected_model)
        else:
            logger.warning("This doesn't appear to be a %s (model: %s)", cfg.model_family, model or "unknown")
        if not self.confirm("Continue anyway?"):
            raise UserAbortError("Installation aborted by operator")
        return model, platform

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg: InstallerConfig = state["config"]

        if not is_root():
            raise NotRootError("Please run as root: sudo mulecube-installer")

        model, platform = self._check_platform(cfg)

        osr = read_os_release(cfg.host_root)
        os_id = osr.get("ID")
        codename = osr.get("VERSION_CODENAME")
        pretty = osr.get("PRETTY_NAME")
        os_matches = os_id in cfg.os_ids and codename == cfg.os_codename
        if os_matches:
            logger.info("Detected %s", pretty or f"{os_id} {codename}")
        else:
            record_warning(
                state,
                f"Expected Raspberry Pi OS {cfg.os_codename.capitalize()}, found: {pretty or 'unknown OS'}",
            )

        logger.info("Checking internet connectivity...")
        if not is_online(cfg.probe_host):
            raise ConnectivityError("No internet connection. Please connect to the internet first.")
        logger.info("Internet connection OK")

        facts = HostFacts(
            model=model,
            platform=platform,
            os_id=os_id,
            os_codename=codename,
            os_pretty_name=pretty,
            os_matches=os_matches,
            has_default_route=default_route_interface() is not None,
            wireless_interfaces=tuple(wireless_interfaces()),
            has_container_runtime=command_exists("docker"),
        )
        state["facts"] = facts
        record_decision(state, "platform", platform)
        return state
