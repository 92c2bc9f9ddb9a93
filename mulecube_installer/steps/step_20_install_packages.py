from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import InstallerConfig
from ..lib.pkg import apt_install, apt_update

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "20_install_packages"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg: InstallerConfig = state["config"]

        logger.info("Installing system dependencies...")
        apt_update()
        apt_install(cfg.packages)
        logger.info("Dependencies installed")
        return state
