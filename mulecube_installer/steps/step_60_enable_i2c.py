from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import InstallerConfig
from ..lib.command import try_cmd
from ..lib.files import ensure_line, host_path
from ..pipeline import record_warning
from ..render import I2C_BOOT_LINE, I2C_MODULE, MODULES_FILE

logger = logging.getLogger(__name__)


class EnableI2CStep:
    step_id = "60_enable_i2c"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg: InstallerConfig = state["config"]
        root = cfg.host_root

        logger.info("Enabling I2C for hardware monitoring...")

        if host_path(root, cfg.boot_config).is_file():
            ensure_line(root, cfg.boot_config, I2C_BOOT_LINE)
        else:
            record_warning(state, f"{cfg.boot_config} not found; I2C not enabled in boot config")

        try_cmd(["modprobe", I2C_MODULE])
        ensure_line(root, MODULES_FILE, I2C_MODULE)

        logger.info("I2C enabled")
        return state
