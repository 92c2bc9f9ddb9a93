from __future__ import annotations

import logging
import sys
from typing import Any, Dict

from ..config import InstallerConfig
from ..render import render_summary

logger = logging.getLogger(__name__)


class SummaryStep:
    step_id = "90_summary"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg: InstallerConfig = state["config"]
        exe = state.get("execution") or {}

        logger.debug("Finalize summary: %s", exe.get("decisions") or {})
        sys.stdout.write(
            render_summary(
                install_dir=cfg.install_dir,
                plan=state["plan"],
                warnings=exe.get("warnings") or [],
            )
        )
        sys.stdout.flush()
        return state
