from __future__ import annotations

import logging
import sys
from typing import Any, Dict, List, Optional

from ..config import InstallerConfig
from ..lib.files import write_artifact
from ..models import ConfigArtifact
from ..render import render_launcher

logger = logging.getLogger(__name__)

HELPERS = ("start-all", "stop-all", "status")


def helper_scripts(
    *,
    install_dir: str,
    dashboard_url: str,
    interpreter: Optional[str] = None,
) -> List[ConfigArtifact]:
    scripts_dir = f"{install_dir.rstrip('/')}/scripts"
    argv = ["--root", install_dir, "--dashboard-url", dashboard_url]
    return [
        render_launcher(
            interpreter=interpreter or sys.executable,
            scripts_dir=scripts_dir,
            name=name,
            argv=argv,
        )
        for name in HELPERS
    ]


def write_helper_scripts(root: str, *, install_dir: str, dashboard_url: str) -> List[str]:
    written = []
    for artifact in helper_scripts(install_dir=install_dir, dashboard_url=dashboard_url):
        write_artifact(root, artifact)
        written.append(artifact.path)
    return written


class WriteHelperScriptsStep:
    step_id = "70_write_helper_scripts"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg: InstallerConfig = state["config"]

        logger.info("Creating helper scripts...")
        paths = write_helper_scripts(
            cfg.host_root,
            install_dir=cfg.install_dir,
            dashboard_url=f"http://{state['plan'].ap_ip}",
        )
        state.setdefault("execution", {})["helper_scripts"] = paths
        logger.info("Helper scripts created: %s", ", ".join(paths))
        return state
