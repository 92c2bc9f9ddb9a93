from __future__ import annotations

import logging
import shutil
from datetime import datetime
from typing import Any, Dict

from ..config import InstallerConfig
from ..errors import CommandError, InstallError
from ..lib.command import run_cmd
from ..lib.files import host_path
from ..pipeline import record_decision, record_warning

logger = logging.getLogger(__name__)


class CloneRepositoryStep:
    step_id = "40_clone_repository"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg: InstallerConfig = state["config"]
        target = host_path(cfg.host_root, cfg.install_dir)

        logger.info("Setting up MuleCube repository...")
        try:
            if (target / ".git").is_dir():
                logger.info("Repository exists, pulling updates...")
                run_cmd(["git", "pull"], cwd=str(target))
                record_decision(state, "repository", "pulled")
            else:
                if target.is_dir() and any(target.iterdir()):
                    backup = target.with_name(f"{target.name}.backup.{datetime.now():%Y%m%d%H%M%S}")
                    record_warning(state, f"{cfg.install_dir} is not empty. Moved it to {backup.name}")
                    shutil.move(str(target), str(backup))
                target.parent.mkdir(parents=True, exist_ok=True)
                run_cmd(["git", "clone", cfg.repo_url, str(target)])
                record_decision(state, "repository", "cloned")
        except (CommandError, OSError) as e:
            raise InstallError(f"Repository setup failed: {e}") from e

        logger.info("Repository ready at %s", cfg.install_dir)
        return state
