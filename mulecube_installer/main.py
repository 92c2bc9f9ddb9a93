from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Optional

from .config import load_config
from .errors import InstallerError
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import run_pipeline
from .steps import (
    CloneRepositoryStep,
    ConfigureAccessPointStep,
    ConfigureRoutingStep,
    EnableI2CStep,
    EnableServicesStep,
    InstallDockerStep,
    InstallPackagesStep,
    PreflightStep,
    SummaryStep,
    WriteHelperScriptsStep,
)
from .steps.step_10_preflight import Confirm, prompt_yes_no

logger = logging.getLogger(__name__)


def build_steps(confirm: Confirm = prompt_yes_no):
    return [
        PreflightStep(confirm=confirm),
        InstallPackagesStep(),
        InstallDockerStep(),
        CloneRepositoryStep(),
        ConfigureAccessPointStep(),
        ConfigureRoutingStep(),
        EnableI2CStep(),
        WriteHelperScriptsStep(),
        EnableServicesStep(),
        SummaryStep(),
    ]


def run(
    *,
    config_path: Optional[str] = None,
    log_path: Optional[str] = DEFAULT_LOG_PATH,
    confirm: Confirm = prompt_yes_no,
) -> Dict[str, Any]:
    """Run the provisioning pipeline once, top to bottom."""

    actual_log_path = configure_logging(log_path=log_path)
    logger.info("MuleCube Installer - your offline world in a cube")

    cfg = load_config(config_path)
    # Validated here so a bad plan is rejected before anything is written.
    plan = cfg.network_plan()

    state: Dict[str, Any] = {
        "config": cfg,
        "plan": plan,
        "execution": {
            "current_step": None,
            "warnings": [],
            "decisions": {},
            "log_path": actual_log_path,
        },
    }

    try:
        result = run_pipeline(state=state, steps=build_steps(confirm))
    except Exception:
        logger.debug(
            "Installer failed at step %s",
            (state.get("execution") or {}).get("current_step"),
            exc_info=True,
        )
        raise

    result.state.setdefault("execution", {})["ran_steps"] = result.ran_steps
    return result.state


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="mulecube-installer",
        description="Provision a Raspberry Pi into a MuleCube appliance.",
    )
    p.add_argument("--config", default=None, help="Installer config (YAML); default /etc/mulecube/installer.yaml if present")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")

    args = p.parse_args(argv)

    try:
        run(config_path=args.config, log_path=args.log)
    except InstallerError as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        # e.g. a read-only /etc while writing a config file
        logger.error("%s", e)
        return 1
    return 0
