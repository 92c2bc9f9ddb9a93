from __future__ import annotations

import logging
import os
import tempfile
from typing import Any, Dict

from ..config import InstallerConfig
from ..errors import CommandError, InstallError
from ..lib.command import run_cmd, try_cmd
from ..lib.pkg import apt_install, command_exists
from ..lib.systemd import systemctl
from ..pipeline import record_decision

logger = logging.getLogger(__name__)

DOCKER_BOOTSTRAP_URL = "https://get.docker.com"


def _docker_version() -> str:
    r = try_cmd(["docker", "--version"])
    return r.stdout.strip() if r is not None and r.ok else "unknown"


def _bootstrap_docker(user: str) -> None:
    fd, script = tempfile.mkstemp(prefix="get-docker-", suffix=".sh")
    os.close(fd)
    try:
        run_cmd(["curl", "-fsSL", "-o", script, DOCKER_BOOTSTRAP_URL])
        run_cmd(["sh", script])
    except (CommandError, OSError) as e:
        raise InstallError(f"Docker installation failed: {e}") from e
    finally:
        os.unlink(script)

    # Operator account may not exist on every image.
    try_cmd(["usermod", "-aG", "docker", user])


class InstallDockerStep:
    step_id = "30_install_docker"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg: InstallerConfig = state["config"]

        if command_exists("docker"):
            logger.info("Docker already installed: %s", _docker_version())
            record_decision(state, "docker_installed", False)
        else:
            logger.info("Installing Docker...")
            _bootstrap_docker(cfg.docker_user)
            logger.info("Docker installed")
            record_decision(state, "docker_installed", True)

        # Activation is unconditional, even when the daemon already runs.
        try:
            systemctl("enable", "docker")
            systemctl("start", "docker")
        except CommandError as e:
            raise InstallError(f"Could not activate docker: {e}") from e

        probe = try_cmd(["docker", "compose", "version"])
        if probe is None or not probe.ok:
            logger.info("Installing Docker Compose plugin...")
            apt_install(["docker-compose-plugin"])

        r = try_cmd(["docker", "compose", "version", "--short"])
        logger.info("Docker Compose ready: %s", r.stdout.strip() if r is not None and r.ok else "unknown")
        return state
