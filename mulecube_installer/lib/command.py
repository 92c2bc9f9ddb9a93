from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

from ..errors import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command (cwd included when set).
    - Captures stdout/stderr; both go to the log at DEBUG.
    - check=True raises CommandError on a non-zero exit.
    """

    argv_list = list(argv)
    if cwd:
        logger.debug("CMD (cwd=%s) %s", cwd, _fmt_argv(argv_list))
    else:
        logger.debug("CMD %s", _fmt_argv(argv_list))

    p = subprocess.run(
        argv_list,
        text=True,
        errors="replace",
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=cwd,
        env=dict(os.environ, **(env or {})),
    )

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if check and p.returncode != 0:
        raise CommandError(argv_list, p.returncode, p.stderr or "")

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout or "", stderr=p.stderr or "")


def try_cmd(argv: Sequence[str], **kwargs) -> CmdResult | None:
    """Best-effort variant: a missing binary or non-zero exit is not fatal.

    Returns None when the executable itself could not be started.
    """

    try:
        return run_cmd(argv, check=False, **kwargs)
    except OSError as e:
        logger.debug("Command unavailable: %s (%s)", _fmt_argv(list(argv)), e)
        return None
