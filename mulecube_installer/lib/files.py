"""Idempotent "ensure desired content" writes against a host root.

All paths are host-absolute ("/etc/modules") and resolved under `root`, so
the same code provisions a live system (root="/") or a scratch tree.
Every helper returns True when it changed the file.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Optional

from ..models import ConfigArtifact

logger = logging.getLogger(__name__)


def host_path(root: str, path: str) -> Path:
    return Path(root) / path.lstrip("/")


def read_text(root: str, path: str) -> Optional[str]:
    p = host_path(root, path)
    if not p.exists():
        return None
    return p.read_text(encoding="utf-8")


def _write(p: Path, content: str, mode: Optional[int] = None) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")
    if mode is not None:
        os.chmod(p, mode)


def write_artifact(root: str, artifact: ConfigArtifact) -> bool:
    p = host_path(root, artifact.path)
    changed = read_text(root, artifact.path) != artifact.content
    if changed:
        _write(p, artifact.content, artifact.mode)
        logger.debug("Wrote %s", p)
    elif (p.stat().st_mode & 0o777) != artifact.mode:
        os.chmod(p, artifact.mode)
    return changed


def ensure_line(root: str, path: str, line: str) -> bool:
    """Append `line` unless a line with identical content is already present."""

    current = read_text(root, path) or ""
    if line in (ln.strip() for ln in current.splitlines()):
        return False
    if current and not current.endswith("\n"):
        current += "\n"
    _write(host_path(root, path), current + line + "\n")
    logger.debug("Appended %r to %s", line, path)
    return True


def append_block_once(root: str, path: str, block: str, marker: str) -> bool:
    """Append `block` unless `marker` already occurs in the file."""

    current = read_text(root, path) or ""
    if marker in current:
        return False
    if current and not current.endswith("\n"):
        current += "\n"
    _write(host_path(root, path), current + block)
    logger.debug("Appended block %r to %s", marker, path)
    return True


def set_assignment(root: str, path: str, key: str, line: str) -> bool:
    """Make `line` the only `KEY=` assignment in a shell-style defaults file.

    Existing assignments, commented out or not, are replaced in place (first
    occurrence kept, later ones dropped); other lines are preserved. Without
    any assignment the line is appended.
    """

    pattern = re.compile(rf"^\s*#?\s*{re.escape(key)}=")
    current = read_text(root, path) or ""

    out: list[str] = []
    placed = False
    for ln in current.splitlines():
        if pattern.match(ln):
            if not placed:
                out.append(line)
                placed = True
            continue
        out.append(ln)
    if not placed:
        out.append(line)

    desired = "\n".join(out) + "\n"
    if desired == current:
        return False
    _write(host_path(root, path), desired)
    logger.debug("Set %s in %s", key, path)
    return True
