from __future__ import annotations

import logging
import os
import shlex
from typing import Dict, Optional

from ..models import PLATFORM_EXPECTED, PLATFORM_SAME_FAMILY, PLATFORM_UNRECOGNIZED
from .files import read_text

logger = logging.getLogger(__name__)


def is_root() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() == 0


def _safe_read(root: str, path: str) -> Optional[str]:
    try:
        return read_text(root, path)
    except (OSError, UnicodeDecodeError):
        return None


def read_model(root: str = "/") -> Optional[str]:
    """Board model string.

    The device tree is the most reliable signal on SBCs; /proc/cpuinfo's
    "Model" line is the fallback.
    """

    for path in ("/proc/device-tree/model", "/sys/firmware/devicetree/base/model"):
        txt = _safe_read(root, path)
        if txt:
            model = txt.replace("\x00", "").strip()
            if model:
                return model

    cpuinfo = _safe_read(root, "/proc/cpuinfo") or ""
    for line in cpuinfo.splitlines():
        key, sep, value = line.partition(":")
        if sep and key.strip().lower() == "model" and value.strip():
            return value.strip()
    return None


def classify_platform(model: Optional[str], *, expected: str, family: str) -> str:
    m = (model or "").lower()
    if expected.lower() in m:
        return PLATFORM_EXPECTED
    if family.lower() in m:
        return PLATFORM_SAME_FAMILY
    return PLATFORM_UNRECOGNIZED


def read_os_release(root: str = "/") -> Dict[str, str]:
    txt = _safe_read(root, "/etc/os-release") or _safe_read(root, "/usr/lib/os-release") or ""
    out: Dict[str, str] = {}
    for line in txt.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        try:
            parts = shlex.split(value)
        except ValueError:
            parts = [value.strip("\"'")]
        out[key.strip()] = parts[0] if parts else ""
    return out
