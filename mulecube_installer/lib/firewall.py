from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .command import run_cmd

logger = logging.getLogger(__name__)

# (table, chain, rule spec)
Rule = Tuple[Optional[str], str, Tuple[str, ...]]


def nat_rules(*, uplink: str, wireless: str) -> List[Rule]:
    return [
        ("nat", "POSTROUTING", ("-o", uplink, "-j", "MASQUERADE")),
        (
            None,
            "FORWARD",
            ("-i", uplink, "-o", wireless, "-m", "state", "--state", "RELATED,ESTABLISHED", "-j", "ACCEPT"),
        ),
        (None, "FORWARD", ("-i", wireless, "-o", uplink, "-j", "ACCEPT")),
    ]


def _table_args(table: Optional[str]) -> List[str]:
    return ["-t", table] if table else []


def rule_exists(rule: Rule) -> bool:
    table, chain, spec = rule
    r = run_cmd(["iptables", *_table_args(table), "-C", chain, *spec], check=False)
    return r.ok


def ensure_rule(rule: Rule) -> bool:
    """Append the rule unless `iptables -C` finds it already."""

    if rule_exists(rule):
        return False
    table, chain, spec = rule
    run_cmd(["iptables", *_table_args(table), "-A", chain, *spec])
    logger.info("Added iptables rule: %s %s", chain, " ".join(spec))
    return True


def save_rules() -> None:
    run_cmd(["netfilter-persistent", "save"])
