from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Sequence

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]


def record_warning(state: Dict[str, Any], message: str) -> None:
    """Log a warning and keep it for the final summary."""

    logger.warning("%s", message)
    warnings = state.setdefault("execution", {}).setdefault("warnings", [])
    if message not in warnings:
        warnings.append(message)


def record_decision(state: Dict[str, Any], key: str, value: Any) -> None:
    state.setdefault("execution", {}).setdefault("decisions", {})[key] = value


def run_pipeline(*, state: Dict[str, Any], steps: Sequence[Step]) -> PipelineResult:
    """Run every step once, in order.

    Fail-fast: the first exception propagates and no later step runs. There
    is no resume or rollback; re-running the whole pipeline is the recovery
    path, which is safe because every step converges.
    """

    ran: List[str] = []

    for step in steps:
        state.setdefault("execution", {})["current_step"] = step.step_id
        logger.debug("Running step %s", step.step_id)
        state = step.run(state)
        ran.append(step.step_id)

    state.setdefault("execution", {})["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran)
