"""MuleCube installer (Python-first, step-driven).

Core design goals:
- Idempotent steps: re-running converges to the same host state
- Fail-fast while provisioning, failure-isolated while running stacks
- Host files addressed through a configurable root (testable end state)
- Centralized logging
"""

__all__ = []
