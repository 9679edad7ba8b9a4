from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RunMode(str, Enum):
    DRY_RUN = "dry-run"
    OBSERVER = "observer"
    ACTIVE = "active"


@dataclass(frozen=True)
class MutationPolicy:
    mode: RunMode
    github_write_allowed: bool

    @property
    def allow_github_mutations(self) -> bool:
        if self.mode != RunMode.ACTIVE:
            return False
        return self.github_write_allowed


def mutation_skip_reason(policy: MutationPolicy, allowed: bool) -> str | None:
    """Return a log-friendly reason when a mutation must not be executed."""
    if policy.mode == RunMode.DRY_RUN:
        return "skipped (dry-run)"
    if policy.mode == RunMode.OBSERVER:
        return "skipped (observer)"
    if not allowed:
        return "skipped (write disabled)"
    return None
