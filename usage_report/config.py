from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple


def _default_product_groups() -> Dict[str, Tuple[str, ...]]:
    return {
        "actions": ("actions",),
        "shared_storage": ("git_lfs",),
        "copilot": ("copilot",),
        "codespaces": ("codespaces",),
    }


@dataclass(frozen=True)
class SessionSettings:
    default_value_mode: str = "cost"
    workflow_product: str = "actions"
    product_groups: Dict[str, Tuple[str, ...]] = field(default_factory=_default_product_groups)
