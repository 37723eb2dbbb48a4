"""Checklist services."""

from .checklist import (
    generate_checklist_markdown,
    is_checklist_complete,
    parse_checklist_state,
)
from .config_loader import load_config, parse_config
from .matcher import get_matching_rules
from .reconciler import Reconciler, ReconcilerOptions, RunResult, RunState

__all__ = [
    "Reconciler",
    "ReconcilerOptions",
    "RunResult",
    "RunState",
    "generate_checklist_markdown",
    "get_matching_rules",
    "is_checklist_complete",
    "load_config",
    "parse_checklist_state",
    "parse_config",
]
