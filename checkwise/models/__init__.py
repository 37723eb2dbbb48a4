"""
Data models for Checkwise
"""

from .checklist import ChecklistItem, ChecklistState
from .pull_request import CommitState, RepoContext, TrackedComment
from .rule import DEFAULT_PRIORITY, ChecklistConfig, ChecklistOptions, ChecklistRule

__all__ = [
    "DEFAULT_PRIORITY",
    "ChecklistItem",
    "ChecklistState",
    "ChecklistConfig",
    "ChecklistOptions",
    "ChecklistRule",
    "CommitState",
    "RepoContext",
    "TrackedComment",
]
