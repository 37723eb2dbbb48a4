"""Orchestration of one checklist run against a pull request.

A run walks strictly through these states::

    START -> CONTEXT_VALIDATED -> CONFIG_LOADED -> FILES_FETCHED -> RULES_MATCHED
          -> CHECKLIST_RENDERED -> COMMENT_SYNCED -> STATUS_PUBLISHED -> DONE

and stops early, successfully, in ``NO_FILES`` when the pull request changes
nothing and in ``NO_RULES`` when no rule matches. Any error aborts the run;
a comment that was already written is left in place.
"""

import time
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from ..config import DEFAULT_MARKER, DEFAULT_STATUS_CONTEXT
from ..errors import ContextError
from ..models import ChecklistConfig, CommitState, RepoContext, TrackedComment
from ..utils import LoggerMixin
from .checklist import (
    DEFAULT_COMMENT_HEADER,
    generate_checklist_markdown,
    is_checklist_complete,
    parse_checklist_state,
)
from .config_loader import load_config
from .matcher import get_matching_rules

SUCCESS_DESCRIPTION = "All checklist items are completed"
FAILURE_DESCRIPTION = "Checklist items are still pending"


class RunState(str, Enum):
    """States of a reconciliation run."""

    START = "start"
    CONTEXT_VALIDATED = "context_validated"
    CONFIG_LOADED = "config_loaded"
    FILES_FETCHED = "files_fetched"
    RULES_MATCHED = "rules_matched"
    CHECKLIST_RENDERED = "checklist_rendered"
    COMMENT_SYNCED = "comment_synced"
    STATUS_PUBLISHED = "status_published"
    DONE = "done"
    NO_FILES = "no_files"
    NO_RULES = "no_rules"


class ChecklistApi(Protocol):
    """Remote operations the reconciler depends on."""

    def get_changed_files(self, owner: str, repo: str, pr_number: int) -> list[str]: ...

    def find_tracked_comment(self, owner: str, repo: str, pr_number: int, marker: str) -> TrackedComment | None: ...

    def create_comment(self, owner: str, repo: str, pr_number: int, body: str) -> TrackedComment: ...

    def update_comment(self, owner: str, repo: str, comment_id: int, body: str) -> TrackedComment: ...

    def get_head_sha(self, owner: str, repo: str, pr_number: int) -> str: ...

    def create_commit_status(
        self, owner: str, repo: str, sha: str, state: str, description: str, context: str,
    ) -> dict: ...


class ReconcilerOptions(BaseModel):
    """Boundary constants of a run."""

    model_config = ConfigDict(frozen=True)

    marker: str = DEFAULT_MARKER
    status_context: str = DEFAULT_STATUS_CONTEXT
    success_description: str = SUCCESS_DESCRIPTION
    failure_description: str = FAILURE_DESCRIPTION
    comment_header: str = DEFAULT_COMMENT_HEADER


class RunResult(BaseModel):
    """Outcome of a successful run."""

    state: RunState
    file_count: int = 0
    matched_rules: int = 0
    comment_id: int | None = None
    comment_created: bool = False
    body: str | None = None
    complete: bool | None = None


class Reconciler(LoggerMixin):
    """Keeps the tracked checklist comment and commit status of a PR up to date."""

    def __init__(
        self,
        api: ChecklistApi,
        config_loader: Callable[[str], ChecklistConfig] = load_config,
        options: ReconcilerOptions | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the reconciler.

        Args:
        ----
            api: Client performing the remote calls
            config_loader: Callable loading the rule configuration from a path
            options: Marker, status context and status messages
            clock: Monotonic clock used for the ``executionTime`` variable

        """
        self.api = api
        self.config_loader = config_loader
        self.options = options or ReconcilerOptions()
        self.clock = clock
        self.state = RunState.START

    def _advance(self, state: RunState) -> None:
        self.logger.debug("State %s -> %s", self.state.value, state.value)
        self.state = state

    @staticmethod
    def validate_context(context: RepoContext | None) -> tuple[str, str, int]:
        """Return ``(owner, repo, pr_number)`` or raise :class:`ContextError`."""
        if context is None:
            msg = "GitHub context not available. Make sure the action runs inside a GitHub repository."
            raise ContextError(msg)

        if not context.owner or not context.repo:
            msg = f'Repository context is incomplete: owner="{context.owner or ""}", repo="{context.repo or ""}"'
            raise ContextError(msg)

        pr_number = context.pr_number
        if pr_number is None:
            msg = (
                "Unable to determine the Pull Request number. "
                f'Event: "{context.event_name or "unknown"}". '
                "Make sure the workflow is triggered by pull_request events (opened, synchronize, edited, ...)."
            )
            raise ContextError(msg)

        if isinstance(pr_number, bool) or not isinstance(pr_number, int) or pr_number <= 0:
            msg = f"Invalid Pull Request number: {pr_number}. It must be a positive integer."
            raise ContextError(msg)

        return context.owner, context.repo, pr_number

    def run(self, context: RepoContext | None, config_path: str) -> RunResult:
        """Reconcile the checklist comment and commit status of one pull request.

        Args:
        ----
            context: Repository identity and PR number of the triggering event
            config_path: Path of the rule configuration file

        Returns:
        -------
            RunResult describing where the run stopped

        Raises:
        ------
            ContextError: If the repository or PR identity is missing or invalid
            ConfigError: If the configuration cannot be loaded
            RateLimitError: If GitHub's rate limit is exhausted
            NetworkError: If GitHub cannot be reached

        """
        self.state = RunState.START
        started = self.clock()
        marker = self.options.marker

        owner, repo, pr_number = self.validate_context(context)
        self._advance(RunState.CONTEXT_VALIDATED)
        self.logger.info("Input validated: repo=%s, PR=#%d, config=%s", context.full_name, pr_number, config_path)

        config = self.config_loader(config_path)
        self._advance(RunState.CONFIG_LOADED)

        changed_files = self.api.get_changed_files(owner, repo, pr_number)
        self._advance(RunState.FILES_FETCHED)
        if not changed_files:
            self.logger.info("No changed files found in the PR. No checklist generated.")
            self._advance(RunState.NO_FILES)
            return RunResult(state=self.state)

        self.logger.info("Changed files detected: %d", len(changed_files))
        self.logger.debug("Files: %s", ", ".join(changed_files))

        rules = get_matching_rules(changed_files, config.checklists)
        self._advance(RunState.RULES_MATCHED)
        if not rules:
            self.logger.info("No rules matched the changed files. No checklist required.")
            self._advance(RunState.NO_RULES)
            return RunResult(state=self.state, file_count=len(changed_files))

        self.logger.info("Matched rules: %d", len(rules))

        existing = self.api.find_tracked_comment(owner, repo, pr_number, marker)
        previous_state = parse_checklist_state(existing.body) if existing else {}
        if existing:
            self.logger.info("Found existing checklist comment %d (%d items tracked)", existing.id, len(previous_state))

        variables = {
            "fileCount": len(changed_files),
            "executionTime": f"{self.clock() - started:.2f}s",
            "comment_header": config.options.comment_header or self.options.comment_header,
        }
        markdown = generate_checklist_markdown(rules, previous_state, config.options.template, variables)
        body = f"{marker}\n{markdown}"
        self._advance(RunState.CHECKLIST_RENDERED)

        if existing:
            comment = self.api.update_comment(owner, repo, existing.id, body)
            self.logger.info("Checklist updated in the existing comment.")
        else:
            comment = self.api.create_comment(owner, repo, pr_number, body)
            self.logger.info("Checklist created as a new comment.")
        self._advance(RunState.COMMENT_SYNCED)

        complete = is_checklist_complete(body)
        state = CommitState.SUCCESS if complete else CommitState.FAILURE
        description = self.options.success_description if complete else self.options.failure_description
        sha = self.api.get_head_sha(owner, repo, pr_number)
        self.api.create_commit_status(owner, repo, sha, state.value, description, self.options.status_context)
        self._advance(RunState.STATUS_PUBLISHED)
        self.logger.info("Commit status set to %s on %s", state.value, sha)

        self._advance(RunState.DONE)
        return RunResult(
            state=self.state,
            file_count=len(changed_files),
            matched_rules=len(rules),
            comment_id=comment.id,
            comment_created=existing is None,
            body=body,
            complete=complete,
        )
