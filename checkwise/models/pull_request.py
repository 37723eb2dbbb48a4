"""Pull request side data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class TrackedComment(BaseModel):
    """The single bot-owned PR comment, located via the marker."""

    model_config = ConfigDict(frozen=True)

    id: int
    body: str

    @classmethod
    def from_github_data(cls, comment_data: dict) -> "TrackedComment":
        """Create from a GitHub issue comment payload."""
        return cls(id=comment_data["id"], body=comment_data.get("body") or "")


class RepoContext(BaseModel):
    """Repository identity and pull request number of the triggering event."""

    owner: str | None = None
    repo: str | None = None
    pr_number: int | None = None
    event_name: str | None = None

    @property
    def full_name(self) -> str:
        """Return ``owner/repo``."""
        return f"{self.owner}/{self.repo}"


class CommitState(str, Enum):
    """Commit status states published by Checkwise."""

    SUCCESS = "success"
    FAILURE = "failure"
