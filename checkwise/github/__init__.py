"""GitHub API access."""

from .client import GitHubAPIClient
from .retry import ErrorKind, classify_failure, paginate, safe_api_call

__all__ = [
    "ErrorKind",
    "GitHubAPIClient",
    "classify_failure",
    "paginate",
    "safe_api_call",
]
