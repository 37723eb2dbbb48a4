"""Command line entry point for running Checkwise inside a GitHub Actions workflow."""

import json
import sys
from typing import Any

from checkwise.config import DEFAULT_CONFIG_PATH, Settings, get_settings
from checkwise.errors import ConfigError, ContextError
from checkwise.github.client import GitHubAPIClient
from checkwise.models import RepoContext
from checkwise.services.reconciler import Reconciler, ReconcilerOptions
from checkwise.utils import get_logger

logger = get_logger(__name__)

TOKEN_PREFIXES = ("ghp_", "ghs_", "github_pat_")

ERROR_HINTS = (
    ("pull request", "Hint: make sure the workflow is triggered by pull_request events"),
    ("token", "Hint: check that the GitHub token is configured correctly"),
    ("config", "Hint: check that the configuration file exists and is valid"),
)


def validate_inputs(settings: Settings) -> tuple[str, str]:
    """Validate and normalize the action inputs.

    Args:
    ----
        settings: Application settings

    Returns:
    -------
        Tuple of (token, config_path)

    Raises:
    ------
        ContextError: If the token is missing
        ConfigError: If the config path is unsafe

    """
    token = (settings.github_token or "").strip()
    if not token:
        msg = 'Input "github-token" is required and cannot be empty'
        raise ContextError(msg)
    if not token.startswith(TOKEN_PREFIXES):
        logger.warning("Unexpected GitHub token format. Make sure a valid token is used.")

    config_path = (settings.checkwise_config_path or "").strip()
    if not config_path:
        config_path = DEFAULT_CONFIG_PATH
        logger.info("No config path given, using default: %s", config_path)

    if ".." in config_path or config_path.startswith("/"):
        msg = f'Unsafe config path: "{config_path}". Use a relative path without "..".'
        raise ConfigError(msg)
    if not config_path.endswith((".yml", ".yaml")):
        logger.warning('Config path "%s" does not end with .yml/.yaml. Make sure it is a YAML file.', config_path)

    return token, config_path


def _read_event_payload(event_path: str) -> dict[str, Any]:
    if not event_path:
        return {}
    try:
        with open(event_path, encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Unable to read event payload %s: %s", event_path, e)
        return {}
    return payload if isinstance(payload, dict) else {}


def load_event_context(settings: Settings) -> RepoContext:
    """Build the repository context from the workflow environment.

    Missing values are left as ``None``; the reconciler rejects them.
    """
    owner, _, repo = (settings.github_repository or "").partition("/")
    payload = _read_event_payload(settings.github_event_path)

    # pull_request events, then issue_comment events on a PR, then a bare number
    number = None
    for key in ("pull_request", "issue"):
        section = payload.get(key)
        if isinstance(section, dict) and section.get("number") is not None:
            number = section["number"]
            break
    if number is None:
        number = payload.get("number")
    if number is not None and (isinstance(number, bool) or not isinstance(number, int)):
        logger.warning("Ignoring non-integer pull request number in event payload: %r", number)
        number = None

    return RepoContext(
        owner=owner or None,
        repo=repo or None,
        pr_number=number,
        event_name=settings.github_event_name or None,
    )


def format_error_hints(message: str) -> list[str]:
    """Return the hints whose keyword appears in ``message``."""
    lowered = message.lower()
    return [hint for keyword, hint in ERROR_HINTS if keyword in lowered]


def run(settings: Settings | None = None, client: GitHubAPIClient | None = None) -> int:
    """Run Checkwise once and return the process exit code."""
    settings = settings or get_settings()
    context = None
    try:
        token, config_path = validate_inputs(settings)
        context = load_event_context(settings)
        client = client or GitHubAPIClient(
            token,
            base_url=settings.github_api_url,
            retries=settings.max_github_retries,
            retry_delay=settings.github_retry_delay,
            timeout=settings.github_request_timeout,
        )
        reconciler = Reconciler(
            client,
            options=ReconcilerOptions(marker=settings.checkwise_marker, status_context=settings.checkwise_status_context),
        )
        result = reconciler.run(context, config_path)
    except Exception as e:
        message = str(e) or "Unknown error"
        logger.error("Checkwise failed: %s", message)
        logger.debug("Context: %s", context.model_dump() if context else None, exc_info=True)
        for hint in format_error_hints(message):
            logger.error(hint)
        return 1

    logger.info("Checkwise finished in state %s", result.state.value)
    return 0


def main() -> None:
    """Console script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
