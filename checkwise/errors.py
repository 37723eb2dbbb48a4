"""Error types raised while reconciling a pull request checklist."""


class CheckwiseError(Exception):
    """Base class for every error raised by Checkwise."""


class ContextError(CheckwiseError):
    """Repository or pull request identity is missing or invalid."""


class ConfigError(CheckwiseError):
    """The rule configuration could not be read or is invalid."""


class RateLimitError(CheckwiseError):
    """GitHub refused the request because the rate limit was exhausted."""


class NetworkError(CheckwiseError):
    """GitHub could not be reached after every retry was used."""


class RenderError(CheckwiseError):
    """The checklist could not be rendered."""
