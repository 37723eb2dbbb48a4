"""Loading and validation of the YAML rule configuration.

Example configuration::

    checklists:
      - when: ["src/**/*.py"]
        require: ["Tests updated", "Changelog entry added"]
        priority: 1
      - when: ["infra/**", "!infra/**/*.md"]
        require: ["terraform plan reviewed"]
        template: "### Infrastructure\\n{{items}}"
    options:
      comment_header: "## Review checklist"
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..config import DEFAULT_CONFIG_PATH
from ..errors import ConfigError
from ..models import ChecklistConfig
from ..utils import get_logger

logger = get_logger(__name__)

CONFIG_EXAMPLE = 'checklists:\n  - when: ["src/**/*.ts"]\n    require: ["Tests passing"]'


def _type_name(value: Any) -> str:  # noqa: ANN401
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _format_loc(loc: tuple) -> str:
    """Render a pydantic location such as ``('when', 0)`` as ``when[0]``."""
    out = ""
    for part in loc:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else str(part)
    return out


def _describe_error(error: dict[str, Any], path: str) -> str:
    """Turn one pydantic error into a message naming the file and rule."""
    loc = tuple(error["loc"])
    if len(loc) >= 2 and loc[0] == "checklists" and isinstance(loc[1], int):
        context = f'Checklist rule #{loc[1] + 1} in "{path}"'
        loc = loc[2:]
    else:
        context = f'Config YAML in "{path}"'

    field = _format_loc(loc)
    where = f'{context}: "{field}"' if field else context
    if error["type"] == "missing":
        msg = f"{where} is missing."
        if loc == ("checklists",):
            msg += f" Example:\n{CONFIG_EXAMPLE}"
        return msg
    return f"{where}: {error['msg']}. Found: {_type_name(error['input'])}"


def parse_config(raw: Any, path: str = DEFAULT_CONFIG_PATH) -> ChecklistConfig:  # noqa: ANN401
    """Validate an already-parsed YAML document.

    Args:
    ----
        raw: Result of ``yaml.safe_load``
        path: Source path, used in error messages

    Returns:
    -------
        ChecklistConfig: Validated configuration

    Raises:
    ------
        ConfigError: If the document does not describe a valid configuration,
            with one line per problem

    """
    if not raw or not isinstance(raw, dict):
        msg = f'Empty or invalid YAML config in "{path}". The file must contain a YAML object.'
        raise ConfigError(msg)

    if raw.get("options") is None:
        raw = {**raw, "options": {}}

    try:
        return ChecklistConfig.model_validate(raw)
    except ValidationError as e:
        msg = "\n".join(_describe_error(error, path) for error in e.errors())
        raise ConfigError(msg) from e


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> ChecklistConfig:
    """Read and validate the rule configuration file.

    Args:
    ----
        path: Path of the YAML file

    Returns:
    -------
        ChecklistConfig: Validated configuration

    Raises:
    ------
        ConfigError: If the file cannot be read, parsed or validated

    """
    path = str(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        msg = f'Unable to read config YAML "{path}": {e}'
        raise ConfigError(msg) from e

    config = parse_config(raw, path)
    logger.debug("Loaded %d checklist rules from %s", len(config.checklists), path)
    return config
