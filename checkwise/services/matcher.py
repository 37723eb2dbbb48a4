"""Rule matching against the files changed in a pull request."""

from ..models import ChecklistRule
from ..utils.globs import filter_paths


def get_matching_rules(changed_files: list[str], rules: list[ChecklistRule]) -> list[ChecklistRule]:
    """Return the rules whose patterns select at least one changed file.

    Negated patterns of a rule only remove files from that rule's own
    selection. The result is sorted by priority, lowest first; rules without a
    priority sort as 1000 and equal priorities keep their configuration order.

    Args:
    ----
        changed_files: Repository-relative paths changed in the pull request
        rules: Rules in configuration order

    Returns:
    -------
        Matching rules ordered by priority

    """
    if not changed_files:
        return []

    matched = [rule for rule in rules if filter_paths(changed_files, rule.when)]
    # sorted() is stable, so configuration order breaks ties
    return sorted(matched, key=lambda rule: rule.effective_priority)
