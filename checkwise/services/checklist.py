"""Checklist rendering and checkbox state extraction.

The checklist lives only in the PR comment body, so each run reads the
previous state back out of the markdown (:func:`parse_checklist_state`) and
feeds it into :func:`generate_checklist_markdown`. Items are keyed by their
trimmed text: renaming an item drops its checked state.
"""

import re
from typing import Any

from ..models import ChecklistItem, ChecklistRule, ChecklistState

NO_CHECKLIST_MESSAGE = "_No checklist required for the files changed in this PR._"
DEFAULT_COMMENT_HEADER = "## Automated Checklist"

SINGLE_RULE_TEMPLATE = "{{items}}"
MULTI_RULE_TEMPLATE = "**{{ruleTitle}}:**\n{{items}}"

_CHECKLIST_LINE_RE = re.compile(r"^- \[( |x|X)\] (.+)$", re.MULTILINE)
_VAR_RE = re.compile(r"\{\{\s*([a-zA-Z0-9_]+)\s*\}\}")


def parse_checklist_items(markdown: str | None) -> list[ChecklistItem]:
    """Extract every checkbox line from ``markdown`` in document order."""
    if not markdown:
        return []
    return [
        ChecklistItem(text=match.group(2).strip(), checked=match.group(1) in "xX")
        for match in _CHECKLIST_LINE_RE.finditer(markdown)
    ]


def parse_checklist_state(markdown: str | None) -> ChecklistState:
    """Return the item text to checked mapping found in ``markdown``.

    Only lines of the exact form ``- [ ] text``, ``- [x] text`` or
    ``- [X] text`` count. When the same text appears more than once the
    last occurrence wins. Never raises.
    """
    return {item.text: item.checked for item in parse_checklist_items(markdown)}


def is_checklist_complete(markdown: str | None) -> bool:
    """True when ``markdown`` holds at least one item and every item is checked."""
    state = parse_checklist_state(markdown)
    return bool(state) and all(state.values())


def render_template_text(text: str, context: dict[str, Any]) -> str:
    """Replace ``{{name}}`` placeholders; unknown or empty names become ``""``."""

    def _replace(match: re.Match) -> str:
        value = context.get(match.group(1))
        return "" if value is None else str(value)

    return _VAR_RE.sub(_replace, text)


def render_items(rule: ChecklistRule, previous_state: ChecklistState | None = None) -> str:
    """Render the checkbox lines of ``rule`` honouring previously checked items.

    Items are written as configured and looked up by their trimmed text.
    """
    previous_state = previous_state or {}
    return "\n".join(
        ChecklistItem(text=item, checked=previous_state.get(item.strip()) is True).to_markdown()
        for item in rule.require
    )


def references_variable(template: str, name: str) -> bool:
    """True when ``template`` contains a ``{{name}}`` placeholder."""
    return any(match.group(1) == name for match in _VAR_RE.finditer(template))


def generate_checklist_markdown(
    rules: list[ChecklistRule],
    previous_state: ChecklistState | None = None,
    global_template: str | None = None,
    variables: dict[str, Any] | None = None,
) -> str:
    """Generate the markdown checklist for the matched rules.

    Each rule is rendered with its own ``template``, else ``global_template``,
    else the built-in layout (a ``**Rule #N:**`` heading only when several
    rules matched, then one checkbox per required item). Templates may use
    ``{{items}}``, ``{{ruleTitle}}``, ``{{index}}``, ``{{fileCount}}``,
    ``{{ruleCount}}``, ``{{executionTime}}`` and ``{{comment_header}}``.

    Without a global template, a ``comment_header`` variable is rendered as the
    first line of the checklist, unless a rule template already places it.

    Args:
    ----
        rules: Matched rules in priority order
        previous_state: Checked state parsed from the previous comment
        global_template: Template used by rules without their own
        variables: ``fileCount``, ``executionTime`` and ``comment_header`` values

    Returns:
    -------
        Markdown string ready to be inserted in a PR comment

    """
    if not rules:
        return NO_CHECKLIST_MESSAGE

    variables = variables or {}
    rule_count = len(rules)
    default_template = MULTI_RULE_TEMPLATE if rule_count > 1 else SINGLE_RULE_TEMPLATE

    blocks = []
    header_placed = False
    for index, rule in enumerate(rules, start=1):
        template = rule.template or global_template or default_template
        header_placed = header_placed or references_variable(template, "comment_header")
        context = {
            "fileCount": variables.get("fileCount"),
            "executionTime": variables.get("executionTime"),
            "comment_header": variables.get("comment_header"),
            "ruleCount": rule_count,
            "index": index,
            "ruleTitle": f"Rule #{index}",
            "items": render_items(rule, previous_state),
        }
        blocks.append(render_template_text(template, context).rstrip())

    markdown = "\n\n".join(blocks)
    header = variables.get("comment_header")
    if header and not global_template and not header_placed:
        markdown = f"{header}\n\n{markdown}"
    return markdown.rstrip()
