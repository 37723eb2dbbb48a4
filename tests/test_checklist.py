"""Unit tests for checklist rendering and state extraction."""

from checkwise.models import ChecklistRule
from checkwise.services.checklist import (
    NO_CHECKLIST_MESSAGE,
    generate_checklist_markdown,
    is_checklist_complete,
    parse_checklist_items,
    parse_checklist_state,
    render_template_text,
)


class TestParseChecklistState:
    """Test checkbox state extraction."""

    def test_parses_checked_and_unchecked(self) -> None:
        """Test all three checkbox markers."""
        markdown = "- [ ] A\n- [x] B\n- [X] C"

        assert parse_checklist_state(markdown) == {"A": False, "B": True, "C": True}

    def test_ignores_other_lines(self) -> None:
        """Test that non-checkbox lines are skipped."""
        markdown = (
            "<!-- checkwise-marker -->\n"
            "## Automated Checklist\n"
            "**Rule #1:**\n"
            "  - [x] indented\n"
            "* [x] star bullet\n"
            "- [y] unknown marker\n"
            "-[x] no space\n"
            "- [ ] Real item\n"
        )

        assert parse_checklist_state(markdown) == {"Real item": False}

    def test_last_duplicate_wins(self) -> None:
        """Test that later occurrences overwrite earlier ones."""
        markdown = "- [x] Same\n- [ ] Other\n- [ ] Same"

        assert parse_checklist_state(markdown) == {"Same": False, "Other": False}

    def test_trims_item_text(self) -> None:
        """Test that item text is trimmed."""
        assert parse_checklist_state("- [x]   Padded item   \r\n") == {"Padded item": True}

    def test_empty_and_none_input(self) -> None:
        """Test that empty input yields an empty state."""
        assert parse_checklist_state("") == {}
        assert parse_checklist_state(None) == {}
        assert parse_checklist_items("no checklist here") == []


class TestIsChecklistComplete:
    """Test the completion verdict."""

    def test_no_items_is_not_complete(self) -> None:
        """Test that an empty checklist is not complete."""
        assert is_checklist_complete("<!-- m -->\nnothing") is False

    def test_all_checked_is_complete(self) -> None:
        """Test that all checked items complete the checklist."""
        assert is_checklist_complete("- [x] A\n- [X] B") is True

    def test_single_unchecked_is_not_complete(self) -> None:
        """Test that one unchecked item blocks completion."""
        assert is_checklist_complete("- [x] A\n- [ ] B\n- [x] C") is False


class TestRenderTemplateText:
    """Test placeholder substitution."""

    def test_known_and_unknown_placeholders(self) -> None:
        """Test that unknown placeholders become empty strings."""
        text = render_template_text("{{ a }}-{{bogus}}-{{b}}", {"a": 1, "b": None})

        assert text == "1--"


class TestGenerateChecklistMarkdown:
    """Test checklist rendering."""

    def test_empty_rules_returns_sentinel(self) -> None:
        """Test the no checklist message."""
        assert generate_checklist_markdown([]) == NO_CHECKLIST_MESSAGE

    def test_single_rule_without_heading(self) -> None:
        """Test rendering of a single rule."""
        rules = [ChecklistRule(when=["src/**/*.ts"], require=["Test coverage > 90%", "Lint passed"])]

        md = generate_checklist_markdown(rules)

        assert md == "- [ ] Test coverage > 90%\n- [ ] Lint passed"
        assert "Rule #" not in md

    def test_multiple_rules_with_headings(self) -> None:
        """Test rendering of several rules."""
        rules = [
            ChecklistRule(when=["src/**/*.ts"], require=["Test coverage > 90%"]),
            ChecklistRule(when=["infra/**"], require=["Run terraform plan"]),
        ]

        md = generate_checklist_markdown(rules)

        assert md == (
            "**Rule #1:**\n- [ ] Test coverage > 90%\n"
            "\n"
            "**Rule #2:**\n- [ ] Run terraform plan"
        )

    def test_preserves_previous_state(self) -> None:
        """Test that checked items stay checked."""
        rules = [ChecklistRule(when=["**"], require=["A", "B"])]

        md = generate_checklist_markdown(rules, {"A": True, "B": False, "Gone": True})

        assert md == "- [x] A\n- [ ] B"

    def test_state_round_trip(self) -> None:
        """Test render, check an item, parse and render again."""
        rules = [ChecklistRule(when=["**"], require=["A", "B"])]
        first = generate_checklist_markdown(rules)
        edited = first.replace("- [ ] A", "- [x] A")

        second = generate_checklist_markdown(rules, parse_checklist_state(edited))

        assert "- [x] A" in second
        assert "- [ ] B" in second

    def test_renamed_item_loses_state(self) -> None:
        """Test that item identity is its exact text."""
        rules = [ChecklistRule(when=["**"], require=["Tests added"])]

        md = generate_checklist_markdown(rules, {"Tests  added": True})

        assert md == "- [ ] Tests added"

    def test_rule_template(self) -> None:
        """Test that a rule template is applied."""
        rules = [ChecklistRule(when=["**"], require=["A", "B"], template="### Custom Rule\n{{items}}")]

        md = generate_checklist_markdown(rules)

        assert md == "### Custom Rule\n- [ ] A\n- [ ] B"

    def test_global_template_used_when_rule_has_none(self) -> None:
        """Test global template fallback."""
        rules = [ChecklistRule(when=["**"], require=["C"])]

        md = generate_checklist_markdown(rules, global_template="## Global\n{{items}}")

        assert md == "## Global\n- [ ] C"

    def test_rule_template_wins_over_global(self) -> None:
        """Test template precedence."""
        rules = [
            ChecklistRule(when=["**"], require=["A"], template="Own {{index}}/{{ruleCount}}\n{{items}}"),
            ChecklistRule(when=["**"], require=["B"]),
        ]

        md = generate_checklist_markdown(rules, global_template="{{ruleTitle}}\n{{items}}")

        assert md == "Own 1/2\n- [ ] A\n\nRule #2\n- [ ] B"

    def test_template_variables(self) -> None:
        """Test variable substitution and unknown placeholders."""
        rules = [ChecklistRule(when=["**"], require=["A"])]
        template = "{{comment_header}}\nFiles: {{fileCount}}\n{{items}}\n{{bogus}}"

        md = generate_checklist_markdown(
            rules,
            global_template=template,
            variables={"fileCount": 5, "comment_header": "## Review"},
        )

        assert md == "## Review\nFiles: 5\n- [ ] A"

    def test_comment_header_with_default_template(self) -> None:
        """Test that the header leads the default layout."""
        rules = [ChecklistRule(when=["**"], require=["A"])]

        md = generate_checklist_markdown(rules, variables={"comment_header": "## Automated Checklist"})

        assert md == "## Automated Checklist\n\n- [ ] A"

    def test_trailing_whitespace_is_trimmed(self) -> None:
        """Test that the output has no trailing whitespace."""
        rules = [ChecklistRule(when=["**"], require=["A"], template="{{items}}\n\n{{executionTime}}\n")]

        md = generate_checklist_markdown(rules)

        assert md == "- [ ] A"

    def test_rule_template_placing_header_is_not_prefixed(self) -> None:
        """Test that a rule template with ``{{comment_header}}`` shows the header once."""
        template = "{{comment_header}}\nFiles: {{fileCount}}\n{{items}}"
        rules = [ChecklistRule(when=["**"], require=["A"], template=template)]

        md = generate_checklist_markdown(rules, variables={"fileCount": 5, "comment_header": "## H"})

        assert md == "## H\nFiles: 5\n- [ ] A"

    def test_header_prefixed_when_no_template_places_it(self) -> None:
        """Test a rule template without the header placeholder."""
        rules = [ChecklistRule(when=["**"], require=["A"], template="Files: {{fileCount}}\n{{items}}")]

        md = generate_checklist_markdown(rules, variables={"fileCount": 2, "comment_header": "## H"})

        assert md == "## H\n\nFiles: 2\n- [ ] A"

    def test_items_rendered_as_configured(self) -> None:
        """Test that item text is written unchanged and matched trimmed."""
        rules = [ChecklistRule(when=["**"], require=["  Tests added ", "Docs"])]

        md = generate_checklist_markdown(rules, previous_state={"Tests added": True})

        assert md == "- [x]   Tests added \n- [ ] Docs"
        assert parse_checklist_state(md) == {"Tests added": True, "Docs": False}
