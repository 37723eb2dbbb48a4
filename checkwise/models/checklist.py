"""Checklist item model."""

from pydantic import BaseModel, ConfigDict

ChecklistState = dict[str, bool]


class ChecklistItem(BaseModel):
    """One checkbox line. Parsed items carry their trimmed text."""

    model_config = ConfigDict(frozen=True)

    text: str
    checked: bool = False

    def to_markdown(self) -> str:
        """Render as a markdown task list line."""
        return f"- [{'x' if self.checked else ' '}] {self.text}"
