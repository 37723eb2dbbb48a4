"""Checklist rule and configuration models.

Rule and option fields are strict: YAML values are never coerced, so
``priority: true`` or ``optional: "yes"`` are rejected instead of converted.
"""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr

DEFAULT_PRIORITY = 1000


def _not_blank(value: str) -> str:
    if not value.strip():
        msg = "must not be blank"
        raise ValueError(msg)
    return value


NonBlankStr = Annotated[StrictStr, AfterValidator(_not_blank)]


class ChecklistRule(BaseModel):
    """A set of glob patterns and the checklist items they require."""

    model_config = ConfigDict(frozen=True)

    when: list[NonBlankStr] = Field(..., min_length=1)
    require: list[NonBlankStr] = Field(..., min_length=1)
    priority: Annotated[StrictInt, Field(ge=0)] | None = None
    template: StrictStr | None = None
    optional: StrictBool = False

    @property
    def effective_priority(self) -> int:
        """Priority used for ordering; unset rules sort last."""
        return DEFAULT_PRIORITY if self.priority is None else self.priority


class ChecklistOptions(BaseModel):
    """Global options shared by every rule."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    label_filter: list[StrictStr] | None = None
    branch_pattern: StrictStr | None = None
    comment_header: StrictStr | None = None
    template: StrictStr | None = None


class ChecklistConfig(BaseModel):
    """Parsed contents of the rule configuration file."""

    model_config = ConfigDict(frozen=True)

    checklists: list[ChecklistRule] = Field(..., min_length=1)
    options: ChecklistOptions = Field(default_factory=ChecklistOptions)
