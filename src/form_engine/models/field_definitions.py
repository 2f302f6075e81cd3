"""
Field definition models for schema-driven forms.

A field declares its kind, label, default value, validation rules,
selectable options and an optional visibility condition. The engine
reads these models and never mutates them.
"""

import re
from enum import Enum
from typing import Any, Callable, Literal

from pydantic import BaseModel, Field, field_validator


class FieldKind(str, Enum):
    """Closed set of field kinds a renderer can be asked to draw."""

    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    SELECT = "select"
    MULTISELECT = "multiselect"
    CHECKBOX = "checkbox"
    DATETIME = "datetime"
    FILE = "file"
    PASSWORD = "password"
    CUSTOM = "custom"


ConditionalOperator = Literal[
    "equals",
    "not_equals",
    "contains",
    "greater_than",
    "less_than",
]

# (value, all_values) -> error message or None
CustomRule = Callable[[Any, dict[str, Any]], str | None]


class ValidationRule(BaseModel):
    """
    Validation rules attached to a field.

    Built-in checks run in a fixed order and the first failure wins.
    ``custom`` runs only after every built-in check has passed.
    """

    required: bool = Field(default=False, description="Whether a value must be provided")
    min_length: int | None = Field(default=None, ge=0, description="Minimum string length")
    max_length: int | None = Field(default=None, ge=0, description="Maximum string length")
    minimum: float | None = Field(default=None, description="Minimum numeric value")
    maximum: float | None = Field(default=None, description="Maximum numeric value")
    pattern: str | None = Field(default=None, description="Regex the string value must match")
    email: bool = Field(default=False, description="Value must look like an email address")
    url: bool = Field(default=False, description="Value must look like an http(s) URL")
    numeric: bool = Field(default=False, description="Value must be a number")
    custom: CustomRule | None = Field(
        default=None,
        description="Arbitrary rule: (value, all_values) -> error message or None",
    )

    model_config = {"frozen": True}

    @field_validator("pattern")
    @classmethod
    def check_pattern(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as e:
                raise ValueError(f"Invalid regex pattern {value!r}: {e}") from e
        return value


class ConditionalRule(BaseModel):
    """Show a field only while another field's value satisfies a comparison."""

    field: str = Field(..., description="Name of the field this rule reads")
    operator: ConditionalOperator = Field(..., description="Comparison operator")
    value: Any = Field(default=None, description="Value to compare against")

    model_config = {"frozen": True}


class FieldOption(BaseModel):
    """A selectable option for choice fields."""

    label: str = Field(..., description="Text shown to the user")
    value: Any = Field(..., description="Value stored when selected")
    disabled: bool = Field(default=False)
    group: str | None = Field(default=None, description="Option group heading")

    model_config = {"frozen": True}


class LayoutHints(BaseModel):
    """Layout hints passed through to renderers untouched."""

    width: str | int | None = Field(default=None, description="Column span or width")
    group: str | None = Field(default=None, description="Visual grouping key")

    model_config = {"frozen": True}


class FieldSchema(BaseModel):
    """Declaration of a single form field."""

    name: str = Field(..., min_length=1, description="Field key, unique within the form")
    kind: FieldKind = Field(default=FieldKind.TEXT, description="Field kind")
    label: str = Field(..., description="Human-readable label")
    default: Any = Field(default=None, description="Initial value")
    validation: ValidationRule | None = Field(default=None)
    options: list[FieldOption] = Field(default_factory=list)
    conditional: ConditionalRule | None = Field(default=None)
    hidden: bool = Field(default=False, description="Never shown or validated")
    layout: LayoutHints = Field(default_factory=LayoutHints)

    # Presentation hints for renderers
    placeholder: str | None = Field(default=None)
    help: str | None = Field(default=None, description="Help text")
    disabled: bool = Field(default=False)
    readonly: bool = Field(default=False)
    ui_widget: str | None = Field(default=None, description="Preferred widget, e.g. radio or switch")
    render: Callable[..., Any] | None = Field(
        default=None,
        description="Caller-supplied renderer: (field, props) -> rendered output",
    )

    model_config = {"frozen": True}

    @field_validator("options", mode="before")
    @classmethod
    def normalize_options(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [
                {"label": item, "value": item} if isinstance(item, str) else item
                for item in value
            ]
        return value

    @property
    def is_required(self) -> bool:
        return self.validation is not None and self.validation.required

    @property
    def option_values(self) -> list[Any]:
        return [option.value for option in self.options]
