"""
Form schema models.

A ``FormSchema`` is the complete declarative description of a form: its
ordered fields and, optionally, the steps that partition them for
multi-page navigation. Authoring mistakes (duplicate names, rules or
steps that point at undeclared fields) are rejected at construction.
"""

from typing import Any, Callable, Mapping

from pydantic import BaseModel, Field, model_validator

from form_engine.exceptions import UnknownFieldError
from form_engine.models.field_definitions import FieldKind, FieldSchema

# all_values -> {field_name: error message}
StepValidator = Callable[[dict[str, Any]], Mapping[str, str]]

_JSON_TYPES = {
    FieldKind.NUMBER: "number",
    FieldKind.CHECKBOX: "boolean",
    FieldKind.MULTISELECT: "array",
}

_JSON_FORMATS = {
    FieldKind.DATETIME: "date-time",
    FieldKind.PASSWORD: "password",
}


class Step(BaseModel):
    """One page of a multi-step form."""

    title: str = Field(..., description="Step title")
    description: str | None = Field(default=None, description="Step description")
    fields: list[str] = Field(default_factory=list, description="Ordered field names in this step")
    validator: StepValidator | None = Field(
        default=None,
        description="Extra check run with per-field validation: all_values -> errors",
    )

    model_config = {"frozen": True}


class FormSchema(BaseModel):
    """Complete form schema."""

    form_id: str = Field(default="form", description="Form identifier")
    title: str = Field(default="Form", description="Form title")
    description: str | None = Field(default=None, description="Form description")
    fields: list[FieldSchema] = Field(..., description="Ordered list of form fields")
    steps: list[Step] = Field(default_factory=list, description="Optional step grouping")
    submit_button_text: str = Field(default="Submit", description="Submit button text")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_references(self) -> "FormSchema":
        names: set[str] = set()
        for field in self.fields:
            if field.name in names:
                raise ValueError(f"Duplicate field name: '{field.name}'")
            names.add(field.name)

        for field in self.fields:
            if field.conditional is None:
                continue
            target = field.conditional.field
            if target not in names:
                raise ValueError(
                    f"Field '{field.name}' has a condition on undeclared field '{target}'"
                )
            if target == field.name:
                raise ValueError(f"Field '{field.name}' has a condition on itself")

        placed: dict[str, str] = {}
        for step in self.steps:
            for name in step.fields:
                if name not in names:
                    raise ValueError(f"Step '{step.title}' lists undeclared field '{name}'")
                if name in placed:
                    raise ValueError(
                        f"Field '{name}' is listed in both step '{placed[name]}' and step '{step.title}'"
                    )
                placed[name] = step.title
        return self

    @property
    def field_names(self) -> list[str]:
        return [field.name for field in self.fields]

    @property
    def step_count(self) -> int:
        """Number of navigable steps; a form without steps is one implicit step."""
        return max(len(self.steps), 1)

    def has_field(self, name: str) -> bool:
        return any(field.name == name for field in self.fields)

    def get_field(self, name: str) -> FieldSchema:
        """Get a field by name, raising ``UnknownFieldError`` if undeclared."""
        for field in self.fields:
            if field.name == name:
                return field
        raise UnknownFieldError(name)

    def get_step(self, index: int) -> Step | None:
        """Get the declared step at ``index``, or None for the implicit step."""
        if not self.steps:
            return None
        return self.steps[index]

    def fields_for_step(self, index: int) -> list[FieldSchema]:
        """Get the fields of a step in the step's declared order."""
        step = self.get_step(index)
        if step is None:
            return list(self.fields)
        return [self.get_field(name) for name in step.fields]

    def default_values(self) -> dict[str, Any]:
        """Initial values seeded from each field's default."""
        return {
            field.name: field.default
            for field in self.fields
            if field.default is not None
        }

    def to_json_schema(self) -> dict[str, Any]:
        """Export the declarative parts of the schema as a JSON Schema dict."""
        properties = {}
        required = []

        for field in self.fields:
            prop: dict[str, Any] = {
                "type": _JSON_TYPES.get(field.kind, "string"),
                "title": field.label,
            }
            if field.help:
                prop["description"] = field.help
            if field.kind in _JSON_FORMATS:
                prop["format"] = _JSON_FORMATS[field.kind]
            if field.default is not None:
                prop["default"] = field.default
            if field.options:
                if field.kind == FieldKind.MULTISELECT:
                    prop["items"] = {"enum": field.option_values}
                else:
                    prop["enum"] = field.option_values

            rule = field.validation
            if rule is not None:
                if rule.email:
                    prop["format"] = "email"
                if rule.url:
                    prop["format"] = "uri"
                if rule.numeric:
                    prop["type"] = "number"
                if rule.min_length is not None:
                    prop["minLength"] = rule.min_length
                if rule.max_length is not None:
                    prop["maxLength"] = rule.max_length
                if rule.minimum is not None:
                    prop["minimum"] = rule.minimum
                if rule.maximum is not None:
                    prop["maximum"] = rule.maximum
                if rule.pattern:
                    prop["pattern"] = rule.pattern
                if rule.required:
                    required.append(field.name)

            properties[field.name] = prop

        return {
            "$schema": "https://json-schema.org/draft/2020-12/schema",
            "$id": self.form_id,
            "type": "object",
            "title": self.title,
            "description": self.description,
            "properties": properties,
            "required": required,
        }
