"""
Validation engine.

Pure functions that check a field, a step or a whole form against the
current values. Validation failures are returned as messages and never
raised; only schema misuse (a step validator reporting an undeclared
field) raises.
"""

import math
import re
from typing import Any, Mapping

from form_engine.exceptions import UnknownFieldError
from form_engine.models.field_definitions import FieldKind, FieldSchema, ValidationRule
from form_engine.models.form_schema import FormSchema
from form_engine.rules.constants import (
    EMAIL_MESSAGE,
    EMAIL_PATTERN,
    MAX_LENGTH_MESSAGE,
    MAXIMUM_MESSAGE,
    MIN_LENGTH_MESSAGE,
    MINIMUM_MESSAGE,
    NUMBER_MESSAGE,
    PATTERN_MESSAGE,
    REQUIRED_MESSAGE,
    URL_MESSAGE,
    URL_PATTERN,
)
from form_engine.rules.visibility import visible_fields


def is_empty(value: Any) -> bool:
    """None, the empty string and empty collections count as no value."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


def _to_number(value: Any) -> float | None:
    """Coerce a value to a float, or None if it is not numeric."""
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            number = float(value.strip())
        else:
            return None
    except (ValueError, OverflowError):
        return None
    if math.isnan(number):
        return None
    return number


def _format_limit(limit: float) -> str:
    if float(limit).is_integer():
        return str(int(limit))
    return str(limit)


def _wants_number(field: FieldSchema, rule: ValidationRule, value: Any) -> bool:
    if rule.numeric or field.kind == FieldKind.NUMBER:
        return True
    if rule.minimum is not None or rule.maximum is not None:
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_string(field: FieldSchema, rule: ValidationRule, value: str) -> str | None:
    label = field.label
    if rule.min_length is not None and len(value) < rule.min_length:
        return MIN_LENGTH_MESSAGE.format(label=label, limit=rule.min_length)
    if rule.max_length is not None and len(value) > rule.max_length:
        return MAX_LENGTH_MESSAGE.format(label=label, limit=rule.max_length)
    if rule.pattern is not None and not re.search(rule.pattern, value):
        return PATTERN_MESSAGE.format(label=label)
    if rule.email and not EMAIL_PATTERN.match(value):
        return EMAIL_MESSAGE.format(label=label)
    if rule.url and not URL_PATTERN.match(value):
        return URL_MESSAGE.format(label=label)
    return None


def _check_number(field: FieldSchema, rule: ValidationRule, value: Any) -> str | None:
    label = field.label
    number = _to_number(value)
    if number is None:
        return NUMBER_MESSAGE.format(label=label)
    if rule.minimum is not None and number < rule.minimum:
        return MINIMUM_MESSAGE.format(label=label, limit=_format_limit(rule.minimum))
    if rule.maximum is not None and number > rule.maximum:
        return MAXIMUM_MESSAGE.format(label=label, limit=_format_limit(rule.maximum))
    return None


def validate_field(
    field: FieldSchema,
    value: Any,
    all_values: Mapping[str, Any],
) -> str | None:
    """
    Validate one field value.

    Checks run in order: required, string constraints (length, pattern,
    email, url), numeric constraints, then the custom rule. The first
    failure is returned. An empty value on an optional field skips every
    built-in check; the custom rule still runs.

    Args:
        field: The field declaration.
        value: The value to check.
        all_values: Every current form value, passed to the custom rule.

    Returns:
        An error message, or None if the value is acceptable.
    """
    rule = field.validation
    if rule is None:
        return None

    empty = is_empty(value)
    if empty and rule.required:
        return REQUIRED_MESSAGE.format(label=field.label)

    if not empty:
        if isinstance(value, str):
            error = _check_string(field, rule, value)
            if error:
                return error

        if _wants_number(field, rule, value):
            error = _check_number(field, rule, value)
            if error:
                return error

    if rule.custom is not None:
        return rule.custom(value, dict(all_values)) or None

    return None


def _run_step_validator(
    schema: FormSchema,
    values: dict[str, Any],
    step_index: int,
) -> dict[str, str]:
    if not 0 <= step_index < len(schema.steps):
        return {}
    step = schema.steps[step_index]
    if step.validator is None:
        return {}

    errors: dict[str, str] = {}
    for name, message in step.validator(dict(values)).items():
        if not schema.has_field(name):
            raise UnknownFieldError(name)
        if message:
            errors[name] = message
    return errors


def validate_form(
    schema: FormSchema,
    values: Mapping[str, Any],
    step_index: int = 0,
) -> dict[str, str]:
    """
    Validate every visible field, plus the current step's validator.

    Hidden fields are skipped entirely, so a hidden required field never
    reports an error. Step validator errors take precedence over field
    errors for the same name.

    Returns:
        Mapping of field name to error message; empty means valid.
    """
    snapshot = dict(values)
    errors: dict[str, str] = {}

    for field in visible_fields(schema.fields, snapshot):
        error = validate_field(field, snapshot.get(field.name), snapshot)
        if error:
            errors[field.name] = error

    errors.update(_run_step_validator(schema, snapshot, step_index))
    return errors


def validate_step(
    schema: FormSchema,
    values: Mapping[str, Any],
    step_index: int,
) -> dict[str, str]:
    """Validate the visible fields of one step, plus that step's validator."""
    snapshot = dict(values)
    errors: dict[str, str] = {}

    for field in visible_fields(schema.fields_for_step(step_index), snapshot):
        error = validate_field(field, snapshot.get(field.name), snapshot)
        if error:
            errors[field.name] = error

    errors.update(_run_step_validator(schema, snapshot, step_index))
    return errors
