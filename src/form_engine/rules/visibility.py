"""
Visibility evaluation for conditional fields.

Visibility is a pure function of the field declaration and the live form
values. Nothing is cached: callers re-evaluate on every state change.
"""

from typing import Any, Iterable, Mapping

from form_engine.models.field_definitions import ConditionalRule, FieldSchema


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _strict_equals(actual: Any, expected: Any) -> bool:
    """Equality without cross-type coercion ("1" != 1, True != 1)."""
    if _is_number(actual) and _is_number(expected):
        return actual == expected
    if isinstance(actual, bool) or isinstance(expected, bool):
        return type(actual) is type(expected) and actual == expected
    # Subclasses (a str-valued Enum member) match their base type
    same_type = isinstance(actual, type(expected)) or isinstance(expected, type(actual))
    return same_type and actual == expected


def _contains(actual: Any, expected: Any) -> bool:
    if isinstance(actual, str):
        return isinstance(expected, str) and expected in actual
    if isinstance(actual, (list, tuple, set, frozenset)):
        try:
            return expected in actual
        except TypeError:
            # Unhashable needle against a set
            return False
    return False


def evaluate_condition(rule: ConditionalRule, all_values: Mapping[str, Any]) -> bool:
    """
    Evaluate a conditional rule against the current form values.

    Ordering comparisons only apply to numbers; anything else evaluates
    to False rather than raising.
    """
    actual = all_values.get(rule.field)
    expected = rule.value

    if rule.operator == "equals":
        return _strict_equals(actual, expected)
    if rule.operator == "not_equals":
        return not _strict_equals(actual, expected)
    if rule.operator == "contains":
        return _contains(actual, expected)
    if rule.operator == "greater_than":
        return _is_number(actual) and _is_number(expected) and actual > expected
    if rule.operator == "less_than":
        return _is_number(actual) and _is_number(expected) and actual < expected
    return False


def is_visible(field: FieldSchema, all_values: Mapping[str, Any]) -> bool:
    """Whether a field is currently shown, and therefore validated."""
    if field.hidden:
        return False
    if field.conditional is None:
        return True
    return evaluate_condition(field.conditional, all_values)


def visible_fields(
    fields: Iterable[FieldSchema],
    all_values: Mapping[str, Any],
) -> list[FieldSchema]:
    """Filter fields down to the visible ones, preserving order."""
    return [field for field in fields if is_visible(field, all_values)]
