"""
Validation and visibility rules.

Pure functions evaluated against live form values.
"""

from form_engine.rules.validation import (
    is_empty,
    validate_field,
    validate_form,
    validate_step,
)
from form_engine.rules.visibility import (
    evaluate_condition,
    is_visible,
    visible_fields,
)

__all__ = [
    "is_empty",
    "validate_field",
    "validate_form",
    "validate_step",
    "evaluate_condition",
    "is_visible",
    "visible_fields",
]
