"""
Data models for the form engine.

This module contains:
- Field definitions (kinds, validation and visibility rules, options)
- The form schema (fields plus optional steps)
- Form state and the per-field renderer props
"""

from form_engine.models.field_definitions import (
    ConditionalOperator,
    ConditionalRule,
    CustomRule,
    FieldKind,
    FieldOption,
    FieldSchema,
    LayoutHints,
    ValidationRule,
)
from form_engine.models.form_schema import (
    FormSchema,
    Step,
    StepValidator,
)
from form_engine.models.form_state import (
    FieldProps,
    FormState,
)

__all__ = [
    # Field definitions
    "ConditionalOperator",
    "ConditionalRule",
    "CustomRule",
    "FieldKind",
    "FieldOption",
    "FieldSchema",
    "LayoutHints",
    "ValidationRule",
    # Schema
    "FormSchema",
    "Step",
    "StepValidator",
    # State
    "FieldProps",
    "FormState",
]
