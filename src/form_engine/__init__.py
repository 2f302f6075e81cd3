"""
Form Engine: schema-driven forms.

Describe a form once as data (fields, validation rules, conditional
visibility, optional steps) and let the engine track values, errors,
touched flags, step navigation, submission and auto-save.

Simple Usage:
    from form_engine import FieldSchema, FormController, FormSchema, ValidationRule

    schema = FormSchema(fields=[
        FieldSchema(
            name="email",
            label="Email",
            validation=ValidationRule(required=True, email=True),
        ),
    ])
    form = FormController(schema, on_submit=save_user)

    form.set_field_value("email", "bob@example.com")
    ok = await form.submit()

Multi-step Usage:
    schema = FormSchema(
        fields=[...],
        steps=[
            Step(title="Account", fields=["email", "password"]),
            Step(title="Profile", fields=["name", "company"]),
        ],
    )
    form = FormController(schema, require_valid_step=True)
    form.next_step()  # stays on step 0 while it has errors

Rendering:
    from form_engine import FieldRenderers, render_form

    renderers = FieldRenderers(default=text_input, select=dropdown)
    widgets = render_form(form, renderers)
"""

from form_engine.autosave import AutoSaveScheduler
from form_engine.config import (
    FormEngineConfig,
    get_config,
    update_config,
)
from form_engine.controller import FormController
from form_engine.exceptions import (
    FormEngineError,
    SchemaError,
    SubmitTimeoutError,
    UnknownFieldError,
)
from form_engine.models import (
    ConditionalRule,
    FieldKind,
    FieldOption,
    FieldProps,
    FieldSchema,
    FormSchema,
    FormState,
    LayoutHints,
    Step,
    ValidationRule,
)
from form_engine.rendering import (
    FieldRenderers,
    render_field,
    render_form,
)
from form_engine.rules import (
    is_visible,
    validate_field,
    validate_form,
    validate_step,
)

__all__ = [
    # Main interface
    "FormController",
    "AutoSaveScheduler",
    # Schema models
    "ConditionalRule",
    "FieldKind",
    "FieldOption",
    "FieldSchema",
    "FormSchema",
    "LayoutHints",
    "Step",
    "ValidationRule",
    # State
    "FieldProps",
    "FormState",
    # Rules
    "is_visible",
    "validate_field",
    "validate_form",
    "validate_step",
    # Rendering
    "FieldRenderers",
    "render_field",
    "render_form",
    # Configuration
    "FormEngineConfig",
    "get_config",
    "update_config",
    # Errors
    "FormEngineError",
    "SchemaError",
    "SubmitTimeoutError",
    "UnknownFieldError",
]

__version__ = "0.1.0"
