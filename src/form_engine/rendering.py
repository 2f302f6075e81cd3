"""
Field renderer dispatch.

Maps each field kind to a caller-supplied renderer. The engine never
produces markup itself; it only decides which renderer draws a field
and hands it the field's ``FieldProps``.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from form_engine.exceptions import SchemaError
from form_engine.models.field_definitions import FieldKind, FieldSchema
from form_engine.models.form_state import FieldProps

if TYPE_CHECKING:
    from form_engine.controller import FormController

# (field, props) -> whatever the presentation layer renders
FieldRenderer = Callable[[FieldSchema, FieldProps], Any]


@dataclass
class FieldRenderers:
    """
    Renderer per field kind.

    Kinds without a dedicated renderer fall back to ``default``, except
    ``custom``, which needs either this slot or a field-level ``render``.
    """

    default: FieldRenderer
    text: FieldRenderer | None = None
    textarea: FieldRenderer | None = None
    number: FieldRenderer | None = None
    select: FieldRenderer | None = None
    multiselect: FieldRenderer | None = None
    checkbox: FieldRenderer | None = None
    datetime: FieldRenderer | None = None
    file: FieldRenderer | None = None
    password: FieldRenderer | None = None
    custom: FieldRenderer | None = None

    def for_kind(self, kind: FieldKind) -> FieldRenderer | None:
        if kind == FieldKind.TEXT:
            return self.text or self.default
        if kind == FieldKind.TEXTAREA:
            return self.textarea or self.default
        if kind == FieldKind.NUMBER:
            return self.number or self.default
        if kind == FieldKind.SELECT:
            return self.select or self.default
        if kind == FieldKind.MULTISELECT:
            return self.multiselect or self.default
        if kind == FieldKind.CHECKBOX:
            return self.checkbox or self.default
        if kind == FieldKind.DATETIME:
            return self.datetime or self.default
        if kind == FieldKind.FILE:
            return self.file or self.default
        if kind == FieldKind.PASSWORD:
            return self.password or self.default
        if kind == FieldKind.CUSTOM:
            return self.custom
        raise SchemaError(f"Unsupported field kind: {kind}")


def render_field(field: FieldSchema, props: FieldProps, renderers: FieldRenderers) -> Any:
    """
    Render one field.

    A field-level ``render`` callable takes precedence over the kind's
    renderer.

    Raises:
        SchemaError: If a custom field has no renderer at all.
    """
    if field.render is not None:
        return field.render(field, props)

    renderer = renderers.for_kind(field.kind)
    if renderer is None:
        raise SchemaError(
            f"Custom field '{field.name}' has no render function and no custom renderer is registered"
        )
    return renderer(field, props)


def render_form(controller: "FormController", renderers: FieldRenderers) -> list[Any]:
    """Render the visible fields of the controller's current step, in order."""
    return [
        render_field(field, controller.get_field_props(field.name), renderers)
        for field in controller.visible_fields()
    ]
