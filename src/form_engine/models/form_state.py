"""
Form state models.

``FormState`` is the mutable aggregate owned by a ``FormController``.
``FieldProps`` is the bundle handed to a field renderer.
"""

from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, Field


class FormState(BaseModel):
    """State of one form instance."""

    values: dict[str, Any] = Field(default_factory=dict, description="Current value per field")
    errors: dict[str, str] = Field(
        default_factory=dict, description="Current error per field; absent means no error"
    )
    touched: dict[str, bool] = Field(
        default_factory=dict, description="Whether the user has left each field"
    )
    current_step_index: int = Field(default=0, ge=0)
    is_submitting: bool = Field(default=False)
    is_dirty: bool = Field(default=False)
    is_valid: bool = Field(default=False, description="Outcome of the last full validation")

    @property
    def error_count(self) -> int:
        """Get the number of fields with an error."""
        return len(self.errors)

    def visible_error(self, name: str) -> str | None:
        """Error for a field, surfaced only once the field was touched."""
        if self.touched.get(name):
            return self.errors.get(name)
        return None


@dataclass(frozen=True)
class FieldProps:
    """Everything a field renderer needs from the controller."""

    value: Any
    on_change: Callable[[Any], None]
    on_blur: Callable[[], None]
    error: str | None
    touched: bool
