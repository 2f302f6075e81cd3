"""
Form State Controller.

This is the main entry point for the form engine. A controller owns the
state of exactly one form instance and is the only way to change it.
"""

import asyncio
import copy
import inspect
import logging
from typing import Any, Awaitable, Callable

from form_engine.autosave import AutoSaveCallback, AutoSaveScheduler
from form_engine.config import get_config
from form_engine.exceptions import SubmitTimeoutError, UnknownFieldError
from form_engine.models.field_definitions import FieldSchema
from form_engine.models.form_schema import FormSchema, Step
from form_engine.models.form_state import FieldProps, FormState
from form_engine.rules import validation
from form_engine.rules.visibility import is_visible, visible_fields

logger = logging.getLogger("form-engine")

SubmitCallback = Callable[[dict[str, Any]], Awaitable[None] | None]


class FormController:
    """
    State controller for a schema-driven form.

    Usage:
        schema = FormSchema(fields=[
            FieldSchema(
                name="email",
                label="Email",
                validation=ValidationRule(required=True, email=True),
            ),
        ])
        form = FormController(schema, on_submit=save_user)

        form.set_field_value("email", "bob@example.com")
        props = form.get_field_props("email")   # hand to a renderer
        await form.submit()                     # validates, then calls save_user

    Step navigation never validates on its own unless ``require_valid_step``
    is enabled; callers that want a guarded "Next" button can also call
    ``validate_step()`` before ``next_step()``.
    """

    def __init__(
        self,
        schema: FormSchema,
        on_submit: SubmitCallback | None = None,
        on_auto_save: AutoSaveCallback | None = None,
        *,
        validate_on_change: bool | None = None,
        validate_on_blur: bool | None = None,
        auto_save: bool | None = None,
        auto_save_delay: float | None = None,
        submit_timeout: float | None = None,
        require_valid_step: bool | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        """
        Initialize the controller.

        Args:
            schema: The form schema. Never mutated.
            on_submit: Called with a snapshot of the values after a valid submit.
            on_auto_save: Called with a snapshot of the values after edits settle.
            validate_on_change: Validate a field on every value change.
            validate_on_blur: Validate a field when its renderer reports blur.
            auto_save: Enable the auto-save timer. Requires ``on_auto_save``.
            auto_save_delay: Quiet period in seconds before auto-save fires.
            submit_timeout: Seconds to wait for an async ``on_submit``; None waits forever.
            require_valid_step: Refuse ``next_step()`` while the current step is invalid.
            loop: Event loop for the auto-save timer. If None, edits must be
                made while a loop is running.

        Any option left as None falls back to the engine configuration.
        """
        config = get_config()
        self.schema = schema
        self.on_submit = on_submit
        self.validate_on_change = (
            config.validate_on_change if validate_on_change is None else validate_on_change
        )
        self.validate_on_blur = (
            config.validate_on_blur if validate_on_blur is None else validate_on_blur
        )
        self.submit_timeout = config.submit_timeout if submit_timeout is None else submit_timeout
        self.require_valid_step = (
            config.require_valid_step if require_valid_step is None else require_valid_step
        )

        auto_save = config.auto_save if auto_save is None else auto_save
        self._auto_save: AutoSaveScheduler | None = None
        if auto_save:
            if on_auto_save is None:
                raise ValueError("auto_save is enabled but no on_auto_save callback was given")
            delay = config.auto_save_delay if auto_save_delay is None else auto_save_delay
            self._auto_save = AutoSaveScheduler(on_auto_save, delay, loop=loop)

        self._state = FormState(values=self._initial_values())

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> FormState:
        """A deep copy of the current state."""
        return self._state.model_copy(deep=True)

    @property
    def values(self) -> dict[str, Any]:
        return dict(self._state.values)

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._state.errors)

    @property
    def touched(self) -> dict[str, bool]:
        return dict(self._state.touched)

    @property
    def current_step_index(self) -> int:
        return self._state.current_step_index

    @property
    def current_step(self) -> Step | None:
        """The current declared step, or None for a form without steps."""
        return self.schema.get_step(self._state.current_step_index)

    @property
    def step_count(self) -> int:
        return self.schema.step_count

    @property
    def is_first_step(self) -> bool:
        return self._state.current_step_index == 0

    @property
    def is_last_step(self) -> bool:
        return self._state.current_step_index == self.step_count - 1

    @property
    def progress(self) -> float:
        """Fraction of steps reached, counting the current one."""
        return (self._state.current_step_index + 1) / self.step_count

    @property
    def is_submitting(self) -> bool:
        return self._state.is_submitting

    @property
    def is_dirty(self) -> bool:
        return self._state.is_dirty

    @property
    def is_valid(self) -> bool:
        return self._state.is_valid

    @property
    def auto_save_pending(self) -> bool:
        return self._auto_save is not None and self._auto_save.pending

    def visible_fields(self) -> list[FieldSchema]:
        """Visible fields of the current step, in render order."""
        fields = self.schema.fields_for_step(self._state.current_step_index)
        return visible_fields(fields, self._state.values)

    # ------------------------------------------------------------------
    # Field actions
    # ------------------------------------------------------------------

    def _field(self, name: str) -> FieldSchema:
        return self.schema.get_field(name)

    def _initial_values(self, overrides: dict[str, Any] | None = None) -> dict[str, Any]:
        values = copy.deepcopy(self.schema.default_values())
        if overrides:
            for name in overrides:
                if not self.schema.has_field(name):
                    raise UnknownFieldError(name)
            values.update(overrides)
        return values

    def _set_error(self, name: str, error: str | None) -> None:
        if error:
            self._state.errors[name] = error
            self._state.is_valid = False
        else:
            self._state.errors.pop(name, None)

    def _check_field(self, field: FieldSchema) -> str | None:
        # Hidden fields carry no error
        if not is_visible(field, self._state.values):
            self._set_error(field.name, None)
            return None
        error = validation.validate_field(
            field, self._state.values.get(field.name), self._state.values
        )
        self._set_error(field.name, error)
        return error

    def set_field_value(self, name: str, value: Any) -> None:
        """
        Set a field's value and mark the form dirty.

        Validates the field immediately when ``validate_on_change`` is on,
        and restarts the auto-save timer when auto-save is enabled.

        Raises:
            UnknownFieldError: If the schema does not declare ``name``.
            RuntimeError: If auto-save is enabled and no event loop is
                available. The state is left unchanged.
        """
        field = self._field(name)
        if self._auto_save is not None:
            self._auto_save.resolve_loop()

        self._state.values[name] = value
        self._state.is_dirty = True
        logger.debug(f"Set value for field '{name}'")

        if self.validate_on_change:
            self._check_field(field)

        if self._auto_save is not None:
            self._auto_save.schedule(self._state.values)

    def set_field_touched(self, name: str, touched: bool = True) -> None:
        """Record whether the user has left a field."""
        self._field(name)
        self._state.touched[name] = touched

    def set_field_error(self, name: str, error: str | None) -> None:
        """Set or clear (with None) an error that came from outside the engine."""
        self._field(name)
        self._set_error(name, error)

    def validate_field(self, name: str) -> str | None:
        """
        Validate a field's current value and record the result.

        A field that is currently hidden is not validated; any error it
        had is cleared.
        """
        return self._check_field(self._field(name))

    def validate_form(self) -> bool:
        """
        Validate every visible field and the current step's validator.

        Replaces the error map wholesale, so fields that became valid lose
        their old error.
        """
        errors = validation.validate_form(
            self.schema,
            self._state.values,
            self._state.current_step_index,
        )
        self._state.errors = errors
        self._state.is_valid = not errors
        return self._state.is_valid

    def validate_step(self, index: int | None = None) -> bool:
        """
        Validate the visible fields of one step (the current one by default).

        Only the errors of that step's fields are replaced; errors for
        other steps are left alone.
        """
        if index is None:
            index = self._state.current_step_index
        if not 0 <= index < self.step_count:
            raise IndexError(f"Step index out of range: {index}")

        step_names = {field.name for field in self.schema.fields_for_step(index)}
        errors = validation.validate_step(self.schema, self._state.values, index)

        for name in step_names:
            self._state.errors.pop(name, None)
        self._state.errors.update(errors)
        if errors:
            self._state.is_valid = False
        return not errors

    def get_field_props(self, name: str) -> FieldProps:
        """Build the props a renderer needs for one field."""
        self._field(name)

        def on_change(value: Any) -> None:
            self.set_field_value(name, value)

        def on_blur() -> None:
            self.set_field_touched(name, True)
            if self.validate_on_blur:
                self.validate_field(name)

        return FieldProps(
            value=self._state.values.get(name),
            on_change=on_change,
            on_blur=on_blur,
            error=self._state.visible_error(name),
            touched=self._state.touched.get(name, False),
        )

    # ------------------------------------------------------------------
    # Form actions
    # ------------------------------------------------------------------

    async def submit(self) -> bool:
        """
        Validate and, if valid, hand the values to ``on_submit``.

        An invalid form marks every field touched so all errors show,
        and the callback is not called. Exceptions from the callback
        propagate. ``is_submitting`` is back to False on every exit.

        Returns:
            True if the form was valid (and the callback, if any, completed).

        Raises:
            SubmitTimeoutError: If an async callback exceeds ``submit_timeout``.
        """
        self._state.is_submitting = True
        try:
            if not self.validate_form():
                for name in self.schema.field_names:
                    self._state.touched[name] = True
                logger.warning(
                    f"Submit of form '{self.schema.form_id}' blocked by "
                    f"{self._state.error_count} validation error(s)"
                )
                return False

            if self.on_submit is None:
                return True

            logger.info(f"Submitting form '{self.schema.form_id}'")
            try:
                result = self.on_submit(self.values)
                if inspect.isawaitable(result):
                    await self._await_submit(result)
            except SubmitTimeoutError:
                raise
            except Exception as e:
                logger.error(f"Submit callback failed: {type(e).__name__}: {e}")
                raise
            return True
        finally:
            self._state.is_submitting = False

    async def _await_submit(self, result: Awaitable[None]) -> None:
        if self.submit_timeout is None:
            await result
            return
        try:
            await asyncio.wait_for(result, timeout=self.submit_timeout)
        except asyncio.TimeoutError as e:
            logger.warning(
                f"Submit of form '{self.schema.form_id}' timed out after {self.submit_timeout}s"
            )
            raise SubmitTimeoutError(self.submit_timeout) from e

    def reset(self, values: dict[str, Any] | None = None) -> None:
        """
        Restore schema defaults, optionally overridden by ``values``.

        Clears errors, touched flags, dirty and submitting flags, returns to
        the first step and cancels any pending auto-save.
        """
        initial = self._initial_values(values)
        if self._auto_save is not None:
            self._auto_save.cancel()
        self._state = FormState(values=initial)
        logger.info(f"Reset form '{self.schema.form_id}'")

    def close(self) -> None:
        """Release the form: cancels any pending auto-save."""
        if self._auto_save is not None:
            self._auto_save.cancel()

    # ------------------------------------------------------------------
    # Step navigation
    # ------------------------------------------------------------------

    def next_step(self) -> int:
        """Advance one step; a no-op on the last step."""
        index = self._state.current_step_index
        if index >= self.step_count - 1:
            return index
        if self.require_valid_step and not self.validate_step(index):
            logger.debug(f"Step {index} is invalid; staying put")
            return index
        self._state.current_step_index = index + 1
        return self._state.current_step_index

    def prev_step(self) -> int:
        """Go back one step; a no-op on the first step."""
        if self._state.current_step_index > 0:
            self._state.current_step_index -= 1
        return self._state.current_step_index

    def go_to_step(self, index: int) -> int:
        """Jump to a step; out-of-range indexes are ignored."""
        if 0 <= index < self.step_count:
            self._state.current_step_index = index
        return self._state.current_step_index
