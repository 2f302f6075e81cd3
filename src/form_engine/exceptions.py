"""
Exceptions for the form engine.

User input errors never raise; they live in the form's ``errors`` map.
These exceptions signal caller misuse or a submit callback that hung.
"""


class FormEngineError(ValueError):
    """Base class for form engine errors."""


class SchemaError(FormEngineError):
    """The schema cannot support the requested operation."""


class UnknownFieldError(SchemaError):
    """A field name that the schema does not declare was referenced."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown field: '{name}'")


class SubmitTimeoutError(FormEngineError, TimeoutError):
    """The submit callback did not finish within the configured timeout."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Submit callback did not complete within {timeout} seconds")
