"""
Constants for the validation rules.

Shape patterns and error message templates, kept in one place so they
are easy to review and update.
"""

import re

# Loose shape checks; these are not full RFC validators
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
URL_PATTERN = re.compile(r"^https?://.+")

# Error message templates, formatted with the field label and the limit
REQUIRED_MESSAGE = "{label} is required"
MIN_LENGTH_MESSAGE = "{label} must be at least {limit} characters"
MAX_LENGTH_MESSAGE = "{label} must be no more than {limit} characters"
PATTERN_MESSAGE = "{label} format is invalid"
EMAIL_MESSAGE = "{label} must be a valid email address"
URL_MESSAGE = "{label} must be a valid URL"
NUMBER_MESSAGE = "{label} must be a number"
MINIMUM_MESSAGE = "{label} must be at least {limit}"
MAXIMUM_MESSAGE = "{label} must be no more than {limit}"
