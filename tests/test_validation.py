"""Tests for the validation engine."""

import pytest

from form_engine.exceptions import UnknownFieldError
from form_engine.models.field_definitions import (
    ConditionalRule,
    FieldKind,
    FieldSchema,
    ValidationRule,
)
from form_engine.models.form_schema import FormSchema, Step
from form_engine.rules.validation import (
    is_empty,
    validate_field,
    validate_form,
    validate_step,
)


def make_field(kind: FieldKind = FieldKind.TEXT, label: str = "Field", **rules) -> FieldSchema:
    return FieldSchema(
        name="field",
        kind=kind,
        label=label,
        validation=ValidationRule(**rules),
    )


class TestIsEmpty:
    """Tests for the emptiness check."""

    @pytest.mark.parametrize("value", [None, "", [], (), set(), {}])
    def test_empty_values(self, value):
        """Test values that count as no value."""
        assert is_empty(value)

    @pytest.mark.parametrize("value", [0, 0.0, False, " ", "0", ["a"]])
    def test_non_empty_values(self, value):
        """Test falsy values that are still real answers."""
        assert not is_empty(value)


class TestRequired:
    """Tests for required-ness."""

    @pytest.mark.parametrize("value", [None, "", []])
    def test_required_empty_value(self, value):
        """Test that empty values fail a required field."""
        field = make_field(label="Name", required=True)
        assert validate_field(field, value, {}) == "Name is required"

    @pytest.mark.parametrize("value", ["Ada", 0, False, ["x"]])
    def test_required_non_empty_value(self, value):
        """Test that any non-empty value passes a required field."""
        field = make_field(label="Name", required=True)
        assert validate_field(field, value, {}) is None

    def test_optional_empty_skips_built_ins(self):
        """Test that an empty optional value skips every built-in check."""
        field = make_field(min_length=3, email=True, numeric=True, minimum=10)
        assert validate_field(field, "", {}) is None
        assert validate_field(field, None, {}) is None

    def test_no_rules_always_valid(self):
        """Test that a field without rules never errors."""
        field = FieldSchema(name="notes", label="Notes")
        assert validate_field(field, None, {}) is None


class TestStringRules:
    """Tests for string constraints."""

    def test_email_scenario(self):
        """Test the email shape check on a required field."""
        field = make_field(label="Email", required=True, email=True)
        assert validate_field(field, "bob", {}) == "Email must be a valid email address"
        assert validate_field(field, "bob@x.com", {}) is None

    def test_min_length(self):
        """Test minimum length."""
        field = make_field(label="Password", min_length=8)
        assert validate_field(field, "short", {}) == "Password must be at least 8 characters"
        assert validate_field(field, "long enough", {}) is None

    def test_max_length(self):
        """Test maximum length."""
        field = make_field(label="Username", max_length=4)
        assert validate_field(field, "alexander", {}) == "Username must be no more than 4 characters"

    def test_pattern(self):
        """Test pattern matching."""
        field = make_field(label="Zip", pattern=r"^\d{5}$")
        assert validate_field(field, "1234a", {}) == "Zip format is invalid"
        assert validate_field(field, "12345", {}) is None

    def test_url(self):
        """Test the URL shape check."""
        field = make_field(label="Website", url=True)
        assert validate_field(field, "example.com", {}) == "Website must be a valid URL"
        assert validate_field(field, "https://example.com", {}) is None

    def test_length_checks_before_format(self):
        """Test that the first failing check wins."""
        field = make_field(label="Email", min_length=10, email=True)
        assert validate_field(field, "bob", {}) == "Email must be at least 10 characters"

    def test_string_rules_ignore_non_strings(self):
        """Test that string constraints skip non-string values."""
        field = make_field(kind=FieldKind.MULTISELECT, label="Tags", min_length=5, email=True)
        assert validate_field(field, ["a"], {}) is None


class TestNumericRules:
    """Tests for numeric constraints."""

    def test_numeric_string_coerced(self):
        """Test that numeric strings are coerced before range checks."""
        field = make_field(label="Age", numeric=True, minimum=18)
        assert validate_field(field, "21", {}) is None
        assert validate_field(field, "17", {}) == "Age must be at least 18"

    def test_not_a_number_reported_first(self):
        """Test that a non-numeric value is reported before range checks."""
        field = make_field(label="Age", numeric=True, minimum=18, maximum=99)
        assert validate_field(field, "abc", {}) == "Age must be a number"

    def test_number_kind_requests_numeric_validation(self):
        """Test that number fields validate numerically without the flag."""
        field = make_field(kind=FieldKind.NUMBER, label="Quantity")
        assert validate_field(field, "lots", {}) == "Quantity must be a number"

    def test_range_implies_numeric(self):
        """Test that a min/max bound requests numeric validation."""
        field = make_field(label="Score", maximum=10)
        assert validate_field(field, "eleven", {}) == "Score must be a number"
        assert validate_field(field, 11, {}) == "Score must be no more than 10"
        assert validate_field(field, 9.5, {}) is None

    def test_fractional_limit_message(self):
        """Test that fractional limits are shown as-is."""
        field = make_field(label="Rate", minimum=0.5)
        assert validate_field(field, 0.25, {}) == "Rate must be at least 0.5"

    @pytest.mark.parametrize("value", [True, "nan", "1e"])
    def test_non_numeric_values(self, value):
        """Test values that are not numbers even though they might coerce."""
        field = make_field(label="Amount", numeric=True)
        assert validate_field(field, value, {}) == "Amount must be a number"

    def test_number_value_without_bounds(self):
        """Test that plain numbers pass when no bounds are set."""
        field = make_field(label="Amount", required=True)
        assert validate_field(field, 0, {}) is None


class TestCustomRule:
    """Tests for the custom rule escape hatch."""

    def test_custom_rule_sees_all_values(self):
        """Test that the custom rule gets the whole form."""
        def passwords_match(value, values):
            if value != values.get("password"):
                return "Passwords must match"
            return None

        field = make_field(label="Confirm", required=True, custom=passwords_match)
        assert validate_field(field, "abc", {"password": "xyz", "field": "abc"}) == "Passwords must match"
        assert validate_field(field, "xyz", {"password": "xyz", "field": "xyz"}) is None

    def test_built_in_checks_take_precedence(self):
        """Test that the custom rule only runs after built-ins pass."""
        calls = []

        def rule(value, values):
            calls.append(value)
            return "custom error"

        field = make_field(label="Code", min_length=4, custom=rule)
        assert validate_field(field, "ab", {}) == "Code must be at least 4 characters"
        assert calls == []
        assert validate_field(field, "abcd", {}) == "custom error"
        assert calls == ["abcd"]

    def test_custom_rule_runs_for_empty_optional(self):
        """Test that an empty optional value still reaches the custom rule."""
        field = make_field(label="Referral", custom=lambda value, values: "Pick one" if not value else None)
        assert validate_field(field, "", {}) == "Pick one"

    def test_empty_message_means_valid(self):
        """Test that an empty string from a custom rule is not an error."""
        field = make_field(custom=lambda value, values: "")
        assert validate_field(field, "x", {}) is None


@pytest.fixture
def conditional_schema() -> FormSchema:
    return FormSchema(fields=[
        FieldSchema(name="has_company", label="Has company"),
        FieldSchema(
            name="company",
            label="Company",
            validation=ValidationRule(required=True),
            conditional=ConditionalRule(field="has_company", operator="equals", value="yes"),
        ),
    ])


class TestValidateForm:
    """Tests for whole-form validation."""

    def test_hidden_field_ignored(self, conditional_schema):
        """Test that a hidden required field is not validated."""
        assert validate_form(conditional_schema, {"has_company": "no"}) == {}

    def test_visible_field_validated(self, conditional_schema):
        """Test that the same field is validated once visible."""
        errors = validate_form(conditional_schema, {"has_company": "yes", "company": ""})
        assert errors == {"company": "Company is required"}

    def test_explicitly_hidden_field_ignored(self):
        """Test that the hidden flag excludes a field from validation."""
        schema = FormSchema(fields=[
            FieldSchema(name="token", label="Token", hidden=True, validation=ValidationRule(required=True)),
        ])
        assert validate_form(schema, {}) == {}

    def test_idempotent(self, conditional_schema):
        """Test that validating twice gives the same result."""
        values = {"has_company": "yes"}
        assert validate_form(conditional_schema, values) == validate_form(conditional_schema, values)

    def test_step_validator_merged(self):
        """Test that the current step's validator adds its errors."""
        def dates_in_order(values):
            if values.get("end", 0) < values.get("start", 0):
                return {"end": "End must be after start"}
            return {}

        schema = FormSchema(
            fields=[
                FieldSchema(name="start", kind="number", label="Start"),
                FieldSchema(name="end", kind="number", label="End"),
                FieldSchema(name="notes", label="Notes", validation=ValidationRule(required=True)),
            ],
            steps=[
                Step(title="Dates", fields=["start", "end"], validator=dates_in_order),
                Step(title="Notes", fields=["notes"]),
            ],
        )
        values = {"start": 5, "end": 1}
        assert validate_form(schema, values, 0) == {
            "end": "End must be after start",
            "notes": "Notes is required",
        }
        assert validate_form(schema, values, 1) == {"notes": "Notes is required"}

    def test_step_validator_unknown_field_raises(self):
        """Test that a step validator naming an undeclared field fails fast."""
        schema = FormSchema(
            fields=[FieldSchema(name="email", label="Email")],
            steps=[Step(title="Account", fields=["email"], validator=lambda values: {"phone": "bad"})],
        )
        with pytest.raises(UnknownFieldError):
            validate_form(schema, {}, 0)


class TestValidateStep:
    """Tests for single-step validation."""

    def test_only_step_fields_validated(self):
        """Test that fields of other steps are ignored."""
        schema = FormSchema(
            fields=[
                FieldSchema(name="email", label="Email", validation=ValidationRule(required=True)),
                FieldSchema(name="name", label="Name", validation=ValidationRule(required=True)),
            ],
            steps=[
                Step(title="Account", fields=["email"]),
                Step(title="Profile", fields=["name"]),
            ],
        )
        assert validate_step(schema, {}, 0) == {"email": "Email is required"}
        assert validate_step(schema, {"email": "a@b.co"}, 0) == {}
        assert validate_step(schema, {}, 1) == {"name": "Name is required"}
