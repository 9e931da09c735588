"""Unit tests for form data validation."""

import pytest

from config.errors import ValidationError
from services.template_registry import registry
from validators.form_validator import require_valid_form, validate_form_data
from tests.fixtures.mock_form_data import FIREPIT_GAS_FORM, FORMS_BY_TEMPLATE

VALID_FORMS = {**FORMS_BY_TEMPLATE, "firepit": FIREPIT_GAS_FORM}


@pytest.fixture
def deck_template():
    return registry.get_template("deck-refresh")


class TestValidateFormData:
    """validate_form_data against template field specs."""

    @pytest.mark.parametrize("template_id", list(VALID_FORMS))
    def test_sample_forms_are_valid(self, template_id):
        result = validate_form_data(registry.get_template(template_id), VALID_FORMS[template_id])

        assert result.is_valid, result.errors

    def test_cleaned_values_are_typed(self, deck_template, deck_form):
        deck_form.update(deckLength="20", pressureWashing="false")

        result = validate_form_data(deck_template, deck_form)

        assert result.cleaned["deckLength"] == 20.0
        assert result.cleaned["pressureWashing"] is False
        assert result.cleaned["notes"] == "Back deck facing the garden"

    def test_missing_required(self, deck_template, deck_form):
        del deck_form["stainType"]
        deck_form["deckLength"] = ""

        result = validate_form_data(deck_template, deck_form)

        assert not result.is_valid
        assert set(result.field_errors) == {"stainType", "deckLength"}
        assert result.field_errors["deckLength"].endswith("is required")

    def test_below_minimum(self, deck_template, deck_form):
        deck_form["deckWidth"] = 0

        result = validate_form_data(deck_template, deck_form)

        assert "must be at least" in result.field_errors["deckWidth"]

    def test_above_maximum(self, deck_template, deck_form):
        deck_form["deckLength"] = 10000

        result = validate_form_data(deck_template, deck_form)

        assert "must be at most" in result.field_errors["deckLength"]

    def test_not_a_number(self, deck_template, deck_form):
        deck_form["deckWidth"] = "twelve"

        result = validate_form_data(deck_template, deck_form)

        assert result.field_errors["deckWidth"].endswith("must be a number")

    def test_invalid_select_option(self, deck_template, deck_form):
        deck_form["stainType"] = "gold-leaf"

        result = validate_form_data(deck_template, deck_form)

        assert "not a valid option" in result.field_errors["stainType"]

    def test_invalid_checkbox_group_option(self):
        form = {**FORMS_BY_TEMPLATE["lawn-mowing"], "obstacles": ["trees", "trampoline"]}

        result = validate_form_data(registry.get_template("lawn-mowing"), form)

        assert "trampoline" in result.field_errors["obstacles"]

    def test_hidden_field_not_validated(self, deck_template, deck_form):
        deck_form.update(railingRefresh=False, railingLength=-5)

        result = validate_form_data(deck_template, deck_form)

        assert result.is_valid
        assert "railingLength" not in result.cleaned

    def test_visible_dependent_field_validated(self, deck_template, deck_form):
        deck_form.update(railingRefresh=True, railingLength=500)

        result = validate_form_data(deck_template, deck_form)

        assert "must be at most" in result.field_errors["railingLength"]

    def test_unchecked_checkbox_defaults_false(self, deck_template, deck_form):
        del deck_form["pressureWashing"]

        result = validate_form_data(deck_template, deck_form)

        assert result.cleaned["pressureWashing"] is False

    def test_too_many_files(self, deck_template, deck_form):
        deck_form["images"] = [f"photo-{i}.jpg" for i in range(20)]

        result = validate_form_data(deck_template, deck_form)

        assert result.field_errors["images"].startswith("You can only upload up to")


class TestRequireValidForm:
    """require_valid_form raises with per-field details."""

    def test_returns_cleaned(self, deck_template, deck_form):
        cleaned = require_valid_form(deck_template, deck_form)

        assert cleaned["stainType"] == "semi-transparent"

    def test_raises_with_field_details(self, deck_template):
        with pytest.raises(ValidationError) as exc_info:
            require_valid_form(deck_template, {})

        assert exc_info.value.code == "INVALID_FIELD"
        assert "deckLength" in exc_info.value.details["fields"]


class TestFirepitForm:
    """Firepit size is required on submission even though estimates tolerate it."""

    def test_missing_size_reported(self, firepit_form):
        result = validate_form_data(registry.get_template("firepit"), firepit_form)

        assert list(result.field_errors) == ["firepitSize"]
