"""Unit tests for the template catalog and registry.

Verifies the referential integrity of the static template data: every
option of a priced field has a pricing entry, and every dependsOn points at
a real field.
"""

import pytest

from config.errors import TemplateNotFoundError
from models.template import FieldType, OPTION_FIELD_TYPES
from services.template_registry import (
    TemplateRegistry,
    file_field_ids,
    registry,
    visible_form_data,
)

EXPECTED_TEMPLATES = ["deck-refresh", "firepit", "lawn-mowing", "garden-bed", "pressure-washing"]
OPTION_TYPES = {t.value for t in OPTION_FIELD_TYPES}


class TestTemplateRegistry:
    """Tests for TemplateRegistry lookups."""

    def test_catalog_contains_all_templates(self):
        assert registry.template_ids() == EXPECTED_TEMPLATES

    def test_get_template(self):
        template = registry.get_template("deck-refresh")

        assert template.title == "Deck Refresh"
        assert template.complexity == "medium"
        assert template.estimated_time == "1-2 days"

    def test_get_unknown_template_raises(self):
        with pytest.raises(TemplateNotFoundError) as exc_info:
            registry.get_template("kitchen-remodel")

        assert exc_info.value.template_id == "kitchen-remodel"
        assert exc_info.value.to_dict()["code"] == "TEMPLATE_NOT_FOUND"

    def test_has_template(self):
        assert registry.has_template("firepit")
        assert not registry.has_template("")

    def test_custom_registry(self):
        deck = registry.get_template("deck-refresh")
        custom = TemplateRegistry({"deck-refresh": deck})

        assert custom.template_ids() == ["deck-refresh"]
        assert not custom.has_template("firepit")

    def test_summary_excludes_fields_and_pricing(self):
        summary = registry.get_template("firepit").to_summary()

        assert summary["estimatedTime"] == "2-3 days"
        assert "fields" not in summary
        assert "pricing" not in summary

    def test_templates_are_immutable(self):
        template = registry.get_template("lawn-mowing")

        with pytest.raises(Exception):
            template.title = "Changed"


class TestCatalogIntegrity:
    """Referential integrity of the template data."""

    @pytest.mark.parametrize("template_id", EXPECTED_TEMPLATES)
    def test_every_priced_option_has_pricing_entry(self, template_id):
        template = registry.get_template(template_id)

        for field_id, table_path in template.priced_fields.items():
            field = template.get_field(field_id)
            table = template.pricing_table(table_path)

            assert field is not None, f"{template_id}: priced field '{field_id}' does not exist"
            assert isinstance(table, dict), f"{template_id}: table '{table_path}' missing"
            missing = [v for v in field.option_values() if v not in table]
            assert not missing, f"{template_id}.{field_id}: no pricing for {missing}"

    @pytest.mark.parametrize("template_id", EXPECTED_TEMPLATES)
    def test_every_option_field_is_priced(self, template_id):
        template = registry.get_template(template_id)

        option_fields = [f.id for f in template.fields if f.type in OPTION_TYPES]
        assert sorted(option_fields) == sorted(template.priced_fields)

    @pytest.mark.parametrize("template_id", EXPECTED_TEMPLATES)
    def test_depends_on_references_existing_field(self, template_id):
        template = registry.get_template(template_id)

        for field in template.fields:
            if field.depends_on:
                parent = template.get_field(field.depends_on)
                assert parent is not None
                assert parent.type == FieldType.CHECKBOX.value

    @pytest.mark.parametrize("template_id", EXPECTED_TEMPLATES)
    def test_scalar_constants_present(self, template_id):
        pricing = registry.get_template(template_id).pricing

        assert pricing["transportation"] >= 0
        assert pricing["disposal"] >= 0
        assert "labor_hours" in pricing

    def test_deck_refresh_constants(self):
        pricing = registry.get_template("deck-refresh").pricing

        assert pricing["labor_hours"]["base"] == 8
        assert pricing["labor_hours"]["per_sq_ft"] == 0.15
        assert pricing["labor_hours"]["conditions"]["good"] == 1.2
        assert pricing["materials"]["stain"]["semi-transparent"]["price_per_sq_ft"] == 4
        assert pricing["transportation"] == 50
        assert pricing["disposal"] == 75

    def test_firepit_constants(self):
        pricing = registry.get_template("firepit").pricing

        assert pricing["materials"]["firepit"]["stone-ring"]["price"] == 800
        assert pricing["materials"]["fuel"]["gas"] == {
            "price": 400, "labor_hours": 4, "description": "Gas line installation materials"
        }
        assert pricing["size_multipliers"]["3ft"] == 1.0
        assert pricing["transportation"] == 75
        assert pricing["disposal"] == 150


class TestFormHelpers:
    """Tests for visible_form_data and file_field_ids."""

    def test_hidden_field_dropped(self):
        template = registry.get_template("deck-refresh")
        visible = visible_form_data(template, {"railingRefresh": False, "railingLength": 40})

        assert "railingLength" not in visible
        assert visible["railingRefresh"] is False

    def test_visible_field_kept(self):
        template = registry.get_template("deck-refresh")
        visible = visible_form_data(template, {"railingRefresh": True, "railingLength": 40})

        assert visible["railingLength"] == 40

    def test_string_false_hides_field(self):
        template = registry.get_template("garden-bed")
        visible = visible_form_data(template, {"edging": "false", "edgingLength": 20})

        assert "edgingLength" not in visible

    def test_input_not_mutated(self):
        template = registry.get_template("deck-refresh")
        form = {"railingRefresh": False, "railingLength": 40}
        visible_form_data(template, form)

        assert form == {"railingRefresh": False, "railingLength": 40}

    def test_file_field_ids(self):
        assert file_field_ids(registry.get_template("firepit")) == ["images"]
