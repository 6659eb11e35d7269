"""
Tests for the per-country completeness validator.
"""

import pytest

from employee_sync.checklist.validator import normalize_country, rules_for, validate


USA_COMPLETE = {"ssn": "123-45-6789", "salary": 75000, "address": "1 Main St"}
GERMANY_COMPLETE = {"salary": 65000, "goal": "Increase sales", "tax_id": "DE123456789"}


class TestUsaRules:

    def test_complete_employee(self):
        result = validate(USA_COMPLETE, "USA")

        assert result.complete is True
        assert result.completion_percentage == 100
        assert [f.field for f in result.fields] == ["ssn", "salary", "address"]
        assert result.missing_messages == []

    def test_missing_ssn_does_not_affect_other_fields(self):
        result = validate({**USA_COMPLETE, "ssn": None}, "USA")

        by_field = {f.field: f for f in result.fields}
        assert by_field["ssn"].complete is False
        assert by_field["salary"].complete is True
        assert by_field["address"].complete is True
        assert result.complete is False
        assert result.completion_percentage == 67
        assert result.missing_messages == ["SSN is required or invalid"]

    @pytest.mark.parametrize("salary", [0, -100, None, "abc", True])
    def test_salary_must_be_positive_number(self, salary):
        result = validate({**USA_COMPLETE, "salary": salary}, "USA")

        assert result.complete is False
        assert result.missing_messages == ["Salary is required or invalid"]

    def test_blank_address_is_missing(self):
        result = validate({**USA_COMPLETE, "address": "   "}, "USA")

        assert result.missing_messages == ["Address is required or invalid"]

    @pytest.mark.parametrize("flag", [True, False])
    def test_boolean_is_not_a_filled_value(self, flag):
        result = validate({**USA_COMPLETE, "ssn": flag, "address": flag}, "USA")

        assert result.complete is False
        assert result.missing_messages == ["SSN is required or invalid", "Address is required or invalid"]

    def test_field_messages(self):
        result = validate({}, "USA")

        assert [f.message for f in result.fields] == [
            "SSN is required or invalid",
            "Salary is required or invalid",
            "Address is required or invalid",
        ]
        assert result.completion_percentage == 0

    def test_numeric_string_salary_counts(self):
        assert validate({**USA_COMPLETE, "salary": "50000.00"}, "USA").complete is True


class TestGermanyRules:

    def test_complete_employee(self):
        result = validate(GERMANY_COMPLETE, "Germany")

        assert result.complete is True
        assert result.completion_percentage == 100
        assert [f.message for f in result.fields] == [
            "Salary is complete",
            "Goal is complete",
            "Tax ID is complete",
        ]

    @pytest.mark.parametrize("tax_id", ["DE123", "de123456789", "DE1234567890", "XX123456789", "", None])
    def test_invalid_tax_id(self, tax_id):
        result = validate({**GERMANY_COMPLETE, "tax_id": tax_id}, "Germany")

        assert result.complete is False
        assert result.missing_messages == ["Tax ID is required or invalid"]

    def test_missing_goal(self):
        result = validate({**GERMANY_COMPLETE, "goal": ""}, "Germany")

        assert result.missing_messages == ["Goal is required or invalid"]

    def test_usa_fields_are_not_required(self):
        assert validate(GERMANY_COMPLETE, "Germany").complete is True
        assert validate(GERMANY_COMPLETE, "USA").complete is False


class TestCountryNormalization:

    @pytest.mark.parametrize("alias", ["DE", "de", "DEU", "Germany", "GERMANY", " germany "])
    def test_german_aliases(self, alias):
        assert normalize_country(alias) == "Germany"
        assert validate(GERMANY_COMPLETE, alias).complete is True

    @pytest.mark.parametrize("alias", ["USA", "usa", "Usa"])
    def test_usa_aliases(self, alias):
        assert normalize_country(alias) == "USA"

    def test_unknown_country_passes_through(self):
        assert normalize_country("France") == "France"
        assert rules_for("France") == []

    def test_unknown_country_is_vacuously_complete(self):
        result = validate({"anything": 1}, "France")

        assert result.fields == []
        assert result.complete is True
        assert result.completion_percentage == 0
        assert result.country == "France"


class TestValidatorProperties:

    def test_deterministic(self):
        employee = {"ssn": "", "salary": 10, "address": "x"}

        assert validate(employee, "USA") == validate(employee, "USA")

    def test_does_not_mutate_input(self):
        employee = dict(USA_COMPLETE)
        validate(employee, "USA")

        assert employee == USA_COMPLETE

    @pytest.mark.parametrize("employee", [
        {},
        USA_COMPLETE,
        {"ssn": "1"},
        {"ssn": "1", "salary": 1},
    ])
    def test_percentage_in_range(self, employee):
        result = validate(employee, "USA")

        assert 0 <= result.completion_percentage <= 100
        assert result.complete == (result.complete_count == len(result.fields))

    def test_to_dict(self):
        data = validate(GERMANY_COMPLETE, "DE").to_dict()

        assert data["complete"] is True
        assert data["completion_percentage"] == 100
        assert data["fields"][2] == {
            "field": "tax_id",
            "label": "Tax ID",
            "complete": True,
            "message": "Tax ID is complete",
        }
