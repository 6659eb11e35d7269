"""
Tests for the country-wide checklist aggregate.
"""

from employee_sync.checklist.computation import compute_country_checklist, display_name
from employee_sync.checklist.models import round_half_up


def _usa(employee_id, complete=True, **overrides):
    employee = {
        "id": employee_id,
        "name": "John",
        "last_name": "Doe",
        "country": "USA",
        "ssn": "123-45-6789" if complete else None,
        "salary": 75000,
        "address": "1 Main St",
    }
    employee.update(overrides)
    return employee


class TestComputeCountryChecklist:

    def test_overall_summary(self):
        employees = [_usa(1), _usa(2), _usa(3, complete=False)]

        checklist = compute_country_checklist(employees, "USA")

        assert checklist.overall.total == 3
        assert checklist.overall.complete == 2
        assert checklist.overall.percentage == 67

    def test_employee_rows(self):
        checklist = compute_country_checklist([_usa(7, complete=False)], "USA")

        row = checklist.employees[0]
        assert row.id == 7
        assert row.name == "John Doe"
        assert row.complete is False
        assert row.completion_percentage == 67
        assert [f.complete for f in row.fields] == [False, True, True]

    def test_empty_country(self):
        checklist = compute_country_checklist([], "Germany")

        assert checklist.to_dict() == {
            "country": "Germany",
            "overall": {"total": 0, "complete": 0, "percentage": 0},
            "employees": [],
        }

    def test_half_rounds_up(self):
        employees = [_usa(1), _usa(2, complete=False)]

        assert compute_country_checklist(employees, "USA").overall.percentage == 50
        assert round_half_up(12.5) == 13
        assert round_half_up(66.4) == 66

    def test_to_dict_shape(self):
        data = compute_country_checklist([_usa(1)], "USA").to_dict()

        assert set(data) == {"country", "overall", "employees"}
        assert set(data["employees"][0]) == {"id", "name", "fields", "completion_percentage", "complete"}


class TestDisplayName:

    def test_joins_first_and_last(self):
        assert display_name({"name": "Anna", "last_name": "Schmidt"}) == "Anna Schmidt"

    def test_missing_parts_are_trimmed(self):
        assert display_name({"name": "Anna"}) == "Anna"
        assert display_name({"last_name": "Schmidt"}) == "Schmidt"
        assert display_name({}) == ""
