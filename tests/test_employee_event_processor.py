"""
Tests for the consumer state machine: decode, invalidate, broadcast, settle.
"""

import asyncio
import json

import pytest

from employee_sync.common.enums.enums import EmployeeEventType, ProcessingOutcome
from employee_sync.common.exceptions.exceptions import MalformedPayloadError
from employee_sync.employee.events import build_employee_event
from employee_sync.worker_core.event_processor.employee_event_processor import (
    EmployeeEventProcessor,
    decode_message,
    missing_fields_for,
)


USA_INCOMPLETE = {"id": 1, "country": "USA", "name": "John", "ssn": None, "salary": 75000, "address": "1 Main St"}
GERMANY_COMPLETE = {"id": 2, "country": "Germany", "salary": 65000, "goal": "Increase sales", "tax_id": "DE123456789"}


def _seed_usa_views(fake_redis):
    fake_redis.data.update({
        "checklist:country:USA": "{}",
        "employees:USA:1:15": "{}",
        "employees:USA:1": "{}",
        "checklist:country:Germany": "{}",
    })


def _body(event_type, employee, changed_fields=None):
    return build_employee_event(event_type, employee, changed_fields).to_message_body()


class TestDecode:

    def test_decodes_published_envelope(self):
        event = decode_message(_body(EmployeeEventType.UPDATED, USA_INCOMPLETE, ["ssn"]))

        assert event.event_type == "EmployeeUpdated"
        assert event.country == "USA"
        assert event.data["employee_id"] == 1

    def test_only_type_and_country_required(self):
        event = decode_message(b'{"event_type": "EmployeeDeleted", "country": "USA"}')

        assert event.data is None
        assert event.event_id is None

    @pytest.mark.parametrize("body", [
        b"not json",
        b"\xff\xfe",
        b"[1, 2]",
        b'"string"',
        b"{}",
        b'{"event_type": "EmployeeCreated"}',
        b'{"country": "USA"}',
        b'{"event_type": "", "country": "USA"}',
        b'{"event_type": "EmployeeCreated", "country": "   "}',
        b'{"event_type": 5, "country": "USA"}',
    ])
    def test_malformed(self, body):
        with pytest.raises(MalformedPayloadError):
            decode_message(body)


class TestMissingFields:

    def test_from_envelope_data(self):
        data = {"employee_id": 1, "changed_fields": [], "employee": USA_INCOMPLETE}

        assert missing_fields_for("USA", data) == ["SSN is required or invalid"]

    def test_complete_snapshot(self):
        assert missing_fields_for("DE", {"employee": GERMANY_COMPLETE}) == []

    def test_empty_snapshot(self):
        assert missing_fields_for("USA", {"employee_id": 1, "employee": {}}) == []
        assert missing_fields_for("USA", None) == []

    def test_bare_snapshot(self):
        assert missing_fields_for("USA", {"ssn": "1", "salary": 1}) == ["Address is required or invalid"]

    def test_null_snapshot_falls_back_to_outer_data(self):
        assert missing_fields_for("USA", {"employee": None, "employee_id": 1}) == [
            "SSN is required or invalid",
            "Salary is required or invalid",
            "Address is required or invalid",
        ]
        assert missing_fields_for("USA", {"employee": None, "ssn": "1", "salary": 1, "address": "x"}) == []


class TestProcessor:

    def test_updated_event_invalidates_and_broadcasts(self, cache, notifier, fake_redis):
        _seed_usa_views(fake_redis)
        processor = EmployeeEventProcessor(cache, notifier)

        outcome = asyncio.run(processor.handle_message(_body(EmployeeEventType.UPDATED, USA_INCOMPLETE, ["ssn"])))

        assert outcome is ProcessingOutcome.ACKNOWLEDGED
        assert list(fake_redis.data) == ["checklist:country:Germany"]

        checklist = [json.loads(m) for m in fake_redis.published("checklist.USA")]
        assert checklist == [{
            "country": "USA",
            "event_type": "EmployeeUpdated",
            "message": "Checklist data invalidated for USA. Some items need attention.",
            "missing_fields": ["SSN is required or invalid"],
        }]

        employees = [json.loads(m) for m in fake_redis.published("employees.USA")]
        assert employees[0]["event_type"] == "EmployeeUpdated"
        assert employees[0]["data"]["employee"]["id"] == 1

    def test_checklist_notification_precedes_employee_notification(self, cache, notifier, fake_redis):
        processor = EmployeeEventProcessor(cache, notifier)

        asyncio.run(processor.handle_message(_body(EmployeeEventType.CREATED, GERMANY_COMPLETE)))

        assert [channel for channel, _ in fake_redis.messages] == ["checklist.Germany", "employees.Germany"]
        message = json.loads(fake_redis.messages[0][1])
        assert message["message"] == "Checklist updated for Germany. All data complete."
        assert message["missing_fields"] == []

    def test_invalidation_happens_before_broadcast(self, cache, notifier, fake_redis):
        calls = []
        original_delete, original_publish = fake_redis.delete, fake_redis.publish

        async def delete(*keys):
            calls.append("delete")
            return await original_delete(*keys)

        async def publish(channel, message):
            calls.append("publish")
            return await original_publish(channel, message)

        fake_redis.delete = delete
        fake_redis.publish = publish

        asyncio.run(EmployeeEventProcessor(cache, notifier).handle_message(
            _body(EmployeeEventType.UPDATED, USA_INCOMPLETE, ["salary"])
        ))

        assert calls[0] == "delete"
        assert calls[-2:] == ["publish", "publish"]

    def test_deleted_event_with_empty_snapshot(self, cache, notifier, fake_redis):
        _seed_usa_views(fake_redis)
        body = json.dumps({
            "event_type": "EmployeeDeleted",
            "country": "USA",
            "data": {"employee_id": 1, "changed_fields": [], "employee": {}},
        }).encode()

        outcome = asyncio.run(EmployeeEventProcessor(cache, notifier).handle_message(body))

        assert outcome is ProcessingOutcome.ACKNOWLEDGED
        assert "checklist:country:USA" not in fake_redis.data
        assert json.loads(fake_redis.published("checklist.USA")[0])["missing_fields"] == []

    def test_malformed_message_is_dropped_without_side_effects(self, cache, notifier, fake_redis):
        _seed_usa_views(fake_redis)
        before = dict(fake_redis.data)

        outcome = asyncio.run(EmployeeEventProcessor(cache, notifier).handle_message(b'{"country": "USA"}'))

        assert outcome is ProcessingOutcome.DROPPED
        assert fake_redis.data == before
        assert fake_redis.messages == []

    def test_redelivery_is_idempotent(self, cache, notifier, fake_redis):
        _seed_usa_views(fake_redis)
        processor = EmployeeEventProcessor(cache, notifier)
        body = _body(EmployeeEventType.UPDATED, USA_INCOMPLETE, ["ssn"])

        async def twice():
            return await processor.handle_message(body), await processor.handle_message(body)

        first, second = asyncio.run(twice())

        assert first is second is ProcessingOutcome.ACKNOWLEDGED
        assert list(fake_redis.data) == ["checklist:country:Germany"]
        published = fake_redis.published("checklist.USA")
        assert len(published) == 2
        assert published[0] == published[1]

    def test_unknown_country_still_invalidates(self, cache, notifier, fake_redis):
        fake_redis.data["checklist:country:France"] = "{}"

        outcome = asyncio.run(EmployeeEventProcessor(cache, notifier).handle_message(
            b'{"event_type": "EmployeeCreated", "country": "France", "data": {"employee": {"id": 9}}}'
        ))

        assert outcome is ProcessingOutcome.ACKNOWLEDGED
        assert fake_redis.data == {}
        assert json.loads(fake_redis.published("checklist.France")[0])["missing_fields"] == []

    def test_cache_failure_requeues_without_broadcast(self, cache, notifier, fake_redis):
        fake_redis.configure_failure("delete")

        outcome = asyncio.run(EmployeeEventProcessor(cache, notifier).handle_message(
            _body(EmployeeEventType.UPDATED, USA_INCOMPLETE, ["ssn"])
        ))

        assert outcome is ProcessingOutcome.REQUEUED
        assert fake_redis.messages == []

    def test_broadcast_failure_requeues(self, cache, notifier, fake_redis):
        fake_redis.configure_failure("publish")

        outcome = asyncio.run(EmployeeEventProcessor(cache, notifier).handle_message(
            _body(EmployeeEventType.CREATED, GERMANY_COMPLETE)
        ))

        assert outcome is ProcessingOutcome.REQUEUED

    def test_processing_timeout_requeues(self, cache, notifier):
        class SlowNotifier:
            async def checklist_updated(self, *args):
                await asyncio.sleep(1)

            async def employee_data_updated(self, *args):
                return None

        processor = EmployeeEventProcessor(cache, SlowNotifier(), processing_timeout_seconds=0.01)

        outcome = asyncio.run(processor.handle_message(_body(EmployeeEventType.CREATED, GERMANY_COMPLETE)))

        assert outcome is ProcessingOutcome.REQUEUED
