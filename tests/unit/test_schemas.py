# tests/unit/test_schemas.py

import pytest
import pydantic

from event_api.schemas import EVENT_SUMMARY_FIELDS, Event, EventSubmission


class TestEventSubmission:
    """Test suite for the EventSubmission Pydantic model."""

    def test_valid_submission(self):
        parsed = EventSubmission.model_validate(
            {
                "fullname": "Hugo",
                "description": "Test",
                "organiser": "Hugo",
                "event_date": 1554129229798,
            }
        )

        assert parsed.fullname == "Hugo"
        assert parsed.event_date == 1554129229798
        assert isinstance(parsed.event_date, int)

    def test_legacy_keys_are_accepted(self):
        parsed = EventSubmission.model_validate(
            {"name": "Roy", "description": "d", "organiser": "o", "date": 886545087}
        )

        assert parsed.fullname == "Roy"
        assert parsed.event_date == 886545087

    def test_unknown_keys_are_ignored(self):
        parsed = EventSubmission.model_validate(
            {
                "fullname": "Hugo",
                "description": "Test",
                "organiser": "Hugo",
                "event_date": 1,
                "id": "client-chosen",
            }
        )

        assert not hasattr(parsed, "id")

    @pytest.mark.parametrize(
        "bad_date",
        ["1", True, float("nan"), float("inf"), 1e200, -1e200, 1e-200, 10**40],
    )
    def test_event_date_must_be_a_storable_number(self, bad_date):
        with pytest.raises(pydantic.ValidationError):
            EventSubmission.model_validate(
                {
                    "fullname": "Hugo",
                    "description": "Test",
                    "organiser": "Hugo",
                    "event_date": bad_date,
                }
            )

    def test_strings_are_not_coerced(self):
        with pytest.raises(pydantic.ValidationError) as exc_info:
            EventSubmission.model_validate(
                {"fullname": 1, "description": 2, "organiser": "o", "event_date": 1}
            )

        failed = {error["loc"][0] for error in exc_info.value.errors()}
        assert failed == {"fullname", "description"}


class TestEvent:
    def test_to_item_uses_stored_attribute_names(self):
        event = Event(
            id="e1",
            fullname="Hugo",
            description="Test",
            organiser="Hugo",
            event_date=1554129229798,
            submitted_at=1554129300000,
            updated_at=1554129300000,
        )

        assert event.to_item() == {
            "id": "e1",
            "fullname": "Hugo",
            "description": "Test",
            "organiser": "Hugo",
            "event_date": 1554129229798,
            "submittedAt": 1554129300000,
            "updatedAt": 1554129300000,
        }

    def test_summary_fields_exclude_timestamps(self):
        assert EVENT_SUMMARY_FIELDS == (
            "id",
            "fullname",
            "description",
            "organiser",
            "event_date",
        )


@pytest.mark.parametrize(
    "event_date",
    [0, -1554129229798, 1e-128, 9.9e125, 12345678901234567890123456789012345678],
)
def test_event_date_within_table_number_range(event_date):
    parsed = EventSubmission.model_validate(
        {
            "fullname": "Hugo",
            "description": "Test",
            "organiser": "Hugo",
            "event_date": event_date,
        }
    )

    assert parsed.event_date == event_date
