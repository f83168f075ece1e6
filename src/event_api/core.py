# src/event_api/core.py

"""
Core business logic for the Event API.

`EventService` implements the four operations of the API: submit, list all,
get by id and delete by id. Each one validates its input fully, performs a
single call against the injected `EventStore`, and shapes the result into an
API Gateway proxy response.

Failures that the caller should see as an error status are raised as
`EventApiError` subclasses; the Lambda adapter turns them into responses.
A failed write on submit is the one exception: it is answered directly with a
500 response naming the event.
"""

import json
import logging
import time
import uuid
from typing import Any, Callable, Mapping

import pydantic

from .clients import EventStore
from .exceptions import (
    DeleteError,
    EventNotFoundError,
    FetchError,
    StorageError,
    ValidationError,
)
from .schemas import EVENT_SUMMARY_FIELDS, ApiGatewayResponse, Event, EventSubmission

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


def build_response(status_code: int, body: Any) -> ApiGatewayResponse:
    """Wraps *body* as a JSON API Gateway proxy response."""
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(body),
    }


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_event_id() -> str:
    # uuid1 is time-ordered, matching the ids already in the table.
    return str(uuid.uuid1())


def _require_event_id(event_id: str | None) -> str:
    if not isinstance(event_id, str) or not event_id:
        raise ValidationError(
            "An event id is required.", context={"event_id": event_id}
        )
    return event_id


class EventService:
    """Stateless request logic over an `EventStore`."""

    def __init__(
        self,
        store: EventStore,
        clock: Callable[[], int] = _now_ms,
        id_factory: Callable[[], str] = _new_event_id,
    ):
        self._store = store
        self._clock = clock
        self._id_factory = id_factory

    def submit(self, payload: Any) -> ApiGatewayResponse:
        """
        Validates *payload* and stores a new event built from it.

        Raises:
            ValidationError: the payload is not an object, or a required field
                is missing or has the wrong type. Nothing is written.
        """
        if not isinstance(payload, Mapping):
            raise ValidationError(
                "Couldn't submit event because of validation errors.",
                context={"payload_type": type(payload).__name__},
            )
        try:
            submission = EventSubmission.model_validate(payload)
        except pydantic.ValidationError as e:
            logger.warning(
                "Validation failed for submitted event.",
                extra={"validation_errors": e.errors(include_url=False)},
            )
            raise ValidationError(
                "Couldn't submit event because of validation errors.",
                context={
                    "errors": e.errors(include_url=False, include_context=False)
                },
            ) from e

        timestamp = self._clock()
        event = Event(
            id=self._id_factory(),
            fullname=submission.fullname,
            description=submission.description,
            organiser=submission.organiser,
            event_date=submission.event_date,
            submitted_at=timestamp,
            updated_at=timestamp,
        )

        logger.info("Submitting event", extra={"event_id": event.id})
        try:
            self._store.put(event.to_item())
        except StorageError as e:
            logger.error(
                "Failed to store submitted event.",
                extra={"event_id": event.id, "error": e.to_dict()},
            )
            return build_response(
                500, {"message": f"Unable to submit event with name {event.fullname}"}
            )

        return build_response(
            200,
            {
                "message": f"Successfully submitted event with name {event.fullname}",
                "eventId": event.id,
            },
        )

    def list_all(self) -> ApiGatewayResponse:
        """Returns every stored event, without its timestamps."""
        logger.info("Scanning events table.")
        events = self._store.scan(EVENT_SUMMARY_FIELDS)
        logger.info("Scan succeeded.", extra={"events_count": len(events)})
        return build_response(200, {"events": events})

    def get_by_id(self, event_id: str) -> ApiGatewayResponse:
        """
        Returns the full stored record for *event_id*.

        Raises:
            EventNotFoundError: no event is stored under *event_id*.
            FetchError: the table could not be read.
        """
        event_id = _require_event_id(event_id)
        try:
            item = self._store.get(event_id)
        except StorageError as e:
            raise FetchError(event_id, context=e.context) from e

        if item is None:
            raise EventNotFoundError(event_id)
        return build_response(200, item)

    def delete_by_id(self, event_id: str) -> ApiGatewayResponse:
        """
        Deletes *event_id*. Succeeds whether or not the event existed.

        Raises:
            DeleteError: the table rejected the delete.
        """
        event_id = _require_event_id(event_id)
        try:
            self._store.delete(event_id)
        except StorageError as e:
            raise DeleteError(event_id, context=e.context) from e

        logger.info("Deleted event", extra={"event_id": event_id})
        return build_response(
            200, {"message": f"Deleted item with id {event_id}", "id": event_id}
        )
