"""
Shared fixtures for unit tests.
"""

from __future__ import annotations

import json
import os
import types
import uuid
from typing import Any, Sequence

import pytest

# Must be in place before the handler module loads its config and creates
# its Powertools objects.
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("EVENTS_TABLE", "events-test")
os.environ.setdefault("SERVICE_NAME", "event-api-test")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "EventApiTest")


@pytest.fixture(scope="session", autouse=True)
def _env_vars():
    """
    Ensures a deterministic environment for every test run.
    Overwrite *only* the variables needed by the handlers.
    """
    original = os.environ.copy()
    os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "event-api-test")
    os.environ.setdefault("POWERTOOLS_LOG_LEVEL", "INFO")
    os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
    yield
    os.environ.clear()
    os.environ.update(original)


class InMemoryEventStore:
    """Dictionary-backed EventStore used in place of DynamoDB."""

    def __init__(self) -> None:
        self.items: dict[str, dict[str, Any]] = {}
        self.put_calls = 0

    def put(self, item: dict[str, Any]) -> None:
        self.put_calls += 1
        self.items[item["id"]] = dict(item)

    def scan(self, projection: Sequence[str]) -> list[dict[str, Any]]:
        return [
            {attr: item[attr] for attr in projection if attr in item}
            for item in self.items.values()
        ]

    def get(self, event_id: str) -> dict[str, Any] | None:
        item = self.items.get(event_id)
        return dict(item) if item is not None else None

    def delete(self, event_id: str) -> None:
        self.items.pop(event_id, None)


@pytest.fixture
def event_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def valid_payload() -> dict:
    return {
        "fullname": "Hugo",
        "description": "Test",
        "organiser": "Hugo",
        "event_date": 1554129229798,
    }


# ---------- Minimal, realistic API Gateway events ---------- #
def make_api_event(
    method: str,
    path: str,
    body: Any = None,
    path_parameters: dict | None = None,
) -> dict:
    """Builds an API Gateway REST (proxy integration) event."""
    if body is not None and not isinstance(body, str):
        body = json.dumps(body)
    return {
        "resource": path,
        "path": path,
        "httpMethod": method,
        "headers": {"Content-Type": "application/json"},
        "multiValueHeaders": {},
        "queryStringParameters": None,
        "multiValueQueryStringParameters": None,
        "pathParameters": path_parameters,
        "stageVariables": None,
        "requestContext": {
            "accountId": "000000000000",
            "apiId": "dummy",
            "httpMethod": method,
            "path": f"/dev{path}",
            "stage": "dev",
            "requestId": str(uuid.uuid4()),
            "identity": {"sourceIp": "127.0.0.1"},
        },
        "body": body,
        "isBase64Encoded": False,
    }


@pytest.fixture
def lambda_context():
    """A *very* small stand-in for the LambdaContext object."""
    return types.SimpleNamespace(
        function_name="event-api-test",
        function_version="$LATEST",
        memory_limit_in_mb=128,
        aws_request_id="req-" + uuid.uuid4().hex,
        invoked_function_arn="arn:aws:lambda:eu-west-1:000000000000:function:dummy",
        get_remaining_time_in_millis=lambda: 30000,
    )


@pytest.fixture
def api_event():
    """Factory fixture for API Gateway proxy events."""
    return make_api_event
