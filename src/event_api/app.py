"""
The Lambda Adapter for the Event API service.

This module holds the AWS Lambda entry points, one per API operation:

- ``submit``        POST   /events
- ``get_all``       GET    /events
- ``get_by_id``     GET    /event/{id}
- ``delete_by_id``  DELETE /event/{id}

Each handler is responsible for:
1.  Wiring AWS Lambda Powertools (Logger, Tracer and Metrics) around the call.
2.  Reading the body or path parameters from the API Gateway proxy event.
3.  Delegating to `EventService`.
4.  Turning any `EventApiError` into a JSON error response.
"""

import json
from functools import lru_cache
from typing import Any, Callable

import boto3
from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.data_classes import (
    APIGatewayProxyEvent,
    event_source,
)
from aws_lambda_powertools.utilities.typing import LambdaContext

from .clients import DynamoDBEventStore
from .config import get_config
from .core import EventService, build_response
from .exceptions import (
    EventApiError,
    EventNotFoundError,
    StorageError,
    ValidationError,
    get_error_context,
)
from .schemas import ApiGatewayResponse

# --- Global & Reusable Components ---
CONFIG = get_config()

logger = Logger(service=CONFIG.service_name, level=CONFIG.log_level)
tracer = Tracer(service=CONFIG.service_name)
metrics = Metrics(namespace="EventApi", service=CONFIG.service_name)


@lru_cache(maxsize=1)
def get_event_service() -> EventService:
    """
    Builds the EventService for this container on first use.

    Cached so the boto3 resource is reused across warm invocations.
    """
    config = get_config()
    dynamodb = boto3.resource("dynamodb", endpoint_url=config.dynamodb_endpoint_url)
    table = dynamodb.Table(config.events_table)
    logger.info(
        "EventService initialised",
        extra={"table": config.events_table, "environment": config.environment},
    )
    return EventService(store=DynamoDBEventStore(table))


def error_response(error: EventApiError) -> ApiGatewayResponse:
    body: dict[str, Any] = {"message": error.message, "errorCode": error.error_code}
    if isinstance(error, ValidationError) and "errors" in error.context:
        body["errors"] = error.context["errors"]
    return build_response(error.status_code, body)


def _record_failure(error: EventApiError) -> None:
    if isinstance(error, ValidationError):
        metrics.add_metric(name="ValidationFailures", unit=MetricUnit.Count, value=1)
        logger.warning(f"Rejected request: {error}", extra={"error": get_error_context(error)})
    elif isinstance(error, EventNotFoundError):
        metrics.add_metric(name="EventsNotFound", unit=MetricUnit.Count, value=1)
        logger.info(f"Event not found: {error.event_id}")
    elif isinstance(error, StorageError):
        metrics.add_metric(name="StorageFailures", unit=MetricUnit.Count, value=1)
        logger.error(f"Storage error: {error}", extra={"error": get_error_context(error)})
    else:
        logger.error(f"Application error: {error}", extra={"error": get_error_context(error)})


def _respond(operation: Callable[[], ApiGatewayResponse]) -> ApiGatewayResponse:
    """Runs *operation*, converting service errors into error responses."""
    try:
        return operation()
    except EventApiError as e:
        _record_failure(e)
        return error_response(e)
    except Exception:
        logger.exception("Unexpected error while handling request.")
        raise


def _parse_json_body(event: APIGatewayProxyEvent) -> Any:
    if not event.body:
        raise ValidationError("Request body is required.")
    body = event.body
    if event.is_base64_encoded:
        body = event.decoded_body
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise ValidationError(
            "Request body is not valid JSON.", context={"error": str(e)}
        ) from e


def _path_event_id(event: APIGatewayProxyEvent) -> str | None:
    return (event.path_parameters or {}).get("id")


@logger.inject_lambda_context(clear_state=True)
@tracer.capture_lambda_handler
@metrics.log_metrics(capture_cold_start_metric=True)
@event_source(data_class=APIGatewayProxyEvent)
def submit(event: APIGatewayProxyEvent, context: LambdaContext) -> ApiGatewayResponse:
    """POST /events"""
    metrics.add_dimension("environment", CONFIG.environment)

    def operation() -> ApiGatewayResponse:
        response = get_event_service().submit(_parse_json_body(event))
        if response["statusCode"] == 200:
            metrics.add_metric(name="EventsSubmitted", unit=MetricUnit.Count, value=1)
        else:
            metrics.add_metric(name="StorageFailures", unit=MetricUnit.Count, value=1)
        return response

    return _respond(operation)


@logger.inject_lambda_context(clear_state=True)
@tracer.capture_lambda_handler
@metrics.log_metrics(capture_cold_start_metric=True)
@event_source(data_class=APIGatewayProxyEvent)
def get_all(event: APIGatewayProxyEvent, context: LambdaContext) -> ApiGatewayResponse:
    """GET /events"""
    metrics.add_dimension("environment", CONFIG.environment)

    def operation() -> ApiGatewayResponse:
        response = get_event_service().list_all()
        metrics.add_metric(name="EventsListed", unit=MetricUnit.Count, value=1)
        return response

    return _respond(operation)


@logger.inject_lambda_context(clear_state=True)
@tracer.capture_lambda_handler
@metrics.log_metrics(capture_cold_start_metric=True)
@event_source(data_class=APIGatewayProxyEvent)
def get_by_id(event: APIGatewayProxyEvent, context: LambdaContext) -> ApiGatewayResponse:
    """GET /event/{id}"""
    metrics.add_dimension("environment", CONFIG.environment)
    event_id = _path_event_id(event)
    logger.append_keys(event_id=event_id)
    return _respond(lambda: get_event_service().get_by_id(event_id))


@logger.inject_lambda_context(clear_state=True)
@tracer.capture_lambda_handler
@metrics.log_metrics(capture_cold_start_metric=True)
@event_source(data_class=APIGatewayProxyEvent)
def delete_by_id(
    event: APIGatewayProxyEvent, context: LambdaContext
) -> ApiGatewayResponse:
    """DELETE /event/{id}"""
    metrics.add_dimension("environment", CONFIG.environment)
    event_id = _path_event_id(event)
    logger.append_keys(event_id=event_id)

    def operation() -> ApiGatewayResponse:
        response = get_event_service().delete_by_id(event_id)
        metrics.add_metric(name="EventsDeleted", unit=MetricUnit.Count, value=1)
        return response

    return _respond(operation)
