# In src/event_api/schemas.py

from decimal import Decimal
from typing import Annotated, TypedDict, Union

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
)

# --- Static Type Hinting (for mypy and IDEs) ---


class ApiGatewayResponse(TypedDict):
    """The proxy-integration response shape API Gateway expects back."""

    statusCode: int
    headers: dict[str, str]
    body: str


# --- Runtime Validation (using Pydantic) ---

# DynamoDB numbers: at most 38 significant digits, magnitude 1E-128 to 9.9E+125
# (boto3 refuses anything its Decimal context would round or underflow).
DYNAMODB_MAX_DIGITS = 38
DYNAMODB_MIN_EXPONENT = -128
DYNAMODB_MAX_EXPONENT = 125


def _fits_dynamodb_number(value: int | float) -> int | float:
    number = Decimal(str(value))
    if number.is_zero():
        return value
    if len(number.as_tuple().digits) > DYNAMODB_MAX_DIGITS:
        raise ValueError(
            f"must have at most {DYNAMODB_MAX_DIGITS} significant digits"
        )
    if not DYNAMODB_MIN_EXPONENT <= number.adjusted() <= DYNAMODB_MAX_EXPONENT:
        raise ValueError("is outside the range of numbers the table can store")
    return value


# bools are rejected by the strict types; NaN/inf cannot be stored as a Decimal.
EventDate = Annotated[
    Union[StrictInt, Annotated[StrictFloat, Field(allow_inf_nan=False)]],
    AfterValidator(_fits_dynamodb_number),
]


class EventSubmission(BaseModel):
    """
    Pydantic model for the body of a submit request.

    Types are checked strictly, with no coercion: ``"123"`` is not a valid
    ``event_date`` and ``123`` is not a valid ``fullname``. The older
    ``name``/``date`` keys are still accepted.
    """

    model_config = ConfigDict(extra="ignore")

    fullname: StrictStr = Field(validation_alias=AliasChoices("fullname", "name"))
    description: StrictStr
    organiser: StrictStr
    event_date: EventDate = Field(validation_alias=AliasChoices("event_date", "date"))


class EventSummary(BaseModel):
    """The projection returned by the list operation."""

    id: str
    fullname: str
    description: str
    organiser: str
    event_date: int | float


class Event(EventSummary):
    """A stored event, as written to the table."""

    model_config = ConfigDict(populate_by_name=True)

    submitted_at: int = Field(alias="submittedAt")
    updated_at: int = Field(alias="updatedAt")

    def to_item(self) -> dict:
        return self.model_dump(by_alias=True)


EVENT_SUMMARY_FIELDS: tuple[str, ...] = tuple(EventSummary.model_fields)
