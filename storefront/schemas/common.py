from decimal import Decimal
from typing import Annotated, Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer, model_serializer
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")

# Prices are stored as exact decimals but sent to clients as JSON numbers
Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class APIModel(BaseModel):
    """Base for every wire model: camelCase keys, readable from ORM objects."""

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )


class Envelope(APIModel, Generic[DataT]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[DataT] = None

    @model_serializer(mode="wrap")
    def drop_empty_fields(self, handler):
        # `message` and `data` are left out of the body when there is none
        return {key: value for key, value in handler(self).items() if value is not None}


class FieldError(APIModel):
    field: str
    message: str
    value: Any = None


class ErrorEnvelope(APIModel):
    success: bool = False
    error: str
    details: Optional[list[FieldError]] = None
