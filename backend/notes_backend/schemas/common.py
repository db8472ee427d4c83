"""
Notes Backend: Shared Schemas
================================

What:  Response envelopes and the request-body parsing helper.

Envelope:
    success: {"status": "success", "data": ..., "meta": ...?}
    error:   {"status": "error", "code": "...", "message": "..."}
"""

from typing import Any, Generic, Literal, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from notes_backend.exceptions import ValidationError

DataT = TypeVar("DataT")
ModelT = TypeVar("ModelT", bound=BaseModel)


class ApiModel(BaseModel):
    """Response model serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(BaseModel, Generic[DataT]):
    status: Literal["success"] = "success"
    data: DataT


class ErrorResponse(BaseModel):
    """
    What:  Error envelope returned by every exception handler.

    Example:
        {"status": "error", "code": "not_found", "message": "Note not found"}
    """
    status: Literal["error"] = "error"
    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    status: str = Field(description="Always 'ok' while the process serves requests")
    message: str
    timestamp: str = Field(description="Server time (UTC ISO 8601)")
    environment: str
    version: str


def parse_payload(model: Type[ModelT], payload: Any) -> ModelT:
    """
    Validate a loosely-typed JSON body into `model`.

    Pydantic errors are converted into a single ValidationError carrying the
    first failing field, so the client sees one actionable message.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError(
            message="Request body must be a JSON object",
            context={"received": type(payload).__name__},
        )
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise ValidationError(
            message=first["msg"],
            field=field,
            context={"error_count": e.error_count()},
        ) from e
