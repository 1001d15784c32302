"""Base Pydantic schemas and the response envelope."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    def present_fields(self) -> Dict[str, Any]:
        """
        Fields the caller actually sent, keyed by wire name.

        Explicit nulls are dropped as well, so "sent as null" and "not sent"
        both leave the stored value untouched.
        """
        return {
            key: value
            for key, value in self.model_dump(by_alias=True, exclude_unset=True).items()
            if value is not None
        }

    def document(self) -> Dict[str, Any]:
        """Every field with defaults applied, keyed by wire name."""
        return self.model_dump(by_alias=True)


class PaginationParams(BaseSchema):
    """Pagination parameters for collection endpoints."""

    page: int = Field(1, ge=1, description="Page number")
    limit: int = Field(20, ge=1, le=100, description="Items per page")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def api_response(
    data: Optional[Any] = None,
    message: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Build the ``{success, message?, data?}`` envelope shared by every endpoint."""
    body: Dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    body.update(extra)
    if data is not None:
        body["data"] = data
    return body


def error_body(message: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message}
    body.update(extra)
    return body


class HealthCheckResponse(BaseModel):
    """Health check response schema."""

    success: bool = True
    status: str = Field(description="Service status: healthy, unhealthy")
    timestamp: str = Field(description="Health check timestamp")
    version: str = Field(description="Service version")
    environment: str = Field(description="Environment name")
    dependencies: Dict[str, Dict[str, Any]] = Field(
        description="Dependency health status"
    )
