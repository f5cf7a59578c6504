"""
Pydantic response models for MCP tools.

Every tool wraps its entities in a ToolResponse; failures are described
by an ErrorResponse carried inside the tool error.
"""
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class ResponseMetadata(BaseModel):
    """
    Metadata included in all tool responses.
    """

    execution_time_ms: float = Field(
        ...,
        ge=0,
        description="Tool execution time in milliseconds",
    )
    result_count: int = Field(
        ...,
        ge=0,
        description="Number of entities in data (1 for single lookups)",
    )


# Generic type for tool result data
T = TypeVar("T")


class ToolResponse(BaseModel, Generic[T]):
    """
    Generic response wrapper for all MCP tools.

    Example:
        >>> response = ToolResponse(
        ...     data={"posts": [...]},
        ...     metadata=ResponseMetadata(execution_time_ms=321.4, result_count=25),
        ... )
    """

    data: T = Field(
        ...,
        description="Tool-specific result data",
    )
    metadata: ResponseMetadata = Field(
        ...,
        description="Response metadata",
    )


class ErrorResponse(BaseModel):
    """
    Standardized error description.

    Attributes:
        code: JSON-RPC style error code
        message: Human-readable error message
        data: Optional additional error context
    """

    code: int = Field(
        ...,
        description="JSON-RPC error code",
    )
    message: str = Field(
        ...,
        min_length=1,
        description="Human-readable error message",
    )
    data: dict[str, Any] | None = Field(
        None,
        description="Additional error context",
    )


class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str = Field(
        ...,
        description="Overall health status (healthy, degraded, unhealthy)",
    )
    version: str = Field(
        ...,
        description="Server version",
    )
    components: dict[str, str] = Field(
        ...,
        description="Status of individual components",
    )
    grant_type: str | None = Field(
        None,
        description="OAuth2 grant used for the next token exchange",
    )
