"""Response models for the HTTP surface.

EndpointResponse follows the shields.io endpoint schema. ErrorResponse is the
same shape with ``isError`` set, so a shields.io consumer still renders it.
"""

from enum import StrEnum

from pydantic import BaseModel, Field

JSON_MEDIA_TYPE = "application/json"
SVG_MEDIA_TYPE = "image/svg+xml"


class OutputFormat(StrEnum):
    ENDPOINT = "endpoint"  # shields.io endpoint JSON (default)
    RAW = "raw"  # backend result JSON, verbatim
    BADGE = "badge"  # rendered SVG


class BadgeStyle(StrEnum):
    FLAT = "flat"
    PLASTIC = "plastic"
    FLAT_SQUARE = "flat-square"


class EndpointResponse(BaseModel):
    schema_version: int = Field(default=1, serialization_alias="schemaVersion")
    label: str
    message: str
    color: str | None = None


class ErrorResponse(BaseModel):
    schema_version: int = Field(default=1, serialization_alias="schemaVersion")
    label: str
    message: str
    is_error: bool = Field(default=True, serialization_alias="isError")


class RenderedResponse(BaseModel):
    """Bytes ready to be written to the client."""

    status_code: int = 200
    media_type: str = JSON_MEDIA_TYPE
    body: bytes

    model_config = {"frozen": True}

    @property
    def is_error(self) -> bool:
        return self.status_code >= 400
