"""
Notebook API - Pydantic Response Schemas
========================================

What:  Pydantic models for the fixed-shape responses of the API.
How:   FastAPI serializes route results through these models (by alias) and
       uses them for the OpenAPI document.

Documents themselves have no schema: notes and folders are returned as
plain dicts (user fields + `id` + `owner`).
"""

from pydantic import BaseModel, ConfigDict, Field


class InsertResponse(BaseModel):
    """
    What:  Acknowledgement of a successful create.
    Who:   Returned by POST /notes and POST /folders with HTTP 201.

    Example:
        {"acknowledged": true, "insertedId": "0f8fad5b-d9cb-469f-a165-70867728950e"}
    """
    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = Field(default=True)
    inserted_id: str = Field(alias="insertedId", description="Identifier of the new document")


class MessageResponse(BaseModel):
    """Success acknowledgement for update and delete."""
    message: str = Field(description="Human-readable result")


class ErrorResponse(BaseModel):
    """
    What:  Error format shared by every non-2xx response.

    Example:
        {"message": "Note not found"}
    """
    message: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer checks."""
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since the service started")