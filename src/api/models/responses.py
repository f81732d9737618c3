"""Pydantic response models for API endpoints."""

from pydantic import BaseModel

from api.models.requests import TaskModel
from models.tasks import WarningType


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class WarningResponse(BaseModel):
    """A single constraint warning, keyed by (task_id, type) for dismissal."""

    message: str
    type: WarningType
    task_id: str
    task: TaskModel


class ConstraintCheckResponse(BaseModel):
    """Result of evaluating a task list."""

    warnings: list[WarningResponse]
    count: int


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
