"""API Pydantic models."""

from .requests import ConstraintCheckRequest, DismissalKey, TaskModel, TasksRequest
from .responses import (
    ConstraintCheckResponse,
    ErrorCodes,
    ErrorResponse,
    HealthResponse,
    WarningResponse,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "ConstraintCheckRequest",
    "ConstraintCheckResponse",
    "DismissalKey",
    "TaskModel",
    "TasksRequest",
    "WarningResponse",
]
