"""API route modules."""

from .constraints import router as constraints_router
from .exports import router as exports_router
from .health import router as health_router

__all__ = ["health_router", "constraints_router", "exports_router"]
