"""API Routers for the NeuroLink demo server."""

from .schema import router as schema_router
from .use_cases import router as use_cases_router

__all__ = ["schema_router", "use_cases_router"]
