"""labrun API v1 endpoints."""

from labrun.api.v1.samples import router as samples_router

__all__ = [
    "samples_router",
]
