"""
API v1 package.

Contains versioned API routes for the Credential Registry API.
"""

from credential_registry.api.v1.routes import router

__all__ = ["router"]
