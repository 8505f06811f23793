"""
==============================================================================
API v1 Endpoints
==============================================================================

Version 1 of the REST API.

Routers:
--------
- health: Health check endpoints (public)
- auth: Registration, login and token refresh (public)
- products: Product catalog (bearer token required)

==============================================================================
"""

from . import health, auth, products

__all__ = ["health", "auth", "products"]
