"""
==============================================================================
Common Schemas Module
==============================================================================

Shared response schemas used across API endpoints.

==============================================================================
"""

from typing import Dict

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    components: Dict[str, str]
