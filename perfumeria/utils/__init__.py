"""
==============================================================================
Utilities Package
==============================================================================

Modules:
--------
- validators: business code and internal identifier validation

==============================================================================
"""

from .validators import IdentifierValidator, ProductCodeValidator

__all__ = [
    "IdentifierValidator",
    "ProductCodeValidator",
]
