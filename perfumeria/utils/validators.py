"""
==============================================================================
Validation Utilities Module
==============================================================================

Small validators shared by the stores and the services.

- ProductCodeValidator: business code (codigo) checks
- IdentifierValidator: internal identifier (UUID) checks

==============================================================================
"""

from __future__ import annotations

import uuid
from typing import Optional, Tuple


class ProductCodeValidator:
    """
    Validator for product business codes.

    Rules:
    - Required, not blank after trimming
    - At most 100 characters
    - No '/' (codes appear as a single path segment)
    - Not a reserved route segment ('all')

    Example:
        >>> ProductCodeValidator().validate("  PF-001 ")
        (True, 'PF-001', None)
    """

    MAX_LENGTH = 100

    # Path segments that /products/{codigo} routes can never reach
    RESERVED_CODES = frozenset({"all"})

    def validate(self, codigo: Optional[str]) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Validate and normalize a codigo.

        Returns:
            Tuple of (is_valid, normalized_codigo, error_message)
        """
        if codigo is None:
            return False, None, "codigo is required"

        codigo = codigo.strip()

        if not codigo:
            return False, None, "codigo cannot be empty"

        if len(codigo) > self.MAX_LENGTH:
            return False, None, f"codigo must be at most {self.MAX_LENGTH} characters"

        if "/" in codigo:
            return False, None, "codigo cannot contain '/'"

        if codigo.lower() in self.RESERVED_CODES:
            return False, None, f"codigo '{codigo}' is reserved"

        return True, codigo, None


class IdentifierValidator:
    """Validator for internal product identifiers (canonical UUID strings)."""

    @staticmethod
    def generate() -> str:
        """Generate a new identifier in canonical form."""
        return str(uuid.uuid4())

    def normalize(self, value: str) -> Optional[str]:
        """Return the canonical form of ``value``, or None if malformed."""
        try:
            return str(uuid.UUID(str(value)))
        except (ValueError, AttributeError, TypeError):
            return None
