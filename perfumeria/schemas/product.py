"""
==============================================================================
Product Schemas Module
==============================================================================

Request and response schemas for the /products endpoints.

==============================================================================
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from perfumeria.catalog.models import ProductFields
from perfumeria.utils.validators import ProductCodeValidator


_code_validator = ProductCodeValidator()


def _checked_codigo(value: Any) -> str:
    # Numeric codes are stored as strings
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if value is not None and not isinstance(value, str):
        raise ValueError("codigo must be a string")

    is_valid, normalized, error = _code_validator.validate(value)
    if not is_valid:
        raise ValueError(error)
    return normalized


class ProductIn(ProductFields):
    """
    One entry of a bulk product upload.

    ``stock`` is a delta added to the stored stock, not a new total.
    """

    codigo: str = Field(..., description="Business code")
    stock: int = Field(default=0, description="Stock delta to apply")

    @field_validator("codigo", mode="before")
    @classmethod
    def validate_codigo(cls, v: Any) -> str:
        return _checked_codigo(v)


class ProductReplace(ProductFields):
    """
    Full replacement of a product.

    Omitted fields fall back to their defaults. ``codigo`` may be omitted
    to keep the current one.
    """

    codigo: Optional[str] = Field(default=None)
    stock: int = Field(default=0, description="New stock total")

    @model_validator(mode="before")
    @classmethod
    def reject_empty_body(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data:
            raise ValueError("Request body is empty")
        return data

    @field_validator("codigo", mode="before")
    @classmethod
    def validate_codigo(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return _checked_codigo(v)


class LocationUpdate(BaseModel):
    """Body of PATCH /products/location/{codigo}."""

    location: str = Field(..., description="New warehouse location")

    @field_validator("location")
    @classmethod
    def location_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Location is required")
        return v


class FieldError(BaseModel):
    """A single field validation message."""

    field: str
    message: str


class EntryError(BaseModel):
    """Validation failure of one bulk upload entry."""

    index: int = Field(..., description="Position of the entry in the upload")
    codigo: Optional[str] = None
    errors: List[FieldError]


class BulkUpsertResponse(BaseModel):
    """Result of POST /products."""

    success: bool = Field(default=True)
    status: str = Field(default="success", description="success or partial")
    inserted_count: int = Field(default=0, serialization_alias="insertedCount")
    modified_count: int = Field(default=0, serialization_alias="modifiedCount")
    errors: List[EntryError] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    """Result of the delete endpoints."""

    success: bool = Field(default=True)
    message: str
    deleted_count: int = Field(default=1, serialization_alias="deletedCount")
