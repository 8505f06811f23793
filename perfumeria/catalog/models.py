"""
==============================================================================
Product Models Module
==============================================================================

Pydantic models for catalog products.

ProductFields declares every descriptive field together with its default,
so stores, request schemas and responses all agree on what an omitted
field means.

==============================================================================
"""

import enum
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Genero(str, enum.Enum):
    """Target gender of a fragrance."""

    MASCULINO = "Masculino"
    FEMENINO = "Femenino"
    UNISEX = "Unisex"

    def __str__(self) -> str:
        return self.value


class Volumen(str, enum.Enum):
    """Bottle size variants."""

    ML_50 = "50ml"
    ML_75 = "75ml"
    ML_100 = "100ml"
    ML_150 = "150ml"
    ML_200 = "200ml"

    def __str__(self) -> str:
        return self.value


# Fields the bulk upload overwrites on every upsert. ``stock`` is excluded;
# upserts increment it instead.
DESCRIPTIVE_FIELDS = (
    "volumen",
    "nombre",
    "concentracion_alcohol",
    "marca",
    "descripcion",
    "categoria",
    "genero",
    "etiquetas",
    "precio",
    "precio_neto",
    "precio_neto_cs",
    "tiene_descuento",
    "porcentaje_descuento",
    "precio_con_descuento",
    "imagen_primaria",
    "imagen_secundaria",
    "imagen_alternativa",
    "location",
)


class ProductFields(BaseModel):
    """
    Descriptive product fields with their documented defaults.

    Attributes:
        volumen: Bottle size variant, if the product has one
        nombre: Display name
        concentracion_alcohol: Alcohol concentration, number or label ("EDP")
        marca: Brand
        descripcion: Free text description
        categoria: Category name
        genero: Masculino, Femenino or Unisex
        etiquetas: Ordered free-form tags
        precio: Base price
        precio_neto: Net price
        precio_neto_cs: Net price for the secondary price tier
        tiene_descuento: Whether a discount applies
        porcentaje_descuento: Discount percentage
        precio_con_descuento: Discounted price
        imagen_primaria: Primary image reference
        imagen_secundaria: Secondary image reference
        imagen_alternativa: Alternative image reference
        location: Free text warehouse location
    """

    model_config = ConfigDict(from_attributes=True)

    volumen: Optional[Volumen] = Field(default=None, description="Bottle size")
    nombre: str = Field(default="")
    concentracion_alcohol: Union[int, float, str] = Field(default=0)
    marca: str = Field(default="")
    descripcion: str = Field(default="")
    categoria: str = Field(default="")
    genero: Genero = Field(default=Genero.UNISEX)
    etiquetas: List[str] = Field(default_factory=list)
    precio: float = Field(default=0)
    precio_neto: float = Field(default=0)
    precio_neto_cs: float = Field(default=0)
    tiene_descuento: bool = Field(default=False)
    porcentaje_descuento: float = Field(default=0)
    precio_con_descuento: float = Field(default=0)
    imagen_primaria: str = Field(default="")
    imagen_secundaria: str = Field(default="")
    imagen_alternativa: str = Field(default="")
    location: str = Field(default="")

    def descriptive_values(self) -> dict:
        """Return the descriptive fields only, enums kept as members."""
        return self.model_dump(include=set(DESCRIPTIVE_FIELDS))


class ProductDocument(ProductFields):
    """A stored product as returned by every CatalogStore."""

    id: str = Field(..., description="Internal identifier assigned by the store")
    codigo: str = Field(..., description="Business code, unique")
    stock: int = Field(default=0)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
