"""
==============================================================================
SQLAlchemy ORM Models Module
==============================================================================

ORM models for the catalog database.

Database Schema:
---------------

    ┌─────────────────────────────────────────────────────────────────┐
    │                           users                                  │
    ├─────────────────────────────────────────────────────────────────┤
    │ id (UUID, PK)                                                   │
    │ username (VARCHAR, UNIQUE, NOT NULL)                            │
    │ password_hash (VARCHAR, NOT NULL)                               │
    │ is_active (BOOLEAN, DEFAULT true)                               │
    │ created_at / updated_at (DATETIME)                              │
    └─────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────┐
    │                          products                                │
    ├─────────────────────────────────────────────────────────────────┤
    │ id (UUID, PK)                                                   │
    │ codigo (VARCHAR, UNIQUE, NOT NULL)                              │
    │ volumen (ENUM: 50ml .. 200ml, NULLABLE)                         │
    │ nombre, marca, descripcion, categoria, location (VARCHAR)       │
    │ concentracion_alcohol (JSON: number or label)                   │
    │ genero (ENUM: Masculino, Femenino, Unisex)                      │
    │ etiquetas (JSON list)                                           │
    │ precio, precio_neto, precio_neto_cs (FLOAT)                     │
    │ tiene_descuento (BOOLEAN)                                       │
    │ porcentaje_descuento, precio_con_descuento (FLOAT)              │
    │ stock (INTEGER, DEFAULT 0)                                      │
    │ imagen_primaria, imagen_secundaria, imagen_alternativa          │
    │ created_at / updated_at (DATETIME)                              │
    └─────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    Integer,
    String,
    Text,
    func,
)

from perfumeria.catalog.models import Genero, Volumen
from perfumeria.db.database import Base
from perfumeria.utils.validators import IdentifierValidator


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


def new_identifier() -> str:
    """Generate a new internal identifier."""
    return IdentifierValidator.generate()


# =============================================================================
# USER MODEL
# =============================================================================

class User(Base):
    """
    User account allowed to obtain bearer tokens.

    Attributes:
        id: Unique identifier (UUID)
        username: Unique login name (lowercase)
        password_hash: Bcrypt hashed password
        is_active: Account status
        created_at: Account creation timestamp
        updated_at: Last modification timestamp
    """

    __tablename__ = "users"

    id: str = Column(
        String(36),
        primary_key=True,
        default=new_identifier,
        doc="Unique user identifier (UUID)"
    )

    username: str = Column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
        doc="Unique login name (lowercase)"
    )

    password_hash: str = Column(
        String(255),
        nullable=False,
        doc="Bcrypt hashed password"
    )

    is_active: bool = Column(
        Boolean,
        default=True,
        nullable=False,
        doc="Account status"
    )

    created_at: datetime = Column(DateTime, default=func.now(), nullable=False)

    updated_at: datetime = Column(
        DateTime,
        default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"User(id={self.id!r}, "
            f"username={self.username!r}, "
            f"is_active={self.is_active})"
        )


# =============================================================================
# PRODUCT MODEL
# =============================================================================

class ProductRecord(Base):
    """
    Catalog product row.

    ``codigo`` is the business key and is unique; ``id`` is the internal
    identifier exposed under /products/id/{id}.
    """

    __tablename__ = "products"

    id: str = Column(String(36), primary_key=True, default=new_identifier)

    codigo: str = Column(String(100), unique=True, nullable=False, index=True)

    volumen = Column(
        Enum(Volumen, values_callable=_enum_values, name="volumen"),
        nullable=True
    )

    nombre: str = Column(String(255), default="", nullable=False)
    concentracion_alcohol = Column(JSON, default=0)
    marca: str = Column(String(255), default="", nullable=False)
    descripcion: str = Column(Text, default="", nullable=False)
    categoria: str = Column(String(255), default="", nullable=False)

    genero = Column(
        Enum(Genero, values_callable=_enum_values, name="genero"),
        default=Genero.UNISEX,
        nullable=False
    )

    etiquetas = Column(JSON, default=list, nullable=False)

    precio: float = Column(Float, default=0, nullable=False)
    precio_neto: float = Column(Float, default=0, nullable=False)
    precio_neto_cs: float = Column(Float, default=0, nullable=False)
    tiene_descuento: bool = Column(Boolean, default=False, nullable=False)
    porcentaje_descuento: float = Column(Float, default=0, nullable=False)
    precio_con_descuento: float = Column(Float, default=0, nullable=False)

    stock: int = Column(Integer, default=0, nullable=False)

    imagen_primaria: str = Column(String(500), default="", nullable=False)
    imagen_secundaria: str = Column(String(500), default="", nullable=False)
    imagen_alternativa: str = Column(String(500), default="", nullable=False)

    location: str = Column(String(255), default="", nullable=False)

    created_at: datetime = Column(DateTime, default=func.now(), nullable=False)

    updated_at: datetime = Column(
        DateTime,
        default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"ProductRecord(id={self.id!r}, "
            f"codigo={self.codigo!r}, "
            f"stock={self.stock})"
        )
