"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides test database, store, client, and authentication fixtures.

==============================================================================
"""

import os

# Settings are read once per process, so the test environment must be in
# place before the application is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-the-suite")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("INVALID_ENTRY_POLICY", "skip")

import pytest
from typing import Generator, Dict
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from perfumeria.main import app
from perfumeria.catalog.memory_store import InMemoryCatalogStore
from perfumeria.catalog.sql_store import SqlCatalogStore
from perfumeria.core.dependencies import get_catalog_store
from perfumeria.core.security import get_security_manager
from perfumeria.db.database import Base, get_db
from perfumeria.db.models import User


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

# In-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================================================
# STORE FIXTURES
# ============================================================================

@pytest.fixture
def memory_store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore()


@pytest.fixture
def memory_client(
    client: TestClient,
    memory_store: InMemoryCatalogStore
) -> TestClient:
    """Test client whose product routes use an in-memory store."""
    app.dependency_overrides[get_catalog_store] = lambda: memory_store
    return client


@pytest.fixture(params=["memory", "sql"])
def store(request, db: Session):
    """Every CatalogStore implementation, one per test run."""
    if request.param == "memory":
        return InMemoryCatalogStore()
    return SqlCatalogStore(db)


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def test_user(db: Session) -> User:
    """Create an active user in the test database."""
    security = get_security_manager()
    user = User(
        username="maria",
        password_hash=security.hash_password("perfume123"),
        is_active=True
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def inactive_user(db: Session) -> User:
    """Create a disabled user in the test database."""
    security = get_security_manager()
    user = User(
        username="disabled",
        password_hash=security.hash_password("perfume123"),
        is_active=False
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# ============================================================================
# TOKEN FIXTURES
# ============================================================================

@pytest.fixture
def user_token(test_user: User) -> str:
    """Create access token for the test user."""
    security = get_security_manager()
    return security.create_access_token({
        "sub": test_user.id,
        "username": test_user.username,
    })


@pytest.fixture
def refresh_token(test_user: User) -> str:
    """Create refresh token for the test user."""
    security = get_security_manager()
    return security.create_refresh_token({
        "sub": test_user.id,
        "username": test_user.username,
    })


# ============================================================================
# HEADER FIXTURES
# ============================================================================

@pytest.fixture
def auth_headers(user_token: str) -> Dict[str, str]:
    """Authorization headers for the test user."""
    return {"Authorization": f"Bearer {user_token}"}


# ============================================================================
# PAYLOAD FIXTURES
# ============================================================================

@pytest.fixture
def product_payload() -> Dict:
    """A complete upload entry."""
    return {
        "codigo": "PF-001",
        "volumen": "100ml",
        "nombre": "Acqua di Gio",
        "concentracion_alcohol": 15,
        "marca": "Giorgio Armani",
        "descripcion": "Fresh aquatic fragrance",
        "categoria": "Eau de Toilette",
        "genero": "Masculino",
        "etiquetas": ["citrico", "acuatico"],
        "precio": 120.0,
        "precio_neto": 100.0,
        "precio_neto_cs": 95.0,
        "tiene_descuento": False,
        "porcentaje_descuento": 0,
        "precio_con_descuento": 120.0,
        "stock": 5,
        "imagen_primaria": "https://img.example.com/pf-001.jpg",
        "location": "A-01",
    }
