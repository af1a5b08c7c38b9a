"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from helpdesk.core.config import Settings
from helpdesk.core.enums import Role, utcnow
from helpdesk.db.models import Usuario
from helpdesk.db.session import Database
from helpdesk.main import create_app
from helpdesk.services.identity import AuthContext
from helpdesk.services.ticket_store import TicketStore


class FakeClock:
    """Deterministic clock: every reading is one second after the previous one."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 9, 0, 0)):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(seconds=1)
        return value


# Test settings
@pytest.fixture
def test_settings() -> Settings:
    """Settings for an in-memory database."""
    return Settings(
        DATABASE_URL="sqlite://",
        SECRET_KEY="test-secret-key",
        LOG_LEVEL="WARNING",
        ENVIRONMENT="test",
        ADMIN_USERNAME="admin",
        ADMIN_PASSWORD="admin123",
        ADMIN_NOMBRE="Administrador",
    )


# ========== UNIT FIXTURES ==========

@pytest.fixture
def database(test_settings):
    db = Database(test_settings)
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    s = database.session_factory()
    yield s
    s.close()


@pytest.fixture
def file_database(test_settings, tmp_path):
    """On-disk database, so separate sessions behave like separate requests."""
    settings = test_settings.model_copy(update={"DATABASE_URL": f"sqlite:///{tmp_path / 'tickets.db'}"})
    db = Database(settings)
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_user(session):
    """Factory for users inserted straight into the store (no password hashing)."""

    def create_user(username: str, rol: Role = Role.USER, nombre: str = None) -> Usuario:
        user = Usuario(
            username=username,
            password="not-a-real-hash",
            nombre=nombre or username.title(),
            rol=rol.value,
            activo=True,
        )
        session.add(user)
        session.commit()
        return user

    return create_user


def context_for(user: Usuario) -> AuthContext:
    return AuthContext(caller_id=user.id, username=user.username, role=Role(user.rol))


@pytest.fixture
def alice(make_user) -> AuthContext:
    return context_for(make_user("alice", Role.USER, "Alice User"))


@pytest.fixture
def bob(make_user) -> AuthContext:
    return context_for(make_user("bob", Role.USER, "Bob User"))


@pytest.fixture
def tech(make_user) -> AuthContext:
    return context_for(make_user("tina", Role.TECHNICIAN, "Tina Tech"))


# ========== API FIXTURES ==========

@pytest.fixture
def api_client(test_settings):
    """HTTP client against a fresh app; startup creates tables and the admin account."""
    app = create_app(test_settings)
    with TestClient(app) as client:
        yield client


def login(client: TestClient, username: str, password: str) -> Dict[str, str]:
    response = client.post("/api/v1/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def admin_headers(api_client) -> Dict[str, str]:
    return login(api_client, "admin", "admin123")


@pytest.fixture
def register_account(api_client, admin_headers):
    """Create an account through the API and return auth headers plus its id."""

    def register(username: str, rol: str = "user", nombre: str = None):
        response = api_client.post(
            "/api/v1/auth/registro",
            json={
                "username": username,
                "password": f"{username}-pass",
                "nombre": nombre or username.title(),
                "rol": rol,
            },
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["id"], login(api_client, username, f"{username}-pass")

    return register


@pytest.fixture
def ticket_payload():
    """Factory for ticket creation bodies."""

    def create_payload(**kwargs):
        defaults = {
            "tipo": "hardware",
            "titulo": "Printer down",
            "descripcion": "The printer on floor 2 shows a paper jam error",
            "ubicacion": "Floor 2",
        }
        return {**defaults, **kwargs}

    return create_payload


@pytest.fixture
def context_of():
    """Turn a stored Usuario into the AuthContext it would log in with."""
    return context_for


class DeletingClock:
    """Clock that deletes a ticket from another session the first time it is read."""

    def __init__(self, database: Database, ticket_id: int):
        self.database = database
        self.ticket_id = ticket_id
        self.fired = False

    def __call__(self) -> datetime:
        if not self.fired:
            self.fired = True
            other = self.database.session_factory()
            try:
                TicketStore(other).delete(self.ticket_id)
            finally:
                other.close()
        return utcnow()


@pytest.fixture
def deleting_clock(file_database):
    """Factory for clocks that remove a ticket mid-operation."""

    def create_clock(ticket_id: int) -> DeletingClock:
        return DeletingClock(file_database, ticket_id)

    return create_clock
