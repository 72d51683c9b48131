"""
Shared fixtures.

Beanie runs against an in-memory Motor database (mongomock-motor), so
neither the store tests nor the API tests need a MongoDB server. API
tests go through FastAPI's TestClient; the lifespan seeds an admin
account that tests log in with.
"""
import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from beanie import init_beanie  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from mongomock_motor import AsyncMongoMockClient  # noqa: E402

from hrdesk.config import Settings  # noqa: E402
from hrdesk.main import create_app  # noqa: E402
from hrdesk.models import DOCUMENT_MODELS  # noqa: E402

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-secret"
USER_PASSWORD = "user-secret"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        jwt_secret_key="test-secret",
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        smtp_host="smtp.example.com",
        mail_from="hr@example.com",
    )


@pytest.fixture
def mongo_database():
    return AsyncMongoMockClient()["hrdesk_test"]


@pytest_asyncio.fixture
async def db(mongo_database):
    """Beanie initialised on a fresh in-memory database."""
    await init_beanie(database=mongo_database, document_models=DOCUMENT_MODELS)
    return mongo_database


@pytest.fixture
def app(settings, mongo_database):
    return create_app(settings, database=mongo_database)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def login(client: TestClient, email: str, password: str) -> dict:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    token = response.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


def create_user(client: TestClient, admin_headers: dict, email: str, **fields) -> str:
    payload = {"email": email, "password": USER_PASSWORD, **fields}
    response = client.post("/api/auth/save-user", json=payload, headers=admin_headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


@pytest.fixture
def admin_headers(client) -> dict:
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def employee(client, admin_headers) -> tuple[str, dict]:
    """(user id, auth headers) of a freshly created USER account."""
    user_id = create_user(client, admin_headers, "ana@example.com", first_name="Ana", last_name="Lopez")
    return user_id, login(client, "ana@example.com", USER_PASSWORD)


@pytest.fixture
def other_employee(client, admin_headers) -> tuple[str, dict]:
    user_id = create_user(client, admin_headers, "bob@example.com", first_name="Bobby")
    return user_id, login(client, "bob@example.com", USER_PASSWORD)
