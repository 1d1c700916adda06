import pytest
from fastapi.testclient import TestClient

from save_server.config import Settings
from save_server.core.cipher import ProfileCipher
from save_server.core.credentials import make_password_context
from save_server.database import create_db_engine, create_session_factory, init_db
from save_server.main import create_app


TEST_KEY = bytes(range(32))
TEST_SECRET = "test-signing-secret"


@pytest.fixture
def settings():
    return Settings(
        encryption_key=TEST_KEY,
        jwt_secret=TEST_SECRET,
        database_url="sqlite://",
        bcrypt_rounds=4,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def cipher():
    return ProfileCipher(TEST_KEY)


@pytest.fixture
def pwd_context():
    return make_password_context(rounds=4)


def login_headers(client, username="bob", password="pw123"):
    client.post("/auth/register", json={"username": username, "password": password})
    res = client.post("/auth/login", json={"username": username, "password": password})
    return {"Authorization": f"Bearer {res.json()['token']}"}


@pytest.fixture
def auth_headers(client):
    return login_headers(client)
