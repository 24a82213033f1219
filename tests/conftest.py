"""Pytest fixtures for testing"""

import pytest
from typing import Callable, Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from finance_tracker.api.main import create_app
from finance_tracker.config import Settings
from finance_tracker.domain.tokens import TokenService
from finance_tracker.infrastructure.database.models import Base
from finance_tracker.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite://"
TEST_SECRET = "test-signing-secret-with-enough-length-for-hs256"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def settings() -> Settings:
    """Injected configuration; low bcrypt cost keeps hashing fast"""
    return Settings(database_url=TEST_DATABASE_URL, jwt_secret=TEST_SECRET, bcrypt_rounds=4)


@pytest.fixture
def token_service(settings: Settings) -> TokenService:
    return TokenService(settings.jwt_secret, algorithm=settings.jwt_algorithm)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session, settings: Settings) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app(settings)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def register(client: TestClient) -> Callable[..., Dict]:
    """Register a user and return the response body plus ready-made auth headers"""

    def _register(name: str = "Alice", email: str = "alice@example.com", password: str = "s3cret-pass") -> Dict:
        response = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        data = response.json()
        data["headers"] = {"Authorization": f"Bearer {data['token']}"}
        return data

    return _register


@pytest.fixture
def alice(register) -> Dict:
    return register("Alice", "alice@example.com", "alice-pass")


@pytest.fixture
def bob(register) -> Dict:
    return register("Bob", "bob@example.com", "bob-pass")


@pytest.fixture
def groceries() -> Dict:
    """Minimal valid expense payload"""
    return {"amount": 50, "description": "Groceries", "category": "Food", "merchant": "Store"}


@pytest.fixture
def salary() -> Dict:
    """Recurring income payload"""
    return {
        "amount": 3000,
        "description": "Monthly salary",
        "category": "Salary",
        "source": "Employer",
        "isRecurring": True,
        "recurringFrequency": "Monthly",
        "startDate": "2024-01-01",
    }
