"""Shared helpers for API tests: an in-memory SQLite store behind a fresh app per test."""

import unittest
from collections.abc import Generator
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from waternet.core.database import get_db
from waternet.main import create_app
from waternet.models import Base
from waternet.services.tokens import TokenService

ACCESS_SECRET = "test-access-secret"
REFRESH_SECRET = "test-refresh-secret"

ADMIN = {"name": "Admin", "email": "admin@waternet.io", "password": "admin-password", "role": "admin"}
OPERATOR = {"name": "Operator", "email": "operator@waternet.io", "password": "operator-password", "role": "user"}


def make_token_service(**kwargs: object) -> TokenService:
    return TokenService(ACCESS_SECRET, REFRESH_SECRET, **kwargs)


def make_sqlite_engine():
    """Single shared in-memory connection with foreign keys enforced like Postgres."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return engine


class DatabaseTestCase(unittest.TestCase):
    """Gives each test a clean schema and a `self.db` session."""

    def setUp(self) -> None:
        self.engine = make_sqlite_engine()
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)
        self.db: Session = self.SessionLocal()
        # Cheap hashes keep the suite fast; cost does not change behaviour.
        rounds = patch("waternet.core.security.BCRYPT_ROUNDS", 4)
        rounds.start()
        self.addCleanup(rounds.stop)

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient for an app wired to the same store."""

    def setUp(self) -> None:
        super().setUp()
        self.tokens = make_token_service()
        self.app = create_app(token_service=self.tokens)

        def override_get_db() -> Generator[Session, None, None]:
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        self.app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(self.app)

    def tearDown(self) -> None:
        self.client.close()
        super().tearDown()

    def register(self, account: dict[str, str]) -> None:
        response = self.client.post("/api/auth/register", json=account)
        self.assertEqual(response.status_code, 201, response.text)

    def login(self, account: dict[str, str]) -> dict[str, str]:
        response = self.client.post(
            "/api/auth/login",
            json={"email": account["email"], "password": account["password"]},
        )
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def auth_headers(self, account: dict[str, str]) -> dict[str, str]:
        """Register (if needed) and log in; return a Bearer header for the account."""
        if self.client.post("/api/auth/login", json={
            "email": account["email"], "password": account["password"],
        }).status_code == 404:
            self.register(account)
        token = self.login(account)["accessToken"]
        return {"Authorization": f"Bearer {token}"}
