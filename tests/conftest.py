"""
Shared fixtures: in-memory database, API client and helpers.
"""

import smtplib
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bank_management.database import Base, get_db
from bank_management.main import app
from bank_management.services import clients, ledger
from bank_management.services.notifications import get_notifier

# Single in-memory SQLite database shared by every session
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingNotifier:
    """Notifier that keeps sent emails in memory, or fails on demand."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send_email(self, to, subject, html_body):
        if self.fail:
            raise smtplib.SMTPException("SMTP server unavailable")
        self.sent.append((to, subject, html_body))


def override_get_db():
    """Override database dependency for testing."""
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database():
    """Create fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(notifier):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


def client_payload(dni, **overrides):
    payload = {
        "dni": dni,
        "name": f"Client {dni}",
        "email": f"client{dni}@example.com",
        "password": "s3cret-pass",
        "address": "Main Street 1",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def open_account(db):
    """Register a client and fund its account; returns the account number."""
    def _open(dni, balance="0"):
        registered = clients.register_client(db, client_payload(dni))
        number = registered.banking_account.account_number
        if Decimal(balance) > 0:
            ledger.recharge(db, number, Decimal(balance))
        return number
    return _open


@pytest.fixture
def api_account(client):
    """Register a client through the API and fund its account."""
    def _open(dni, balance=0):
        response = client.post("/api/v1/clients/", json=client_payload(dni))
        assert response.status_code == 201
        number = response.json()["data"]["banking_account"]["account_number"]
        if balance:
            recharge = client.post(
                f"/api/v1/accounts/{number}/transactions/recharge",
                json={"amount": balance},
            )
            assert recharge.status_code == 201
        return number
    return _open
