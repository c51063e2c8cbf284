"""
Test configuration and fixtures for the A11yCheck API.

Tests run against a throwaway SQLite database and never launch a browser or
talk to a mail server: the scanner and mail transport are swapped for fakes
through FastAPI dependency overrides.
"""

import os
import tempfile
from typing import Generator, List, Optional
from unittest.mock import AsyncMock, patch
from uuid import uuid4

test_db_path = tempfile.mktemp(suffix=".db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{test_db_path}"
os.environ["ENVIRONMENT"] = "local"
os.environ["DB_CREATE_TABLES"] = "true"
os.environ["LOG_TO_FILE"] = "false"
os.environ["MAIL_USERNAME"] = ""
os.environ["MAIL_PASSWORD"] = ""
os.environ["EMAIL_RELAY_URL"] = ""
os.environ["EMAIL_RELAY_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from a11ycheck.features.scan.dependencies.scanner import get_scanner
from a11ycheck.features.scan.services.page_metadata import PageMetadata
from a11ycheck.features.scan.services.scanner.base import ScannerResult, ScanOptions
from a11ycheck.platform.services.email import get_mail_transport

TEST_PASSWORD = "Sup3rSecret!"

# 3 errors, 2 warnings and 1 notice
SAMPLE_ISSUES = [
    {"code": "image-alt", "type": "error", "message": "Images must have alternate text",
     "selector": "img.hero", "context": "<img class=\"hero\" src=\"a.png\">", "runner": "axe"},
    {"code": "label", "type": "error", "message": "Form elements must have labels",
     "selector": "#email", "context": "<input id=\"email\">", "runner": "axe"},
    {"code": "link-name", "type": "error", "message": "Links must have discernible text",
     "selector": "a.icon", "context": "<a class=\"icon\" href=\"/\"></a>", "runner": "axe"},
    {"code": "color-contrast", "type": "warning", "message": "Elements must have sufficient color contrast",
     "selector": "p.muted", "context": "<p class=\"muted\">", "runner": "axe"},
    {"code": "heading-order", "type": "warning", "message": "Heading levels should only increase by one",
     "selector": "h4", "context": "<h4>", "runner": "axe"},
    {"code": "region", "type": "notice", "message": "All page content should be contained by landmarks",
     "selector": "div.banner", "context": "<div class=\"banner\">", "runner": "axe"},
]


class FakeScanner:
    """Stands in for AxeScanner; returns canned findings or raises ``error``."""

    def __init__(self, issues: Optional[List[dict]] = None, error: Optional[Exception] = None):
        self.issues = list(SAMPLE_ISSUES if issues is None else issues)
        self.error = error
        self.calls = []

    def run(self, url: str, options: ScanOptions) -> ScannerResult:
        self.calls.append((url, options))
        if self.error is not None:
            raise self.error
        return ScannerResult(issues=self.issues, page_title="Scanner Title", page_description=None)


class FakeTransport:
    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.sent = []

    def send(self, to_email: str, subject: str, body: str):
        if self.error is not None:
            raise self.error
        self.sent.append({"to": to_email, "subject": subject, "body": body})


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from a11ycheck.main import app

    return app


@pytest.fixture
def fake_scanner(test_app):
    scanner = FakeScanner()
    test_app.dependency_overrides[get_scanner] = lambda: scanner
    yield scanner
    test_app.dependency_overrides.pop(get_scanner, None)


@pytest.fixture
def fake_transport(test_app):
    transport = FakeTransport()
    test_app.dependency_overrides[get_mail_transport] = lambda: transport
    yield transport
    test_app.dependency_overrides.pop(get_mail_transport, None)


@pytest.fixture(autouse=True)
def page_metadata():
    """Keep scans offline: metadata lookup returns a fixed title/description."""
    metadata = PageMetadata(title="Example Domain", description="An example page")
    with patch(
        "a11ycheck.features.scan.services.scan_service.fetch_page_metadata",
        new=AsyncMock(return_value=metadata),
    ) as mocked:
        yield mocked


@pytest.fixture(scope="function")
def client(test_app, fake_scanner) -> Generator[TestClient, None, None]:
    """
    A fresh TestClient per test. Entering it runs the lifespan, which creates
    the tables and disposes the engine again on exit.
    """
    with TestClient(test_app) as test_client:
        yield test_client


def unique_username(prefix: str = "user") -> str:
    return f"{prefix}_{uuid4().hex[:10]}"


def register_user(client: TestClient, username: Optional[str] = None, email: Optional[str] = None,
                  name: str = "Test User", password: str = TEST_PASSWORD) -> dict:
    username = username or unique_username()
    email = email or f"{username}@example.com"
    response = client.post(
        "/api/auth/signup",
        json={"username": username, "name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def login_user(client: TestClient, username: str, password: str = TEST_PASSWORD) -> str:
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["data"]["token"]


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(client):
    """Register a user and return (user, headers)."""

    def _make_user(prefix: str = "user"):
        user = register_user(client, username=unique_username(prefix))
        token = login_user(client, user["username"])
        return user, auth_headers(token)

    return _make_user
