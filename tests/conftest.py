"""
Shared pytest fixtures.

Uses a SQLite file database so no Postgres is required for tests. External
HTTP (AI gateway, ERP) goes through httpx.MockTransport; nothing leaves the
process.
"""
import uuid

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.db.base import Base, get_db
from app.main import app
from app.services.erp_client import ErpClient, get_erp_client
from app.services.risk_predictor import RiskPredictor, get_risk_predictor

SQLITE_URL = "sqlite:///./test_pulse.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ERP_BASE = "https://erp.test/functions/v1"

ERP_STUDENTS = [
    {
        "id": "e1", "roll_no": "0201CS211001", "name": "Aryan Sharma", "branch": "CSE",
        "attendance": 82, "cie_marks": "18/20", "status": "Regular",
        "created_at": "2024-12-01T00:00:00Z", "updated_at": "2024-12-01T00:00:00Z",
    },
    {
        "id": "e2", "roll_no": "0201CS211002", "name": "Priya Verma", "branch": "CSE",
        "attendance": 70, "cie_marks": "11/20", "status": "Low Attendance",
        "created_at": "2024-12-01T00:00:00Z", "updated_at": "2024-12-01T00:00:00Z",
    },
    {
        "id": "e3", "roll_no": "0201EC211003", "name": "Rahul Gupta", "branch": "ECE",
        "attendance": 55, "cie_marks": "8/20", "status": "Detained",
        "created_at": "2024-12-01T00:00:00Z", "updated_at": "2024-12-01T00:00:00Z",
    },
]

ERP_PROGRESS = [
    {
        "id": "p1", "student_id": "e1", "subject": "DSA", "attendance": 82, "marks": 74,
        "assignments_done": 4, "total_assignments": 5, "created_at": "2024-12-01T00:00:00Z",
    },
]

ERP_NOTICES = [
    {
        "id": "n1", "title": "Mid-sem exams", "content": "Schedule released.",
        "type": "exam", "priority": "high", "created_at": "2024-12-01T00:00:00Z",
    },
]


def erp_handler(request: httpx.Request) -> httpx.Response:
    endpoint = request.url.path.rsplit("/", 1)[-1]
    data = {
        "api-students": ERP_STUDENTS,
        "api-progress": ERP_PROGRESS,
        "api-notices": ERP_NOTICES,
    }.get(endpoint)
    if data is None:
        return httpx.Response(404, json={"error": "not found"})
    return httpx.Response(200, json={"data": data, "count": len(data)})


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def override_get_risk_predictor() -> RiskPredictor:
    # No key: every prediction takes the rule-based path
    return RiskPredictor(api_key="", url="https://ai.test/v1/chat/completions", model="test-model")


def override_get_erp_client() -> ErpClient:
    return ErpClient(ERP_BASE, client=httpx.Client(transport=httpx.MockTransport(erp_handler)))


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def no_api_token(monkeypatch):
    monkeypatch.setattr(settings, "API_TOKEN", "")


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def student_id() -> str:
    """A fresh student id per test so stored documents never bleed across tests."""
    return f"STU-{uuid.uuid4().hex[:10]}"


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_risk_predictor] = override_get_risk_predictor
    app.dependency_overrides[get_erp_client] = override_get_erp_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
