"""
Shared fixtures: in-memory SQLite, a TestClient wired to it, seeded users and
catalogue rows, and an email outbox that replaces SMTP delivery.
"""
import os
from decimal import Decimal
from datetime import datetime, timedelta, timezone
from pathlib import Path

# must be set before the app (and its settings) are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["SMTP_USER"] = ""
os.environ["SMTP_PASSWORD"] = ""
os.environ["ENROLLMENT_NOTIFY_MODE"] = "inline"
os.environ["FRONTEND_URL"] = "http://frontend.test"

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from coursehub.core.config import settings
from coursehub.core.security import create_access_token, get_password_hash
from coursehub.db.base import Base
from coursehub.db.session import enable_sqlite_foreign_keys, get_db
from coursehub.main import app
from coursehub.models.category import Category
from coursehub.models.training import Training
from coursehub.models.training_schedule import TrainingSchedule
from coursehub.models.user import User, UserRole
from coursehub.services.email_service import email_service

fake = Faker()

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
event.listen(engine, "connect", enable_sqlite_foreign_keys)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

USER_PASSWORD = "userpassword123"
ADMIN_PASSWORD = "adminpassword123"


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def pdf_dir(tmp_path, monkeypatch):
    target = tmp_path / "pdfs"
    monkeypatch.setattr(settings, "PDF_DIR", str(target))
    return target


@pytest.fixture
def outbox(monkeypatch):
    """Captured emails; attachment files are checked at send time."""
    sent = []

    async def fake_send_email(to_email, subject, html_content, text_content=None, attachments=None):
        sent.append(
            {
                "to": to_email,
                "subject": subject,
                "html": html_content,
                "text": text_content,
                "attachments": [
                    {"filename": name, "path": path, "existed": Path(path).exists()}
                    for name, path in attachments or []
                ],
            }
        )
        return True

    monkeypatch.setattr(email_service, "send_email", fake_send_email)
    return sent


def _make_user(db, role: UserRole, password: str) -> User:
    user = User(
        username=fake.unique.user_name(),
        email=fake.unique.email(),
        password_hash=get_password_hash(password),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db) -> User:
    return _make_user(db, UserRole.USER, USER_PASSWORD)


@pytest.fixture
def admin(db) -> User:
    return _make_user(db, UserRole.ADMIN, ADMIN_PASSWORD)


@pytest.fixture
def user_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def admin_headers(admin) -> dict:
    return {"Authorization": f"Bearer {create_access_token(admin)}"}


@pytest.fixture
def category(db) -> Category:
    obj = Category(name="Leadership", description="Management and leadership courses")
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def training(db, category) -> Training:
    obj = Training(
        title="Project Management Essentials",
        description="Plan and deliver projects",
        duration=5,
        instructor=fake.name(),
        fee=Decimal("800.00"),
        original_fee=Decimal("1000.00"),
        discount_percentage=Decimal("20"),
        level="Beginner",
        is_certified=True,
        what_you_will_learn='["Scope", "Risk"]',
        address="Kigali",
        category=category,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def schedule(db, training) -> TrainingSchedule:
    start = datetime(2026, 11, 2, 9, 0, tzinfo=timezone.utc)
    obj = TrainingSchedule(
        training=training,
        start_date=start,
        end_date=start + timedelta(days=4),
        capacity=20,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def enrollment_payload(schedule) -> dict:
    return {
        "fullname": fake.name(),
        "email": fake.email(),
        "phone": "+250788000000",
        "address": "KG 11 Ave, Kigali",
        "training_schedule_id": schedule.id,
    }
