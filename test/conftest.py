# test/conftest.py

import os

# ต้องตั้งค่าก่อน import flashfix เพื่อให้ engine เป็น SQLite ในหน่วยความจำ
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["BCRYPT_ROUNDS"] = "4"

import itertools
import pytest
from datetime import datetime
from fastapi.testclient import TestClient

from flashfix.database import Base, engine, SessionLocal, get_db
from flashfix.main import app
from flashfix.models import User, UserRole, Service
from flashfix.services.auth import hash_password, create_access_token

PASSWORD = "secret123"

_phones = itertools.count(13800000001)


def next_phone() -> str:
    return str(next(_phones))

# สร้างและลบตารางใหม่ทุกเทส
@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

@pytest.fixture
def make_user(db_session):
    def _make_user(role: UserRole = UserRole.CUSTOMER, name: str = None, phone: str = None) -> User:
        user = User(
            name=name or f"{role.value} user",
            phone=phone or next_phone(),
            role=role.value,
            password_hash=hash_password(PASSWORD),
            created_at=datetime.utcnow(),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user

@pytest.fixture
def service(db_session):
    db_service = Service(
        name="Screen Replacement",
        description="Replace cracked screens",
        category="phone",
        base_price=299.0,
        estimated_duration=60,
        is_active=True,
        created_at=datetime.utcnow(),
    )
    db_session.add(db_service)
    db_session.commit()
    db_session.refresh(db_service)
    return db_service

@pytest.fixture
def customer(make_user):
    return make_user(UserRole.CUSTOMER, name="Customer A")

@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN, name="Admin")

@pytest.fixture
def technicians(make_user):
    return [make_user(UserRole.TECHNICIAN, name=f"Tech {i}") for i in (1, 2, 3)]


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


def order_payload(service_id: int, **overrides) -> dict:
    payload = {
        "serviceId": service_id,
        "deviceType": "phone",
        "deviceModel": "iPhone 13",
        "issueDescription": "Screen cracked after a drop",
        "urgencyLevel": "normal",
        "contactPhone": "13900000000",
    }
    payload.update(overrides)
    return payload
