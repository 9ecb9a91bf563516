import os
import tempfile

# Point the app at a throwaway SQLite file before anything imports railbook.config
_TMP_DIR = tempfile.mkdtemp(prefix="railbook-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_TMP_DIR, "test.db")
os.environ["SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ADMIN_USERNAMES"] = '["admin"]'

from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from railbook import models, schemas, utils
from railbook.database import SessionLocal, engine
from railbook.main import app
from railbook.services import auth as auth_service


@pytest.fixture(autouse=True)
def reset_db():
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make(username="alice", password="pw1", mobile_no=None):
        return auth_service.register_user(
            db, schemas.UserCreate(username=username, password=password, f_name=username.title(), mobile_no=mobile_no)
        )
    return _make


@pytest.fixture
def user_id(make_user):
    return make_user()


@pytest.fixture
def make_train(db):
    def _make(train_no=101, capacity=10, available=None, source="New Delhi", destination="Howrah", fares=None):
        db.add(models.Train(
            train_no=train_no,
            train_name=f"Express {train_no}",
            source=source,
            destination=destination,
            total_capacity=capacity,
            seat_available=capacity if available is None else available,
        ))
        for class_type, fare in (fares or {"SL": "450.00", "3A": "1200.00"}).items():
            db.add(models.TrainClass(train_no=train_no, class_type=class_type, fare=Decimal(fare)))
        db.commit()
        return train_no
    return _make


@pytest.fixture
def booking_request():
    def _make(train_no=101, hours_ahead=48, **overrides):
        data = {
            "train_no": train_no,
            "passenger_name": "Alice Kumar",
            "class_type": "SL",
            "source": "New Delhi",
            "destination": "Howrah",
            "date_time": utils.utcnow() + timedelta(hours=hours_ahead),
            "amount": Decimal("450.00"),
            "bank": "HDFC",
            "card_no": "4111111111111234",
        }
        data.update(overrides)
        return schemas.BookingCreate(**data)
    return _make


@pytest.fixture
def auth_headers(client):
    def _login(username="alice", password="pw1", register=True):
        if register:
            client.post("/api/auth/register", json={"username": username, "password": password})
        res = client.post("/api/auth/login", json={"username": username, "password": password})
        return {"Authorization": f"Bearer {res.json()['token']}"}
    return _login
