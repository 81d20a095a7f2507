import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="darbar-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP}/app.db"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from app.core.database import Base, get_db
from app.core.errors import PaymentError
from app.core.security import hash_password
from app.models.user import User
from app.services.payments import get_payment_gateway
from app.services.push import get_push_gateway
from app.services.storage import LocalObjectStore, get_object_store

PASSWORD = "Secret123"


class FakeStripe:
    def __init__(self):
        self.intents = {}

    def create_payment_intent(self, amount, currency, user_id=None):
        intent_id = f"pi_{len(self.intents) + 1}"
        intent = {
            "id": intent_id,
            "client_secret": f"{intent_id}_secret",
            "amount": int(amount),
            "currency": currency.lower(),
            "status": "requires_payment_method",
            "created": 1700000000,
            "metadata": {"userId": str(user_id or "guest")},
        }
        self.intents[intent_id] = intent
        return intent

    def retrieve_payment_intent(self, intent_id):
        if intent_id not in self.intents:
            raise PaymentError(f"No such payment_intent: '{intent_id}'")
        return self.intents[intent_id]


class FakePush:
    def __init__(self):
        self.sent = []

    def send_many(self, tokens, title, body):
        results = []
        for t in tokens:
            self.sent.append((t, title, body))
            results.append({"id": f"push-{len(self.sent)}", "token": t})
        return results


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # как в PostgreSQL: внешние ключи проверяются
    @event.listens_for(engine, "connect")
    def _fk_on(dbapi_conn, _record):
        dbapi_conn.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def stripe():
    return FakeStripe()


@pytest.fixture()
def push():
    return FakePush()


@pytest.fixture()
def store(tmp_path):
    return LocalObjectStore(str(tmp_path / "uploads"), "/uploads", ["image/png", "image/jpeg"])


@pytest.fixture(autouse=True)
def overrides(session_factory, stripe, push, store):
    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_payment_gateway] = lambda: stripe
    app.dependency_overrides[get_push_gateway] = lambda: push
    app.dependency_overrides[get_object_store] = lambda: store
    yield
    app.dependency_overrides.clear()


def make_user(db, email, role="user", gold=False, points=0):
    salt, pw_hash = hash_password(PASSWORD)
    user = User(
        email=email,
        first_name="Test",
        last_name="User",
        role=role,
        gold_member=gold,
        points=points,
        password_salt=salt,
        password_hash=pw_hash,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def login(email):
    client = TestClient(app)
    r = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    assert r.status_code == 200, r.text
    return client


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def admin_user(db):
    return make_user(db, "admin@darbar.com", role="admin")


@pytest.fixture()
def admin(admin_user):
    return login(admin_user.email)


@pytest.fixture()
def customer_user(db):
    return make_user(db, "guest@darbar.com")


@pytest.fixture()
def customer(customer_user):
    return login(customer_user.email)


@pytest.fixture()
def gold_user(db):
    return make_user(db, "gold@darbar.com", gold=True)


@pytest.fixture()
def gold(gold_user):
    return login(gold_user.email)


def add_dish(admin_client, category="Biryani", name="Chicken Biryani", price=200):
    import json

    r = admin_client.post(
        "/api/dishes/",
        data={"dish_data": json.dumps({"category": category, "name": name, "price": price})},
    )
    assert r.status_code == 201, r.text
    return r.json()["dish_id"]
