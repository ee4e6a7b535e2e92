import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from trainer_planner.database import Base, get_db
from trainer_planner.main import app
from trainer_planner.models.user import User, TrainerProfile
from trainer_planner.models.client import Client, RatePlan

TEST_DB_URL = "sqlite:///./test_trainer_planner.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    users = {
        "trainer": User(email="anna@example.com", name="Anna Trainer"),
        "other": User(email="ben@example.com", name="Ben Trainer"),
        "inactive": User(email="old@example.com", name="Old Trainer", is_active=False),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def seed_profile(db, seed_users):
    profile = TrainerProfile(
        owner_id=seed_users["trainer"].user_id,
        first_name="Anna",
        last_name="Schmidt",
        address="Hauptstr. 1\n10115 Berlin",
        iban="DE02120300000000202051",
        tax_number="12/345/67890",
        small_business=False,
        vat_rate=19,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


@pytest.fixture
def seed_clients(db, seed_users):
    owner_id = seed_users["trainer"].user_id
    clients = {
        "mia": Client(owner_id=owner_id, name="Mia", billing_address="Gartenweg 2\n10117 Berlin"),
        "leo": Client(owner_id=owner_id, name="Leo"),
        "max": Client(owner_id=owner_id, name="Max"),
        "foreign": Client(owner_id=seed_users["other"].user_id, name="Fremd"),
    }
    for c in clients.values():
        db.add(c)
    db.commit()
    for c in clients.values():
        db.refresh(c)
    return clients


@pytest.fixture
def seed_plans(db, seed_users):
    owner_id = seed_users["trainer"].user_id
    plans = {
        "single": RatePlan(owner_id=owner_id, name="Einzeltraining", price_per_hour=60, billing_mode="per_session"),
        "shared": RatePlan(owner_id=owner_id, name="Gruppentraining", price_per_hour=90, billing_mode="per_client"),
        "monthly": RatePlan(owner_id=owner_id, name="Monatsabo", price_per_hour=120, billing_mode="monthly"),
    }
    for p in plans.values():
        db.add(p)
    db.commit()
    for p in plans.values():
        db.refresh(p)
    return plans


def get_token(client, email: str) -> str:
    resp = client.post("/api/auth/login", json={"email": email})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, email: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, email)}"}
