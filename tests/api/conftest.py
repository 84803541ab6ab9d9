import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rosterly.api.deps import get_db
from rosterly.db.models import Base
from rosterly.main import app


WEEKDAY_HOURS = {
    str(day): {"isOpen": True, "openTime": "09:00", "closeTime": "18:00"} for day in range(1, 6)
}


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    # no context manager: the lifespan would create tables on the configured database
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def establishment(client) -> dict:
    resp = client.post("/api/v1/establishments", json={
        "name": "Padaria Central",
        "type": "bakery",
        "operating_hours": WEEKDAY_HOURS,
        "min_employees_per_shift": 2,
    })
    assert resp.status_code == 201
    return resp.json()


@pytest.fixture
def staffed_establishment(client, establishment) -> dict:
    for name, phone in [("Ana", "(11) 99999-0001"), ("Bruno", None), ("Carla", "11999990003")]:
        resp = client.post(
            f"/api/v1/establishments/{establishment['id']}/employees",
            json={"name": name, "phone": phone, "status": "active"},
        )
        assert resp.status_code == 201
    return establishment
