import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from inventory.api import (
    amenity,
    bus_diagram_model,
    bus_diagram_model_zone,
    bus_seat_model,
    executive_token,
)
from inventory.src import openobserve, redis, seat_configuration
from inventory.src.db import ORMbase

from helpers import SEATER_TEMPLATE, createExecutive, login

API_MODULES = [
    amenity,
    bus_diagram_model,
    bus_diagram_model_zone,
    bus_seat_model,
    executive_token,
]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    ORMbase.metadata.create_all(engine)
    yield engine
    ORMbase.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def testSessionMaker(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def session(testSessionMaker):
    session = testSessionMaker()
    yield session
    session.close()


@pytest.fixture
def diagramModel(session):
    """A committed 2x2 seater with 10 rows and its 40 generated seats."""
    return seat_configuration.createDiagramModelWithSpaces(
        session, dict(SEATER_TEMPLATE)
    )


@pytest.fixture
def auditEvents(monkeypatch):
    events = []
    monkeypatch.setattr(openobserve, "logEvent", events.append)
    return events


@pytest.fixture
def client(testSessionMaker, monkeypatch, auditEvents):
    for module in API_MODULES:
        monkeypatch.setattr(module, "sessionMaker", testSessionMaker)
    monkeypatch.setattr(redis, "acquireLock", lambda *args, **kwargs: None)

    from inventory.main import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def adminHeader(client, session):
    createExecutive(session, "admin", allowAll=True)
    return login(client, "admin")


@pytest.fixture
def guestHeader(client, session):
    createExecutive(session, "guest")
    return login(client, "guest")
