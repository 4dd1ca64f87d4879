import pytest
from datetime import timedelta
from fastapi.testclient import TestClient
from sqlmodel import Session

from app.core.clock import utcnow
from app.core.config import Settings
from app.core.security import create_access_token
from app.main import create_app
from app.models.service import Service
from app.models.service_request import RequestStatus, ServiceRequest
from app.models.user import User


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", secret_key="test-secret", environment="test")


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # entering the client runs the lifespan, which creates the tables
    with TestClient(app) as c:
        yield c


@pytest.fixture
def session(app, client):
    with Session(app.state.engine) as s:
        yield s


def _add_user(session, name, email, role, phone_number=None):
    user = User(
        name=name,
        email=email,
        phone_number=phone_number,
        role=role,
        password_hash="not-a-real-hash",
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def add_user(session):
    def _add(name, email, role, phone_number=None):
        return _add_user(session, name, email, role, phone_number)
    return _add


@pytest.fixture
def provider(session):
    return _add_user(session, "Paula Provider", "paula@example.com", "provider", "555-0100")


@pytest.fixture
def other_provider(session):
    return _add_user(session, "Oscar Other", "oscar@example.com", "provider")


@pytest.fixture
def customer(session):
    return _add_user(session, "Carl Customer", "carl@example.com", "customer", "555-0199")


@pytest.fixture
def haircut(session, provider):
    service = Service(name="Haircut", description="Wash and cut", price=25.0, provider_id=provider.id)
    session.add(service)
    session.commit()
    session.refresh(service)
    return service


@pytest.fixture
def auth_headers(settings):
    def _headers(user):
        token = create_access_token({"sub": user.email}, settings)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def future_slot():
    return (utcnow() + timedelta(days=3)).replace(microsecond=0).isoformat()


@pytest.fixture
def make_request(session, customer, provider, haircut):
    """Insert a service request directly in the given status."""
    def _make(status=RequestStatus.PENDING, owner=None):
        owner = owner or provider
        record = ServiceRequest(
            customer_id=customer.id,
            provider_id=owner.id,
            service_id=haircut.id,
            service_name_snapshot="Haircut",
            service_price_snapshot=25.0,
            customer_address="12 Elm Street",
            time_slot=utcnow() + timedelta(days=1),
            status=status,
        )
        session.add(record)
        session.commit()
        session.refresh(record)
        return record
    return _make


@pytest.fixture
def stored_status(session):
    def _status(request_id):
        session.expire_all()
        return session.get(ServiceRequest, request_id).status
    return _status
