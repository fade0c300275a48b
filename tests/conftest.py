from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings
from app.database import Base, enable_sqlite_foreign_keys, get_db
from app.models import User, UserRole, Vendor, Vlogger
from app.repositories.gateway import PersistenceGateway
from app.services.workflow import Actor, WorkflowContext

T0 = datetime(2025, 1, 15, 10, 0, 0)


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def gateway(db):
    return PersistenceGateway(db)


@pytest.fixture
def clock():
    return Clock(T0)


def _user(db, role: UserRole, email: str) -> User:
    user = User(email=email, full_name=email.split("@")[0], role=role.value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def make_vendor(db):
    def _make(email: str = "tacos@example.com", name: str = "Taco Cart") -> User:
        user = _user(db, UserRole.VENDOR, email)
        db.add(Vendor(id=user.id, name=name, cuisine_type="Mexican", location="Pune"))
        db.commit()
        return user
    return _make


@pytest.fixture
def vendor_user(make_vendor):
    return make_vendor()


@pytest.fixture
def vlogger_user(db):
    user = _user(db, UserRole.VLOGGER, "eats@example.com")
    db.add(Vlogger(id=user.id, name="Street Eats", platform="YouTube", username="streeteats"))
    db.commit()
    return user


@pytest.fixture
def admin_user(db):
    return _user(db, UserRole.ADMIN, "admin@example.com")


@pytest.fixture
def make_ctx(gateway, clock):
    def _make(user: User) -> WorkflowContext:
        return WorkflowContext(gateway=gateway, actor=Actor(id=user.id, role=user.role), clock=clock)
    return _make


@pytest.fixture
def client(db):
    from app.main import app

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def issue_token(user: User) -> str:
    """Token with the claims the auth provider issues."""
    settings = get_settings()
    payload = {
        "sub": user.id,
        "email": user.email,
        "exp": datetime.utcnow() + timedelta(minutes=settings.access_token_expire_minutes),
        "type": "access",
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {issue_token(user)}"}
    return _headers
