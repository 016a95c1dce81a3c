import os

# Settings must be in place before the application modules read them
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ.pop("REDIS_URL", None)

from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from eventplanner import rate_limiter  # noqa: E402
from eventplanner.database import Base, get_db  # noqa: E402
from eventplanner.main import app  # noqa: E402
from eventplanner.models import Event, Guest, Provider, Role, User  # noqa: E402
from eventplanner.security_utils import create_access_token, hash_password  # noqa: E402

PASSWORD = "correct-horse-battery"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
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
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    rate_limiter.reset_rate_limits()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def password_hash():
    # bcrypt is slow; hash the shared test password once
    return hash_password(PASSWORD)


@pytest.fixture
def make_user(db, password_hash):
    def _make_user(role=Role.GUEST, email=None, name=None, business_name=None):
        count = db.query(User).count() + 1
        user = User(
            email=email or f"{role.value.lower()}{count}@example.com",
            name=name or f"{role.value.title()} {count}",
            password_hash=password_hash,
            role=role.value,
        )
        db.add(user)
        if business_name:
            db.add(Provider(user=user, business_name=business_name))
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}

    return _auth_headers


@pytest.fixture
def host(make_user):
    return make_user(Role.HOST, email="host@example.com", name="Hana Host")


@pytest.fixture
def guest_user(make_user):
    return make_user(Role.GUEST, email="guest@example.com", name="Gus Guest")


@pytest.fixture
def provider_user(make_user):
    return make_user(Role.PROVIDER, email="provider@example.com", name="Pat Provider", business_name="Prairie Catering")


@pytest.fixture
def provider(db, provider_user):
    return db.query(Provider).filter(Provider.user_id == provider_user.id).one()


@pytest.fixture
def make_event(db):
    def _make_event(creator, name="Harvest Dinner", is_private=True, start_at=None, **fields):
        event = Event(
            name=name,
            created_by_id=creator.id,
            is_private=is_private,
            start_at=start_at or datetime.now() + timedelta(days=7),
            **fields,
        )
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    return _make_event


@pytest.fixture
def make_guest(db):
    def _make_guest(event, name="Ada", email="ada@example.com"):
        guest = Guest(event_id=event.id, name=name, email=email)
        db.add(guest)
        db.commit()
        db.refresh(guest)
        return guest

    return _make_guest
