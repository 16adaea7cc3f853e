"""Shared helpers: in-memory SQLite database and a TestClient wired to it."""

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import get_db
from app.core.rate_limit import RateLimiter
from app.core.security import hash_password
from app.main import create_app
from app.models import Base, User

DEFAULT_PASSWORD = "password123"


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database shared across threads (TestClient runs handlers in a pool)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def make_client(
    rate_limiter: RateLimiter | None = None,
    raise_server_exceptions: bool = True,
) -> tuple[TestClient, sessionmaker]:
    """App with get_db pointed at a fresh in-memory database."""
    session_factory = make_session_factory()
    app = create_app(rate_limiter=rate_limiter)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app, raise_server_exceptions=raise_server_exceptions)
    return client, session_factory


def insert_user(
    db: Session,
    email: str = "john@example.com",
    fullname: str = "John Doe",
    password: str = DEFAULT_PASSWORD,
    role: str = "user",
    is_active: bool = True,
) -> User:
    user = User(
        fullname=fullname,
        email=email,
        password_hash=hash_password(password),
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def login(client: TestClient, email: str, password: str = DEFAULT_PASSWORD) -> str:
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
