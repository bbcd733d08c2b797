# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-session-signing-key")
os.environ.setdefault("IDENTITY_SECRET", "test-identity-secret")
os.environ.setdefault("ENCRYPTION_SECRET", "test-encryption-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("IDENTITY_CACHE_BACKEND", "memory")

from matchgate.core.security import create_access_token
from matchgate.db.session import Base
from matchgate.db.session import get_db as app_get_session
from matchgate.main import app as fastapi_app
from matchgate.models import Profile
from matchgate.services.identity import IdentityResolver, get_identity_resolver

TEST_DB_URL = "sqlite://"


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def resolver() -> Iterator[IdentityResolver]:
    """Return the process-wide resolver with an empty cache."""
    resolver = get_identity_resolver()
    resolver.cache.clear()
    yield resolver
    resolver.cache.clear()


@pytest.fixture()
def client(app: FastAPI, resolver: IdentityResolver) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def auth_headers() -> Callable[[str], dict[str, str]]:
    """Return a builder of authorization headers for a real identity."""

    def _headers(identity: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(identity)}"}

    return _headers


@pytest.fixture()
def make_profile(db_session: Session) -> Callable[..., Profile]:
    """Return a factory persisting profiles keyed by real identity."""

    def _make(identity: str, name: str | None = None, **fields: Any) -> Profile:
        profile = Profile(
            identity=identity,
            name=name or identity.split("@")[0].title(),
            age=fields.pop("age", 30),
            avatar_url=fields.pop("avatar_url", f"https://cdn.test/{identity}/avatar.jpg"),
            photos=fields.pop("photos", [f"https://cdn.test/{identity}/0.jpg"]),
            **fields,
        )
        db_session.add(profile)
        db_session.commit()
        return profile

    return _make


@pytest.fixture()
def profiles(make_profile: Callable[..., Profile]) -> dict[str, Profile]:
    """Create profiles for alice, bob and carol."""
    return {
        identity: make_profile(identity, bio=f"{identity} bio", skills=["climbing"])
        for identity in ("alice@example.com", "bob@example.com", "carol@example.com")
    }
