import os

# settings читаются при импорте app.*: задаём окружение до первого импорта
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SCRIPT_TOKEN_SECRET", "test-secret")
os.environ.setdefault("ADMIN_API_KEY", "test-admin-key")

from datetime import datetime, timezone  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import app.models  # noqa: E402,F401
from app.db.base import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.models.script import Script  # noqa: E402
from app.models.whitelist_entry import WhitelistEntry  # noqa: E402


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    from app.main import app

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture()
def make_script(db):
    def _make(**kwargs) -> Script:
        script = Script(
            id=kwargs.pop("id", str(uuid4())),
            user_id=kwargs.pop("user_id", "owner-1"),
            name=kwargs.pop("name", "Test script"),
            script_content=kwargs.pop("script_content", 'print("hello")'),
            access_tier=kwargs.pop("access_tier", "standard"),
            is_active=kwargs.pop("is_active", True),
            total_executions=kwargs.pop("total_executions", 0),
            **kwargs,
        )
        db.add(script)
        db.commit()
        db.refresh(script)
        return script

    return _make


@pytest.fixture()
def make_entry(db):
    def _make(script_id: str, **kwargs) -> WhitelistEntry:
        entry = WhitelistEntry(
            id=kwargs.pop("id", str(uuid4())),
            script_id=script_id,
            roblox_id=kwargs.pop("roblox_id", None),
            discord_id=kwargs.pop("discord_id", None),
            access_tier=kwargs.pop("access_tier", "premium"),
            duration_type=kwargs.pop("duration_type", "unlimited"),
            expires_at=kwargs.pop("expires_at", None),
            is_active=kwargs.pop("is_active", True),
            created_at=kwargs.pop("created_at", datetime.now(timezone.utc)),
            **kwargs,
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    return _make
