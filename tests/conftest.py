import os
import shutil
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["AUTO_CREATE_TABLES"] = "true"
os.environ["IDENTITY_JWT_SECRET"] = "test-identity-secret"
os.environ["UPLOAD_DIR"] = "./test-data/uploads"
os.environ["MAX_UPLOAD_SIZE_MB"] = "1"
os.environ["RATE_LIMIT_PER_MINUTE"] = "10000"
os.environ["BIN_SOURCE"] = "static"

from sortex.core.security import Identity, issue_identity_token
from sortex.db.base import Base
from sortex.db.session import SessionLocal, engine
from sortex.main import create_app
from sortex.services.bins import StaticBinSource, get_bin_source
from sortex.services.storage import LocalObjectStore, get_object_store


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    path = Path("test.db")
    if path.exists():
        path.unlink()
    shutil.rmtree("test-data", ignore_errors=True)


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def object_store(tmp_path):
    return LocalObjectStore(tmp_path / "objects", "http://testserver/files")


@pytest.fixture()
def client(object_store):
    app = create_app()
    app.dependency_overrides[get_object_store] = lambda: object_store
    app.dependency_overrides[get_bin_source] = lambda: StaticBinSource()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers():
    def _headers(user_id: str = "user_alice", email: str = "alice@example.com", name: str | None = "Alice") -> dict:
        token = issue_identity_token(user_id, email=email, name=name)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def make_identity():
    def _identity(user_id: str, name: str | None = None) -> Identity:
        return Identity(user_id=user_id, email=f"{user_id}@example.com", name=name)

    return _identity
