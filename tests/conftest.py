"""
Shared fixtures for the Price Archive API tests.

Every test gets its own SQLite file database, wrapped in a PriceStore and wired
into the FastAPI app through ``app.dependency_overrides``.
"""

import io
import zipfile

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from api.main import app
from db.gateway import PriceStore
from db.models import Base
from db.session import get_price_store

PRICES_URL = "/api/v0/prices"
UPLOAD_HEADER = "id,name,category,price,created_date\n"


def make_archive(entries):
    """Build a ZIP in memory from a mapping of entry name to text content."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zip_ref:
        for name, content in entries.items():
            zip_ref.writestr(name, content)
    return buffer.getvalue()


def make_upload(*rows, header=UPLOAD_HEADER):
    """Build an upload archive holding data.csv with the given raw CSV lines."""
    return make_archive({"data.csv": header + "".join(f"{row}\n" for row in rows)})


def read_entry(archive_bytes, name="data.csv"):
    with zipfile.ZipFile(io.BytesIO(archive_bytes)) as zip_ref:
        return zip_ref.read(name).decode("utf-8")


def build_store(url):
    engine = create_engine(url, connect_args={"check_same_thread": False})
    return engine, PriceStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))


@pytest.fixture
def engine_and_store(tmp_path):
    engine, store = build_store(f"sqlite:///{tmp_path / 'prices.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine, store
    engine.dispose()


@pytest.fixture
def store(engine_and_store):
    return engine_and_store[1]


@pytest.fixture
def client(store):
    app.dependency_overrides[get_price_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_store(tmp_path):
    """A store whose database file lives in a directory that does not exist."""
    engine, store = build_store(f"sqlite:///{tmp_path / 'missing' / 'prices.db'}")
    yield store
    engine.dispose()


def upload(client, archive_bytes):
    return client.post(
        PRICES_URL,
        files={"file": ("upload.zip", archive_bytes, "application/zip")},
    )
