import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from portal.config import settings
from portal.database import get_engine, init_db
from portal.dependencies import get_identity_bridge, get_store
from portal.main import app
from portal.services.change_feed import change_feed
from portal.services.document_store import DocumentStore
from portal.services.identity_service import IdentityBridge
from portal.services.listing_cache import listing_cache


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / "PortalData"
    path.mkdir()
    return path


@pytest.fixture
def session_factory(data_dir):
    db_path = data_dir / "portal.sqlite"
    init_db(db_path)
    engine = get_engine(db_path)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    return DocumentStore(session_factory, feed=change_feed)


@pytest.fixture
def identities(session_factory):
    return IdentityBridge(session_factory)


@pytest.fixture(autouse=True)
def fresh_listing_cache():
    """The listing cache is process-wide; start every test empty."""
    listing_cache.clear()
    yield listing_cache
    listing_cache.clear()


@pytest.fixture
def client(data_dir, store, identities):
    original_data_path = settings.data_path
    settings.data_path = data_dir
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_identity_bridge] = lambda: identities
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()
    settings.data_path = original_data_path
