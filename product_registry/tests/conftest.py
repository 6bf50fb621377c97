import os

# Settings are read on first import; tests run against in-memory SQLite.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# FORCE model registration
import product_registry.models  # noqa

from product_registry.core.auth_deps import get_authority_verifier, get_clock
from product_registry.core.security import create_access_token
from product_registry.core.types import CallContext, ProductRegistration, RegistryState
from product_registry.db.base import Base
from product_registry.db.session import get_db
from product_registry.services.authority_gate import StaticAuthorityVerifier
from product_registry.services.fee_transfer import RecordingFeeTransfer
from product_registry.services.product_store import InMemoryProductStore
from product_registry.services.registry_service import RegistryService

MANUFACTURER = "ST1TEST"
AUTHORITY_CONTRACT = "ST2TEST"
DOC_HASH = "abcdef1234567890abcdef1234567890abcdef1234567890abcdef1234567890"


# ─────────────────────────────────────────────
# IN-MEMORY REGISTRY
# ─────────────────────────────────────────────

@pytest.fixture
def make_registration():
    def _make(**overrides) -> ProductRegistration:
        fields = dict(
            product_id="PROD001",
            name="Coffee Beans",
            origin="Ethiopia",
            document_hash=DOC_HASH,
            product_type="food",
            batch_number="BATCH001",
            expiry_date=100000,
            location="Warehouse A",
            currency="STX",
            quantity=1000,
            price=50,
        )
        fields.update(overrides)
        return ProductRegistration(**fields)

    return _make


@pytest.fixture
def verifier():
    return StaticAuthorityVerifier({MANUFACTURER})


@pytest.fixture
def fee_transfer():
    return RecordingFeeTransfer()


@pytest.fixture
def state():
    return RegistryState()


@pytest.fixture
def registry(state, verifier, fee_transfer):
    return RegistryService(
        state=state,
        store=InMemoryProductStore(),
        verifier=verifier,
        fee_transfer=fee_transfer,
    )


@pytest.fixture
def ctx():
    return CallContext(caller=MANUFACTURER, clock=0)


# ─────────────────────────────────────────────
# DATABASE
# ─────────────────────────────────────────────

@pytest.fixture(scope="function")
def engine():
    eng = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=eng)
    try:
        yield eng
    finally:
        Base.metadata.drop_all(bind=eng)
        eng.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture(scope="function")
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


# ─────────────────────────────────────────────
# API
# ─────────────────────────────────────────────

@pytest.fixture
def clock():
    # mutable so a test can move time forward between requests
    return {"value": 10}


@pytest.fixture
def client(session_factory, verifier, clock):
    from product_registry.main import create_app

    app = create_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock["value"]
    app.dependency_overrides[get_authority_verifier] = lambda: verifier

    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers():
    def _headers(principal: str = MANUFACTURER) -> dict:
        return {"Authorization": f"Bearer {create_access_token(principal)}"}

    return _headers
