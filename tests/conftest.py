# tests/conftest.py
import os, sys
# lägg till projektroten (mappen som innehåller "src") först i sys.path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from datetime import date

import pytest
from sqlmodel import Session

from src.core.context import RequestContext
from src.server.db.session import build_engine, get_session, init_db
from src.server.schemas.client import ClientIn
from src.server.schemas.product import ProductIn
from src.server.schemas.quote import QuoteCreate, QuoteItemIn
from src.server.settings.config import settings
from src.services import clients as client_service
from src.services import inventory
from src.services import quote_service


@pytest.fixture
def engine():
    eng = build_engine("sqlite://")
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def ctx():
    return RequestContext(user_id="user-1", language="en")


@pytest.fixture
def other_ctx():
    return RequestContext(user_id="user-2", language="en")


@pytest.fixture
def make_product(session, ctx):
    def _make(name="Skruvdragare", quantity=10, price=100.0, **kw):
        payload = ProductIn(name=name, quantity=quantity, price=price, **kw)
        return inventory.create_product(session=session, ctx=ctx, payload=payload)
    return _make


@pytest.fixture
def make_client(session, ctx):
    def _make(full_name="Anna Svensson", **kw):
        return client_service.create_client(
            session=session, ctx=ctx, payload=ClientIn(full_name=full_name, **kw)
        )
    return _make


@pytest.fixture
def make_quote(session, ctx, make_client):
    def _make(items, client=None):
        client = client or make_client()
        payload = QuoteCreate(
            client_id=client.id,
            validity_date=date(2026, 12, 31),
            items=[QuoteItemIn(**it) for it in items],
        )
        return quote_service.create_quote(payload=payload, session=session, ctx=ctx)
    return _make


# ==============================
# HTTP
# ==============================

@pytest.fixture
def api(engine):
    from fastapi.testclient import TestClient
    from src.server.main import app

    def _session_override():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _session_override
    # Ingen "with": lifespan (init_db mot riktiga databasen) ska inte köras i test
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def headers():
    return {"X-API-KEY": settings.api_key, "X-User-Id": "user-1"}
