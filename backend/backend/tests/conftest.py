# tests/conftest.py
from __future__ import annotations

import os
from datetime import date

# Point the app at an in-memory database before anything imports app.db.session.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CREATE_SCHEMA_ON_STARTUP"] = "0"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.db.base import Base  # noqa: E402
from app.db import models  # noqa: E402,F401
from app.db.models.wms.inventory import InventoryRecord  # noqa: E402
from app.db.models.wms.order_items import OrderLineItem  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from main import app  # noqa: E402

REPORTER_ID = "picker-1"


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
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


@pytest.fixture()
def session_maker(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture()
def session(session_maker):
    with session_maker() as sess:
        yield sess


@pytest.fixture()
def client(session_maker):
    def _get_db():
        db = session_maker()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(REPORTER_ID)}"}


@pytest.fixture()
def add_inventory(session):
    def _add(sku: str, bin_id: str, quantity: int, status: str = "available",
             expiry_date: date | None = None, batch_number: str | None = None) -> InventoryRecord:
        rec = InventoryRecord(sku=sku, bin_id=bin_id, quantity=quantity, status=status,
                              expiry_date=expiry_date, batch_number=batch_number)
        session.add(rec)
        session.commit()
        return rec
    return _add


@pytest.fixture()
def add_line_item(session):
    def _add(order_id: str, sku: str, *, location: str | None = None, quantity: int = 1,
             name: str | None = None, category: str | None = "Grocery") -> OrderLineItem:
        item = OrderLineItem(order_id=order_id, item_code=sku, name=name or f"Item {sku}",
                             quantity=quantity, category=category, location=location)
        session.add(item)
        session.commit()
        return item
    return _add
