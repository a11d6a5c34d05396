from __future__ import annotations

import itertools
from datetime import timedelta

import pytest

from campaign import create_app
from campaign.auth import WEB_ROLE, create_access_token
from campaign.config import TestingConfig
from campaign.errors import UpstreamError
from campaign.models.base import utcnow
from campaign.models.client import Client
from campaign.models.game_opportunity import GameOpportunity
from campaign.models.invoice import Invoice
from campaign.models.voucher import Voucher
from campaign.services.sales_api import SaleSummary
from campaign.utils.fiscal_code import compute_check_digit

VALID_CPF = "52998224725"
OTHER_VALID_CPF = "11144477735"


def make_fiscal_code(seed: int) -> str:
    body = str(seed).zfill(43)
    return body + str(compute_check_digit(body))


class FakeSalesApi:
    """Stands in for SalesApiClient; sales are keyed by fiscal code."""

    def __init__(self) -> None:
        self.sales: dict[str, SaleSummary] = {}
        self.calls: list[str] = []

    def add(self, fiscal_code: str, total_value: float, **kwargs) -> SaleSummary:
        sale = SaleSummary(total_value=total_value, **kwargs)
        self.sales[fiscal_code] = sale
        return sale

    def fetch_sale(self, fiscal_code: str) -> SaleSummary:
        self.calls.append(fiscal_code)
        if fiscal_code not in self.sales:
            raise UpstreamError()
        return self.sales[fiscal_code]


@pytest.fixture()
def sales_api():
    return FakeSalesApi()


@pytest.fixture()
def app(sales_api):
    app = create_app(TestingConfig)
    app.extensions["sales_api"] = sales_api
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def outbox(app):
    return app.extensions["email_service"].outbox


@pytest.fixture()
def db_session(app):
    session = app.extensions["session_factory"]()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture()
def admin_headers(app):
    with app.app_context():
        token = create_access_token({"id": 1, "username": "admin", "roles": ["admin"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def web_headers(app):
    def _headers(client_row: Client) -> dict[str, str]:
        with app.app_context():
            token = create_access_token({"userToken": client_row.token, "roles": [WEB_ROLE]})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def make_client(db_session):
    counter = itertools.count(1)

    def _make(**overrides) -> Client:
        n = next(counter)
        values = {
            "is_pre_register": False,
            "name": f"Cliente Teste {n}",
            "cpf": f"{n:011d}",
            "email": f"cliente{n}@example.com",
            "token": f"client-token-{n}",
        }
        values.update(overrides)
        row = Client(**values)
        db_session.add(row)
        db_session.commit()
        return row

    return _make


@pytest.fixture()
def make_opportunity(db_session):
    """Invoice with one unused opportunity; ``age`` pushes created_at into the past."""

    counter = itertools.count(1)

    def _make(client_row: Client, age: timedelta = timedelta(0)) -> GameOpportunity:
        n = next(counter)
        created = utcnow() - age
        invoice = Invoice(
            fiscal_code=make_fiscal_code(900_000 + n),
            client_id=client_row.id,
            invoice_value=200.0,
            chances=1,
            created_at=created,
        )
        db_session.add(invoice)
        db_session.flush()
        opportunity = GameOpportunity(invoice_id=invoice.id, active=True, created_at=created)
        db_session.add(opportunity)
        db_session.commit()
        return opportunity

    return _make


@pytest.fixture()
def make_voucher(db_session):
    counter = itertools.count(1)

    def _make(draw_date=None, **overrides) -> Voucher:
        n = next(counter)
        values = {
            "coupom": f"CUPOM-{n:04d}",
            "draw_date": draw_date or utcnow() - timedelta(hours=1),
            "voucher_value": 50,
        }
        values.update(overrides)
        row = Voucher(**values)
        db_session.add(row)
        db_session.commit()
        return row

    return _make
