import pytest
from sqlalchemy import func, select

from campaign.errors import (
    ConflictError,
    DrawNumberExhaustedError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from campaign.models.draw_number import DrawNumber
from campaign.models.game_opportunity import GameOpportunity
from campaign.models.invoice import Invoice
from campaign.models.product import Product
from campaign.services.invoice_service import ChanceRules, DrawNumberGenerator, InvoiceService

from conftest import make_fiscal_code


def _service(sales_api, **generator_kwargs):
    generator_kwargs.setdefault("max_attempts", 50)
    return InvoiceService(
        sales_api=sales_api,
        rules=ChanceRules(min_value=200.0, qualifying_payment_methods=("03",)),
        generator=DrawNumberGenerator(**generator_kwargs),
    )


def _count(session, model):
    return session.scalar(select(func.count()).select_from(model))


def test_register_allocates_opportunities_and_draw_numbers(db_session, sales_api, make_client):
    client_row = make_client()
    code = make_fiscal_code(1)
    sales_api.add(code, 450.0, payment_types=("01",))

    invoice = _service(sales_api).register_invoice(db_session, fiscal_code=code, client_id=client_row.id)

    assert invoice.chances == 2
    assert invoice.invoice_value == 450.0
    assert not (invoice.has_item or invoice.has_creditcard or invoice.has_partner_code)

    opportunities = db_session.scalars(select(GameOpportunity).where(GameOpportunity.invoice_id == invoice.id)).all()
    numbers = db_session.scalars(select(DrawNumber).where(DrawNumber.invoice_id == invoice.id)).all()
    assert len(opportunities) == 2
    assert len(numbers) == 2
    assert {n.game_opportunity_id for n in numbers} == {o.id for o in opportunities}
    assert all(len(n.number) == 7 and n.number.isdigit() for n in numbers)
    assert len({n.number for n in numbers}) == 2


def test_qualifying_payment_doubles_chances(db_session, sales_api, make_client):
    client_row = make_client()
    code = make_fiscal_code(2)
    sales_api.add(code, 450.0, payment_types=("01", "03"))

    invoice = _service(sales_api).register_invoice(db_session, fiscal_code=code, client_id=client_row.id)

    assert invoice.has_creditcard
    assert invoice.chances == 4


def test_tracked_product_doubles_chances(db_session, sales_api, make_client):
    client_row = make_client()
    db_session.add(Product(ean="7891234567890", description="Produto participante"))
    db_session.commit()
    code = make_fiscal_code(3)
    sales_api.add(code, 200.0, eans=("7891234567890",))

    invoice = _service(sales_api).register_invoice(db_session, fiscal_code=code, client_id=client_row.id)

    assert invoice.has_item
    assert invoice.chances == 2


def test_sale_details_are_stored(db_session, sales_api, make_client):
    client_row = make_client()
    code = make_fiscal_code(4)
    sales_api.add(code, 300.0, store=12, pdv=3, num_coupon=5555, cnpj="12.345.678/0001-90", partner_code="P1")

    invoice = _service(sales_api).register_invoice(db_session, fiscal_code=code, client_id=client_row.id)

    assert (invoice.store, invoice.pdv, invoice.num_coupon) == (12, 3, 5555)
    assert invoice.cnpj == "12.345.678/0001-90"
    assert invoice.has_partner_code
    assert invoice.chances == 2


def test_below_minimum_value_is_rejected(db_session, sales_api, make_client):
    client_row = make_client()
    code = make_fiscal_code(5)
    sales_api.add(code, 199.99, payment_types=("03",))

    with pytest.raises(ValidationError):
        _service(sales_api).register_invoice(db_session, fiscal_code=code, client_id=client_row.id)

    assert _count(db_session, Invoice) == 0


def test_invalid_fiscal_code_never_reaches_sales_api(db_session, sales_api, make_client):
    client_row = make_client()

    with pytest.raises(ValidationError):
        _service(sales_api).register_invoice(db_session, fiscal_code="1234", client_id=client_row.id)

    assert sales_api.calls == []


def test_duplicate_fiscal_code_conflicts(db_session, sales_api, make_client):
    client_row = make_client()
    code = make_fiscal_code(6)
    sales_api.add(code, 250.0)
    service = _service(sales_api)
    service.register_invoice(db_session, fiscal_code=code, client_id=client_row.id)

    with pytest.raises(ConflictError):
        service.register_invoice(db_session, fiscal_code=code, client_id=client_row.id)


def test_unknown_client(db_session, sales_api):
    code = make_fiscal_code(7)
    sales_api.add(code, 250.0)

    with pytest.raises(NotFoundError):
        _service(sales_api).register_invoice(db_session, fiscal_code=code, client_id=999)


def test_sales_api_failure_persists_nothing(db_session, sales_api, make_client):
    client_row = make_client()

    with pytest.raises(UpstreamError):
        _service(sales_api).register_invoice(db_session, fiscal_code=make_fiscal_code(8), client_id=client_row.id)

    assert _count(db_session, Invoice) == 0


def test_exhausted_number_space_rolls_back_whole_invoice(db_session, sales_api, make_client):
    client_row = make_client()
    code = make_fiscal_code(9)
    sales_api.add(code, 400.0)
    # Only one possible number, but two chances.
    service = _service(sales_api, minimum=1, maximum=1, max_attempts=5)

    with pytest.raises(DrawNumberExhaustedError):
        service.register_invoice(db_session, fiscal_code=code, client_id=client_row.id)

    assert _count(db_session, Invoice) == 0
    assert _count(db_session, GameOpportunity) == 0
    assert _count(db_session, DrawNumber) == 0


def test_generator_skips_existing_numbers(db_session, sales_api, make_client):
    client_row = make_client()
    first = make_fiscal_code(10)
    sales_api.add(first, 200.0)
    _service(sales_api, minimum=5, maximum=5).register_invoice(db_session, fiscal_code=first, client_id=client_row.id)

    picks = iter([5, 5, 6])
    generator = DrawNumberGenerator(minimum=5, maximum=6, max_attempts=3, randint=lambda a, b: next(picks))

    assert generator.generate(db_session, set()) == "0000006"


def test_generator_honours_reserved_numbers(db_session):
    picks = iter([7, 8])
    generator = DrawNumberGenerator(minimum=7, maximum=8, max_attempts=2, randint=lambda a, b: next(picks))
    reserved = {"0000007"}

    assert generator.generate(db_session, reserved) == "0000008"
    assert reserved == {"0000007", "0000008"}


def test_update_invoice_status_and_fiscal_code(db_session, sales_api, make_client):
    client_row = make_client()
    code = make_fiscal_code(11)
    sales_api.add(code, 200.0)
    service = _service(sales_api)
    invoice = service.register_invoice(db_session, fiscal_code=code, client_id=client_row.id)

    new_code = make_fiscal_code(12)
    updated = service.update_invoice(db_session, invoice.id, {"status": "approved", "fiscal_code": new_code})

    assert updated.status == "approved"
    assert updated.fiscal_code == new_code
    with pytest.raises(ValidationError):
        service.update_invoice(db_session, invoice.id, {})
