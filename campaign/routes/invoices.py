"""Invoice routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from campaign.auth import WEB_ROLE, current_client_token, current_user_id, roles_required
from campaign.db import get_session
from campaign.schemas.invoice import (
    InvoiceAddSchema,
    InvoiceCreateSchema,
    InvoiceDetailSchema,
    InvoiceSchema,
    InvoiceUpdateSchema,
    LuckResultSchema,
)
from campaign.services.audit_service import log_activity
from campaign.services.client_service import ClientService
from campaign.services.invoice_service import ChanceRules, DrawNumberGenerator, InvoiceService
from campaign.services.luck_service import LuckService
from campaign.utils.query import parse_list_filters
from campaign.utils.responses import ok

invoices_bp = Blueprint("invoices", __name__)

_invoice_schema = InvoiceSchema()
_invoices_schema = InvoiceSchema(many=True)
_detail_schema = InvoiceDetailSchema()
_details_schema = InvoiceDetailSchema(many=True)
_create_schema = InvoiceCreateSchema()
_add_schema = InvoiceAddSchema()
_update_schema = InvoiceUpdateSchema()
_luck_schema = LuckResultSchema()


def _service() -> InvoiceService:
    config = current_app.config
    return InvoiceService(
        sales_api=current_app.extensions["sales_api"],
        rules=ChanceRules.from_config(config),
        generator=DrawNumberGenerator.from_config(config),
    )


# -- web client -----------------------------------------------------------


@invoices_bp.post("/add")
@roles_required(WEB_ROLE)
def add_invoice():
    data = _add_schema.load(request.get_json(silent=True) or {})
    session = get_session()
    client = ClientService().get_by_token(session, current_client_token())

    invoice = _service().register_invoice(session, fiscal_code=data["fiscal_code"], client_id=client.id)
    return ok(_detail_schema.dump(invoice), status_code=201, message="Nota fiscal cadastrada com sucesso.")


@invoices_bp.get("/mine")
@roles_required(WEB_ROLE)
def list_my_invoices():
    session = get_session()
    client = ClientService().get_by_token(session, current_client_token())
    invoices = _service().list_for_client(session, client.id)
    return ok(_details_schema.dump(invoices))


@invoices_bp.get("/try-my-luck")
@roles_required(WEB_ROLE)
def try_my_luck():
    service = LuckService(email_service=current_app.extensions["email_service"])
    result = service.try_my_luck(get_session(), current_client_token())
    return ok(_luck_schema.dump(result), message=result.message)


# -- admin ----------------------------------------------------------------


@invoices_bp.post("")
@roles_required("admin")
def create_invoice():
    data = _create_schema.load(request.get_json(silent=True) or {})
    session = get_session()
    invoice = _service().register_invoice(session, fiscal_code=data["fiscal_code"], client_id=data["client_id"])
    log_activity(session, current_user_id(), "CREATE_INVOICES", "invoices", invoice.id, {"request_body": data})
    return ok(_detail_schema.dump(invoice), status_code=201, message="Nota fiscal cadastrada com sucesso.")


@invoices_bp.get("")
@roles_required("admin")
def list_invoices():
    page = _service().list_invoices(get_session(), parse_list_filters(request.args))
    return ok(_invoices_schema.dump(page.items), pagination=page.pagination())


@invoices_bp.get("/<int:invoice_id>")
@roles_required("admin")
def get_invoice(invoice_id: int):
    invoice = _service().get_invoice(get_session(), invoice_id)
    return ok(_detail_schema.dump(invoice))


@invoices_bp.put("/<int:invoice_id>")
@roles_required("admin")
def update_invoice(invoice_id: int):
    data = _update_schema.load(request.get_json(silent=True) or {})
    session = get_session()
    invoice = _service().update_invoice(session, invoice_id, data)
    log_activity(session, current_user_id(), "UPDATE_INVOICES", "invoices", invoice.id, {"request_body": data})
    return ok(_invoice_schema.dump(invoice), message="Nota fiscal atualizada com sucesso.")


@invoices_bp.delete("/<int:invoice_id>")
@roles_required("admin")
def delete_invoice(invoice_id: int):
    session = get_session()
    _service().delete_invoice(session, invoice_id)
    log_activity(session, current_user_id(), "DELETE_INVOICES", "invoices", invoice_id)
    return "", 204
