"""Voucher routes: public drawn list, admin CRUD and export."""

from __future__ import annotations

from flask import Blueprint, request

from campaign.auth import current_user_id, roles_required
from campaign.db import get_session
from campaign.schemas.voucher import DrawnVoucherSchema, VoucherCreateSchema, VoucherSchema, VoucherUpdateSchema
from campaign.services.export_service import ExportColumn, export_rows
from campaign.services.voucher_service import VoucherService
from campaign.utils.query import parse_list_filters
from campaign.utils.responses import attachment, ok

vouchers_bp = Blueprint("vouchers", __name__)

_schema = VoucherSchema()
_many_schema = VoucherSchema(many=True)
_drawn_schema = DrawnVoucherSchema(many=True)
_create_schema = VoucherCreateSchema()
_update_schema = VoucherUpdateSchema()
_service = VoucherService()

EXPORT_COLUMNS = (
    ExportColumn("id", "ID", 10),
    ExportColumn("coupom", "Cupom", 25),
    ExportColumn("draw_date", "Data do Sorteio", 25),
    ExportColumn("voucher_value", "Valor do Voucher", 20),
    ExportColumn("game_opportunity_id", "Oportunidade de Jogo", 20),
    ExportColumn("created_at", "Criado Em", 25),
    ExportColumn("updated_at", "Atualizado Em", 25),
)


@vouchers_bp.get("/drawn")
def list_drawn():
    """Public list of winners, with masked personal data."""

    return ok(_drawn_schema.dump(_service.list_drawn(get_session())))


@vouchers_bp.get("/export")
@roles_required("admin")
def export_vouchers():
    session = get_session()
    filters = parse_list_filters(request.args)
    export = export_rows(
        session,
        request.args.get("format", "csv"),
        _service.list_all(session, filters),
        EXPORT_COLUMNS,
        name="vouchers",
        filters=filters,
        user_id=current_user_id(),
    )
    return attachment(export.content, export.mimetype, export.filename)


@vouchers_bp.get("")
@roles_required("admin")
def list_vouchers():
    page = _service.list(get_session(), parse_list_filters(request.args))
    return ok(_many_schema.dump(page.items), pagination=page.pagination())


@vouchers_bp.post("")
@roles_required("admin")
def create_voucher():
    data = _create_schema.load(request.get_json(silent=True) or {})
    voucher = _service.create(get_session(), data, user_id=current_user_id())
    return ok(_schema.dump(voucher), status_code=201, message="Voucher criado com sucesso.")


@vouchers_bp.get("/<int:voucher_id>")
@roles_required("admin")
def get_voucher(voucher_id: int):
    return ok(_schema.dump(_service.get(get_session(), voucher_id)))


@vouchers_bp.put("/<int:voucher_id>")
@roles_required("admin")
def update_voucher(voucher_id: int):
    data = _update_schema.load(request.get_json(silent=True) or {})
    voucher = _service.update(get_session(), voucher_id, data, user_id=current_user_id())
    return ok(_schema.dump(voucher), message="Voucher atualizado com sucesso.")


@vouchers_bp.delete("/<int:voucher_id>")
@roles_required("admin")
def delete_voucher(voucher_id: int):
    _service.delete(get_session(), voucher_id, user_id=current_user_id())
    return "", 204
