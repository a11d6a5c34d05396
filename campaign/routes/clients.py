"""Client routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from campaign.auth import WEB_ROLE, current_client_token, current_user_id, roles_required
from campaign.db import get_session
from campaign.schemas.client import (
    ClientCreateSchema,
    ClientSchema,
    ClientSummarySchema,
    ClientUpdateSchema,
    ClientWebUpdateSchema,
)
from campaign.services.client_service import ClientService
from campaign.services.export_service import ExportColumn, export_rows
from campaign.utils.masking import client_mask_info
from campaign.utils.query import parse_list_filters
from campaign.utils.responses import attachment, ok

clients_bp = Blueprint("clients", __name__)

_client_schema = ClientSchema()
_clients_schema = ClientSchema(many=True)
_create_schema = ClientCreateSchema()
_update_schema = ClientUpdateSchema()
_web_update_schema = ClientWebUpdateSchema()
_summary_schema = ClientSummarySchema()

EXPORT_COLUMNS = (
    ExportColumn("id", "ID", 10),
    ExportColumn("name", "Nome", 30),
    ExportColumn("cpf", "CPF", 20),
    ExportColumn("birthday", "Data de Aniversário", 20),
    ExportColumn("cel", "Celular", 20),
    ExportColumn("email", "Email", 30),
    ExportColumn("is_pre_register", "Pré-Cadastro", 15),
    ExportColumn("is_mega_winner", "Mega Ganhador", 15),
    ExportColumn("email_sended_at", "Email Enviado Em", 25),
    ExportColumn("created_at", "Criado Em", 25),
    ExportColumn("updated_at", "Atualizado Em", 25),
    ExportColumn("updated_security_token_at", "Token de segurança atualizado em", 25),
)


def _service() -> ClientService:
    return ClientService(email_service=current_app.extensions["email_service"])


def _masked(client) -> dict:  # type: ignore[no-untyped-def]
    return client_mask_info(_client_schema.dump(client)) or {}


# -- web client -----------------------------------------------------------


@clients_bp.get("/me")
@roles_required(WEB_ROLE)
def get_me():
    client = _service().get_by_token(get_session(), current_client_token())
    return ok(_masked(client))


@clients_bp.get("/web")
@roles_required(WEB_ROLE)
def get_web_profile():
    client = _service().get_by_token(get_session(), current_client_token())
    return ok(_masked(client))


@clients_bp.get("/summary")
@roles_required(WEB_ROLE)
def get_summary():
    summary = _service().summary(get_session(), current_client_token())
    return ok(_summary_schema.dump(summary))


@clients_bp.put("/web")
@roles_required(WEB_ROLE)
def update_web_profile():
    data = _web_update_schema.load(request.get_json(silent=True) or {})
    client = _service().update_web_profile(get_session(), current_client_token(), data)
    return ok(_masked(client), message="Cadastro atualizado com sucesso.")


# -- admin ----------------------------------------------------------------


@clients_bp.get("/export")
@roles_required("admin")
def export_clients():
    session = get_session()
    filters = parse_list_filters(request.args)
    rows = _service().list_all(session, filters)
    export = export_rows(
        session,
        request.args.get("format", "csv"),
        rows,
        EXPORT_COLUMNS,
        name="clients",
        filters=filters,
        user_id=current_user_id(),
    )
    return attachment(export.content, export.mimetype, export.filename)


@clients_bp.get("")
@roles_required("admin")
def list_clients():
    page = _service().list(get_session(), parse_list_filters(request.args))
    return ok(_clients_schema.dump(page.items), pagination=page.pagination())


@clients_bp.post("")
@roles_required("admin")
def create_client():
    data = _create_schema.load(request.get_json(silent=True) or {})
    client = _service().create(get_session(), data, user_id=current_user_id())
    return ok(_client_schema.dump(client), status_code=201, message="Cliente criado com sucesso.")


@clients_bp.get("/<int:client_id>")
@roles_required("admin")
def get_client(client_id: int):
    client = _service().get(get_session(), client_id)
    return ok(_client_schema.dump(client))


@clients_bp.put("/<int:client_id>")
@roles_required("admin")
def update_client(client_id: int):
    data = _update_schema.load(request.get_json(silent=True) or {})
    client = _service().update(get_session(), client_id, data, user_id=current_user_id())
    return ok(_client_schema.dump(client), message="Cliente atualizado com sucesso.")


@clients_bp.delete("/<int:client_id>")
@roles_required("admin")
def delete_client(client_id: int):
    _service().delete(get_session(), client_id, user_id=current_user_id())
    return "", 204
