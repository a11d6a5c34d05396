"""Draw number routes (admin)."""

from __future__ import annotations

from flask import Blueprint, request

from campaign.auth import current_user_id, roles_required
from campaign.db import get_session
from campaign.schemas.draw_number import (
    DrawNumberCreateSchema,
    DrawNumberSchema,
    DrawNumberUpdateSchema,
    dump_joined,
)
from campaign.services.draw_number_service import DrawNumberService
from campaign.utils.query import parse_list_filters
from campaign.utils.responses import ok

draw_numbers_bp = Blueprint("draw_numbers", __name__)

_schema = DrawNumberSchema()
_create_schema = DrawNumberCreateSchema()
_update_schema = DrawNumberUpdateSchema()
_service = DrawNumberService()


@draw_numbers_bp.get("")
@roles_required("admin")
def list_draw_numbers():
    page = _service.list_joined(get_session(), parse_list_filters(request.args))
    return ok([dump_joined(row) for row in page.items], pagination=page.pagination())


@draw_numbers_bp.post("")
@roles_required("admin")
def create_draw_number():
    data = _create_schema.load(request.get_json(silent=True) or {})
    draw_number = _service.create(get_session(), data, user_id=current_user_id())
    return ok(_schema.dump(draw_number), status_code=201, message="Número da sorte criado com sucesso.")


@draw_numbers_bp.get("/<int:draw_number_id>")
@roles_required("admin")
def get_draw_number(draw_number_id: int):
    return ok(dump_joined(_service.get_joined(get_session(), draw_number_id)))


@draw_numbers_bp.put("/<int:draw_number_id>")
@roles_required("admin")
def update_draw_number(draw_number_id: int):
    data = _update_schema.load(request.get_json(silent=True) or {})
    draw_number = _service.update(get_session(), draw_number_id, data, user_id=current_user_id())
    return ok(_schema.dump(draw_number), message="Número da sorte atualizado com sucesso.")


@draw_numbers_bp.delete("/<int:draw_number_id>")
@roles_required("admin")
def delete_draw_number(draw_number_id: int):
    _service.delete(get_session(), draw_number_id, user_id=current_user_id())
    return "", 204
