"""Game opportunity routes (admin)."""

from __future__ import annotations

from flask import Blueprint, request

from campaign.auth import current_user_id, roles_required
from campaign.db import get_session
from campaign.schemas.game_opportunity import GameOpportunitySchema, GameOpportunityWriteSchema
from campaign.services.game_opportunity_service import GameOpportunityService
from campaign.utils.query import parse_list_filters
from campaign.utils.responses import ok

opportunities_bp = Blueprint("opportunities", __name__)

_schema = GameOpportunitySchema()
_many_schema = GameOpportunitySchema(many=True)
_write_schema = GameOpportunityWriteSchema()
_service = GameOpportunityService()


@opportunities_bp.get("")
@roles_required("admin")
def list_opportunities():
    page = _service.list(get_session(), parse_list_filters(request.args))
    return ok(_many_schema.dump(page.items), pagination=page.pagination())


@opportunities_bp.post("")
@roles_required("admin")
def create_opportunity():
    data = _write_schema.load(request.get_json(silent=True) or {})
    opportunity = _service.create(get_session(), data, user_id=current_user_id())
    return ok(_schema.dump(opportunity), status_code=201, message="Oportunidade de jogo criada com sucesso.")


@opportunities_bp.get("/<int:opportunity_id>")
@roles_required("admin")
def get_opportunity(opportunity_id: int):
    return ok(_schema.dump(_service.get(get_session(), opportunity_id)))


@opportunities_bp.put("/<int:opportunity_id>")
@roles_required("admin")
def update_opportunity(opportunity_id: int):
    data = _write_schema.load(request.get_json(silent=True) or {}, partial=True)
    opportunity = _service.update(get_session(), opportunity_id, data, user_id=current_user_id())
    return ok(_schema.dump(opportunity), message="Oportunidade de jogo atualizada com sucesso.")


@opportunities_bp.delete("/<int:opportunity_id>")
@roles_required("admin")
def delete_opportunity(opportunity_id: int):
    _service.delete(get_session(), opportunity_id, user_id=current_user_id())
    return "", 204
