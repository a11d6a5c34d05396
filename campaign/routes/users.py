"""Back-office user routes (admin)."""

from __future__ import annotations

from flask import Blueprint, request

from campaign.auth import current_user_id, roles_required
from campaign.db import get_session
from campaign.schemas.user import UserCreateSchema, UserSchema
from campaign.services.user_service import UserService
from campaign.utils.query import parse_list_filters
from campaign.utils.responses import ok

users_bp = Blueprint("users", __name__)

_schema = UserSchema()
_many_schema = UserSchema(many=True)
_create_schema = UserCreateSchema()
_service = UserService()


@users_bp.post("")
@roles_required("admin")
def create_user():
    data = _create_schema.load(request.get_json(silent=True) or {})
    user = _service.create(get_session(), data, user_id=current_user_id())
    return ok(_schema.dump(user), status_code=201, message="Usuário criado com sucesso.")


@users_bp.get("")
@roles_required("admin")
def list_users():
    page = _service.list(get_session(), parse_list_filters(request.args))
    return ok(_many_schema.dump(page.items), pagination=page.pagination())


@users_bp.get("/<int:user_id>")
@roles_required("admin")
def get_user(user_id: int):
    return ok(_schema.dump(_service.get(get_session(), user_id)))


@users_bp.delete("/<int:user_id>")
@roles_required("admin")
def delete_user(user_id: int):
    _service.delete(get_session(), user_id, user_id=current_user_id())
    return "", 204
