"""Page content routes: public lookup by slug, admin CRUD."""

from __future__ import annotations

from flask import Blueprint, request

from campaign.auth import current_user_id, roles_required
from campaign.db import get_session
from campaign.schemas.page_content import PageContentCreateSchema, PageContentSchema, PageContentUpdateSchema
from campaign.services.page_content_service import PageContentService
from campaign.utils.query import parse_list_filters
from campaign.utils.responses import ok

pages_bp = Blueprint("pages", __name__)

_schema = PageContentSchema()
_many_schema = PageContentSchema(many=True)
_create_schema = PageContentCreateSchema()
_update_schema = PageContentUpdateSchema()
_service = PageContentService()


@pages_bp.get("/slug/<string:slug>")
def get_by_slug(slug: str):
    return ok(_schema.dump(_service.get_by_slug(get_session(), slug)))


@pages_bp.get("")
@roles_required("admin")
def list_pages():
    page = _service.list(get_session(), parse_list_filters(request.args))
    return ok(_many_schema.dump(page.items), pagination=page.pagination())


@pages_bp.post("")
@roles_required("admin")
def create_page():
    data = _create_schema.load(request.get_json(silent=True) or {})
    page = _service.create(get_session(), data, user_id=current_user_id())
    return ok(_schema.dump(page), status_code=201, message="Conteúdo criado com sucesso.")


@pages_bp.get("/<int:page_id>")
@roles_required("admin")
def get_page(page_id: int):
    return ok(_schema.dump(_service.get(get_session(), page_id)))


@pages_bp.put("/<int:page_id>")
@roles_required("admin")
def update_page(page_id: int):
    data = _update_schema.load(request.get_json(silent=True) or {})
    page = _service.update(get_session(), page_id, data, user_id=current_user_id())
    return ok(_schema.dump(page), message="Conteúdo atualizado com sucesso.")


@pages_bp.delete("/<int:page_id>")
@roles_required("admin")
def delete_page(page_id: int):
    _service.delete(get_session(), page_id, user_id=current_user_id())
    return "", 204
