"""Product routes (admin)."""

from __future__ import annotations

from flask import Blueprint, request

from campaign.auth import current_user_id, roles_required
from campaign.db import get_session
from campaign.schemas.product import ProductSchema, ProductWriteSchema
from campaign.services.product_service import ProductService
from campaign.utils.query import parse_list_filters
from campaign.utils.responses import ok

products_bp = Blueprint("products", __name__)

_schema = ProductSchema()
_many_schema = ProductSchema(many=True)
_write_schema = ProductWriteSchema()
_service = ProductService()


@products_bp.get("")
@roles_required("admin")
def list_products():
    """List products. ``q`` searches description and brand."""

    filters = parse_list_filters(request.args)
    page = _service.search(get_session(), request.args.get("q", ""), filters.page, filters.limit)
    return ok(_many_schema.dump(page.items), pagination=page.pagination())


@products_bp.post("")
@roles_required("admin")
def create_product():
    data = _write_schema.load(request.get_json(silent=True) or {})
    product = _service.create(get_session(), data, user_id=current_user_id())
    return ok(_schema.dump(product), status_code=201, message="Produto criado com sucesso.")


@products_bp.get("/<int:product_id>")
@roles_required("admin")
def get_product(product_id: int):
    return ok(_schema.dump(_service.get(get_session(), product_id)))


@products_bp.put("/<int:product_id>")
@roles_required("admin")
def update_product(product_id: int):
    data = _write_schema.load(request.get_json(silent=True) or {})
    product = _service.update(get_session(), product_id, data, user_id=current_user_id())
    return ok(_schema.dump(product), message="Produto atualizado com sucesso.")


@products_bp.delete("/<int:product_id>")
@roles_required("admin")
def delete_product(product_id: int):
    _service.delete(get_session(), product_id, user_id=current_user_id())
    return "", 204
