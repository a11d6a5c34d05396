"""Sample routes guarded by authentication and roles."""

from __future__ import annotations

from flask import Blueprint, g, request

from campaign.auth import roles_required, token_required
from campaign.utils.responses import ok

protected_bp = Blueprint("protected", __name__)


@protected_bp.get("/profile")
@token_required
def profile():
    return ok({"user": g.current_user}, message="Perfil do usuário autenticado.")


@protected_bp.get("/admin-dashboard")
@roles_required("admin")
def admin_dashboard():
    return ok({"user": g.current_user}, message="Bem-vindo ao painel de administração.")


@protected_bp.post("/manage-content")
@roles_required("admin", "manager")
def manage_content():
    return ok(
        {"user": g.current_user, "content": request.get_json(silent=True)},
        message="Conteúdo gerenciado com sucesso.",
    )
