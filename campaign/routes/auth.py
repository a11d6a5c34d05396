"""Auth routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from campaign.auth import WEB_ROLE, create_access_token
from campaign.db import get_session
from campaign.schemas.auth import LoginSchema, RegisterSchema, UpdateSecurityTokenSchema, WebLoginSchema
from campaign.services.auth_service import AuthService
from campaign.utils.responses import ok

auth_bp = Blueprint("auth", __name__)

_register_schema = RegisterSchema()
_login_schema = LoginSchema()
_web_login_schema = WebLoginSchema()
_update_token_schema = UpdateSecurityTokenSchema()


def _service() -> AuthService:
    return AuthService(
        email_service=current_app.extensions["email_service"],
        email_cooldown=current_app.config.get("SECURITY_EMAIL_COOLDOWN", "15m"),
    )


@auth_bp.post("/register")
def register():
    data = _register_schema.load(request.get_json(silent=True) or {})
    user = _service().register_user(
        get_session(),
        username=data["username"],
        email=data["email"],
        password=data["password"],
    )
    return ok(
        {"id": user.id, "username": user.username},
        status_code=201,
        message="Usuário registrado com sucesso. Por favor, faça o login.",
    )


@auth_bp.post("/login")
def login():
    data = _login_schema.load(request.get_json(silent=True) or {})
    user = _service().authenticate(get_session(), email=data["email"], password=data["password"])

    token = create_access_token({"id": user.id, "username": user.username, "roles": user.role_names})
    return ok({"token": token}, message="Login bem-sucedido.")


@auth_bp.post("/web-login")
def web_login():
    data = _web_login_schema.load(request.get_json(silent=True) or {})
    client = _service().web_login(get_session(), cpf=data["cpf"], security_token=data["security_token"])

    token = create_access_token({"userToken": client.token, "roles": [WEB_ROLE]})
    return ok({"token": token}, message="Login bem-sucedido.")


@auth_bp.put("/update-security-token")
def update_security_token():
    data = _update_token_schema.load(request.get_json(silent=True) or {})
    _service().update_security_token(get_session(), data["token"])
    return ok(message="Alterado com sucesso.")
