"""Manual triggers for transactional e-mails (admin)."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from campaign.auth import roles_required
from campaign.errors import ValidationError
from campaign.utils.responses import ok

emails_bp = Blueprint("emails", __name__)


def _recipient() -> tuple[str, str]:
    email = (request.args.get("email") or "").strip()
    if not email:
        raise ValidationError("O parâmetro 'email' é obrigatório.")
    return email, (request.args.get("name") or "").strip()


@emails_bp.get("/welcome")
@roles_required("admin")
def welcome_email():
    email, name = _recipient()
    current_app.extensions["email_service"].send_welcome_email(email, name)
    return ok(message="Email de boas-vindas enviado com sucesso.")


@emails_bp.get("/adjustment-voucher")
@roles_required("admin")
def adjustment_voucher_email():
    email, name = _recipient()
    current_app.extensions["email_service"].send_adjustment_voucher_email(email, name, request.args.get("coupom"))
    return ok(message="Email de ajuste enviado com sucesso.")


@emails_bp.get("/voucher-winner")
@roles_required("admin")
def voucher_winner_email():
    email, name = _recipient()
    coupom = (request.args.get("coupom") or "").strip()
    if not coupom:
        raise ValidationError("O parâmetro 'coupom' é obrigatório.")
    current_app.extensions["email_service"].send_voucher_winner_email(email, name, coupom)
    return ok(message="Email de ganhador do voucher enviado com sucesso.")


@emails_bp.get("/draw")
@roles_required("admin")
def draw_email():
    email, name = _recipient()
    current_app.extensions["email_service"].send_draw_email(email, name, request.args.get("number"))
    return ok(message="Email de ganhador do sorteio enviado com sucesso.")
