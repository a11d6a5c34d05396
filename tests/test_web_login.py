from datetime import timedelta

from sqlalchemy import select

from campaign.models.audit_log import AuditLog
from campaign.models.base import utcnow
from campaign.models.client import Client
from campaign.utils.dates import expiration_timestamp
from campaign.utils.strings import decode_base64_to_array, encode_array_to_base64

from conftest import OTHER_VALID_CPF, VALID_CPF


def _web_login(client, cpf=VALID_CPF, device="device-a"):
    return client.post("/api/auth/web-login", json={"cpf": cpf, "security_token": device})


def _fresh(app, cpf):
    with app.extensions["session_factory"]() as session:
        return session.scalars(select(Client).where(Client.cpf == cpf)).one()


def test_first_login_pre_registers_client(client, app):
    resp = _web_login(client)

    assert resp.status_code == 200
    assert resp.get_json()["data"]["token"]
    stored = _fresh(app, VALID_CPF)
    assert stored.is_pre_register is True
    assert stored.security_token == "device-a"
    assert len(stored.token) == 64


def test_same_device_logs_in_again(client):
    _web_login(client)

    assert _web_login(client).status_code == 200


def test_invalid_cpf_is_rejected(client):
    resp = _web_login(client, cpf="12345678900")

    assert resp.status_code == 400


def test_client_without_device_gets_bound(client, app, make_client):
    make_client(cpf=OTHER_VALID_CPF, security_token=None)

    assert _web_login(client, cpf=OTHER_VALID_CPF, device="device-z").status_code == 200
    assert _fresh(app, OTHER_VALID_CPF).security_token == "device-z"


def test_new_device_sends_authorization_email(client, app, outbox, make_client):
    owner = make_client(cpf=VALID_CPF, security_token="device-a", email="dona@example.com")

    resp = _web_login(client, device="device-b")

    assert resp.status_code == 403
    assert len(outbox) == 1
    assert outbox[0]["To"] == "dona@example.com"
    stored = _fresh(app, VALID_CPF)
    assert stored.security_token == "device-a"
    assert stored.security_token_email_sended_at is not None

    # Second attempt inside the cooldown window does not resend.
    resp = _web_login(client, device="device-b")
    assert resp.status_code == 400
    assert len(outbox) == 1
    assert owner.token


def test_new_device_without_email_is_forbidden(client, outbox, make_client):
    make_client(cpf=VALID_CPF, security_token="device-a", email=None)

    resp = _web_login(client, device="device-b")

    assert resp.status_code == 403
    assert outbox == []


def test_cooldown_elapsed_sends_again(client, outbox, make_client):
    make_client(
        cpf=VALID_CPF,
        security_token="device-a",
        security_token_email_sended_at=utcnow() - timedelta(hours=1),
    )

    assert _web_login(client, device="device-b").status_code == 403
    assert len(outbox) == 1


def test_authorization_link_swaps_device(client, app, outbox, make_client):
    make_client(cpf=VALID_CPF, security_token="device-a")
    _web_login(client, device="device-b")
    html = outbox[0].get_body(preferencelist=("html",)).get_content()
    link_token = html.split("token=")[1].split('"')[0]
    assert decode_base64_to_array(link_token)[1:3] == ["device-a", "device-b"]

    resp = client.put("/api/auth/update-security-token", json={"token": link_token})

    assert resp.status_code == 200
    stored = _fresh(app, VALID_CPF)
    assert stored.security_token == "device-b"
    assert stored.updated_security_token_at is not None
    assert _web_login(client, device="device-b").status_code == 200
    with app.extensions["session_factory"]() as session:
        actions = session.scalars(select(AuditLog.action)).all()
    assert "UPDATE_SECURITY_TOKEN" in actions


def test_expired_or_garbage_link_token(client, make_client):
    owner = make_client(cpf=VALID_CPF, security_token="device-a")
    expired = encode_array_to_base64([owner.token, "device-a", "device-b", expiration_timestamp("1m") - 3600])

    assert client.put("/api/auth/update-security-token", json={"token": expired}).status_code == 400
    assert client.put("/api/auth/update-security-token", json={"token": "@@@"}).status_code == 400


def test_stale_link_token_is_rejected(client, make_client):
    owner = make_client(cpf=VALID_CPF, security_token="device-c")
    stale = encode_array_to_base64([owner.token, "device-a", "device-b", expiration_timestamp("15m")])

    resp = client.put("/api/auth/update-security-token", json={"token": stale})

    assert resp.status_code == 400
