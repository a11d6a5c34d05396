import json

from sqlalchemy import select

from campaign.models.audit_log import AuditLog

from conftest import make_fiscal_code


def test_web_client_registers_invoice(client, sales_api, web_headers, make_client):
    owner = make_client()
    code = make_fiscal_code(1)
    sales_api.add(code, 450.0, payment_types=("03",))

    resp = client.post("/api/invoices/add", headers=web_headers(owner), json={"fiscal_code": code})

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["chances"] == 4
    assert data["client_name"] == owner.name
    assert len(data["game_opportunities"]) == 4
    assert len(data["draw_numbers"]) == 4

    mine = client.get("/api/invoices/mine", headers=web_headers(owner)).get_json()["data"]
    assert [i["fiscal_code"] for i in mine] == [code]


def test_invoice_errors_map_to_status_codes(client, sales_api, web_headers, make_client):
    owner = make_client()
    headers = web_headers(owner)
    low = make_fiscal_code(2)
    sales_api.add(low, 100.0)

    assert client.post("/api/invoices/add", headers=headers, json={"fiscal_code": "123"}).status_code == 400
    assert client.post("/api/invoices/add", headers=headers, json={"fiscal_code": low}).status_code == 400
    unknown = client.post("/api/invoices/add", headers=headers, json={"fiscal_code": make_fiscal_code(3)})
    assert unknown.status_code == 502
    assert unknown.get_json()["code"] == "upstream_error"

    ok_code = make_fiscal_code(4)
    sales_api.add(ok_code, 200.0)
    assert client.post("/api/invoices/add", headers=headers, json={"fiscal_code": ok_code}).status_code == 201
    assert client.post("/api/invoices/add", headers=headers, json={"fiscal_code": ok_code}).status_code == 409


def test_try_my_luck_flow(client, outbox, sales_api, web_headers, make_client, make_voucher):
    owner = make_client()
    headers = web_headers(owner)
    code = make_fiscal_code(5)
    sales_api.add(code, 400.0)
    client.post("/api/invoices/add", headers=headers, json={"fiscal_code": code})
    voucher = make_voucher(coupom="PREMIO-1", voucher_value=100)
    make_voucher(coupom="PREMIO-2")

    first = client.get("/api/invoices/try-my-luck", headers=headers).get_json()
    second = client.get("/api/invoices/try-my-luck", headers=headers).get_json()
    third = client.get("/api/invoices/try-my-luck", headers=headers)

    assert first["data"]["win"] is True
    assert first["data"]["coupom"] == voucher.coupom
    assert first["data"]["voucher_value"] == 100
    assert second["data"]["win"] is False
    assert second["message"] == "Não foi desta vez"
    assert third.status_code == 404
    assert third.get_json()["code"] == "no_opportunity"
    assert len(outbox) == 1


def test_public_drawn_list_is_masked(client, sales_api, web_headers, make_client, make_voucher):
    owner = make_client(name="Maria Souza Lima", cpf="52998224725")
    code = make_fiscal_code(6)
    sales_api.add(code, 200.0)
    client.post("/api/invoices/add", headers=web_headers(owner), json={"fiscal_code": code})
    make_voucher()
    client.get("/api/invoices/try-my-luck", headers=web_headers(owner))

    rows = client.get("/api/vouchers/drawn").get_json()["data"]

    assert len(rows) == 1
    assert rows[0]["name"] == "Maria S. L."
    assert rows[0]["cpf"] == "529.###.###-25"


def test_admin_invoice_crud(client, app, sales_api, admin_headers, make_client):
    owner = make_client()
    code = make_fiscal_code(7)
    sales_api.add(code, 250.0)

    created = client.post("/api/invoices", headers=admin_headers, json={"client_id": owner.id, "fiscal_code": code})
    assert created.status_code == 201
    invoice_id = created.get_json()["data"]["id"]

    listing = client.get("/api/invoices", headers=admin_headers).get_json()
    assert listing["pagination"]["totalEntities"] == 1

    updated = client.put(f"/api/invoices/{invoice_id}", headers=admin_headers, json={"status": "approved"})
    assert updated.get_json()["data"]["status"] == "approved"
    bad = client.put(f"/api/invoices/{invoice_id}", headers=admin_headers, json={"status": "whatever"})
    assert bad.status_code == 400

    assert client.delete(f"/api/invoices/{invoice_id}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/invoices/{invoice_id}", headers=admin_headers).status_code == 404

    with app.extensions["session_factory"]() as session:
        actions = session.scalars(select(AuditLog.action).order_by(AuditLog.id)).all()
    assert actions == ["CREATE_INVOICES", "UPDATE_INVOICES", "DELETE_INVOICES"]


def test_invoice_with_claimed_voucher_cannot_be_deleted(client, admin_headers, make_client, make_opportunity, make_voucher):
    owner = make_client()
    opportunity = make_opportunity(owner)
    make_voucher(game_opportunity_id=opportunity.id)

    resp = client.delete(f"/api/invoices/{opportunity.invoice_id}", headers=admin_headers)

    assert resp.status_code == 409


def test_draw_number_listing_joins_invoice_and_client(client, sales_api, admin_headers, web_headers, make_client):
    owner = make_client(name="Joana Prado")
    code = make_fiscal_code(8)
    sales_api.add(code, 200.0)
    client.post("/api/invoices/add", headers=web_headers(owner), json={"fiscal_code": code})

    rows = client.get(
        "/api/draw-numbers", headers=admin_headers, query_string={"search": json.dumps({"clientName": "joana"})}
    ).get_json()["data"]

    assert len(rows) == 1
    assert rows[0]["fiscal_code"] == code
    assert rows[0]["client_name"] == "Joana Prado"

    detail = client.get(f"/api/draw-numbers/{rows[0]['id']}", headers=admin_headers).get_json()["data"]
    assert detail["number"] == rows[0]["number"]


def test_admin_draw_number_is_zero_padded_and_unique(client, admin_headers, make_client, make_opportunity):
    owner = make_client()
    opportunity = make_opportunity(owner)
    payload = {"invoice_id": opportunity.invoice_id, "number": 42}

    created = client.post("/api/draw-numbers", headers=admin_headers, json=payload)
    assert created.status_code == 201
    assert created.get_json()["data"]["number"] == "0000042"

    assert client.post("/api/draw-numbers", headers=admin_headers, json=payload).status_code == 409
    missing = client.post("/api/draw-numbers", headers=admin_headers, json={"invoice_id": 999, "number": 1})
    assert missing.status_code == 400
