from datetime import timedelta, timezone

from sqlalchemy.exc import IntegrityError

from campaign.models.base import utcnow


def test_page_slugs_are_derived_and_unique(client, admin_headers):
    first = client.post("/api/pages-content", headers=admin_headers, json={"title": "Regulamento da Promoção"})
    second = client.post("/api/pages-content", headers=admin_headers, json={"title": "Regulamento da Promoção"})

    assert first.status_code == 201
    assert first.get_json()["data"]["slug"] == "regulamento-da-promocao"
    assert second.get_json()["data"]["slug"] == "regulamento-da-promocao-1"


def test_public_page_lookup_by_slug(client, admin_headers):
    client.post("/api/pages-content", headers=admin_headers, json={"title": "FAQ", "content": "<p>Perguntas</p>"})

    resp = client.get("/api/pages-content/slug/faq")

    assert resp.status_code == 200
    assert resp.get_json()["data"]["content"] == "<p>Perguntas</p>"
    assert client.get("/api/pages-content/slug/nada").status_code == 404


def test_page_slug_update_is_validated(client, admin_headers):
    page_id = client.post("/api/pages-content", headers=admin_headers, json={"title": "FAQ"}).get_json()["data"]["id"]
    client.post("/api/pages-content", headers=admin_headers, json={"title": "Contato"})

    bad = client.put(f"/api/pages-content/{page_id}", headers=admin_headers, json={"slug": "Com Espaço"})
    taken = client.put(f"/api/pages-content/{page_id}", headers=admin_headers, json={"slug": "contato"})
    good = client.put(f"/api/pages-content/{page_id}", headers=admin_headers, json={"slug": "perguntas-frequentes"})

    assert bad.status_code == 400
    assert taken.status_code == 409
    assert good.get_json()["data"]["slug"] == "perguntas-frequentes"


def test_voucher_crud(client, admin_headers, make_client, make_opportunity):
    payload = {"coupom": "CUPOM-ABC", "draw_date": "2024-01-01T10:00:00", "voucher_value": 30}

    created = client.post("/api/vouchers", headers=admin_headers, json=payload)
    assert created.status_code == 201
    voucher_id = created.get_json()["data"]["id"]
    assert client.post("/api/vouchers", headers=admin_headers, json=payload).status_code == 409

    missing = client.put(f"/api/vouchers/{voucher_id}", headers=admin_headers, json={"game_opportunity_id": 999})
    assert missing.status_code == 400

    opportunity = make_opportunity(make_client())
    linked = client.put(
        f"/api/vouchers/{voucher_id}", headers=admin_headers, json={"game_opportunity_id": opportunity.id}
    )
    assert linked.get_json()["data"]["game_opportunity_id"] == opportunity.id

    other = client.post(
        "/api/vouchers",
        headers=admin_headers,
        json={"coupom": "CUPOM-XYZ", "draw_date": "2024-01-01T10:00:00", "game_opportunity_id": opportunity.id},
    )
    assert other.status_code == 409

    listing = client.get("/api/vouchers", headers=admin_headers).get_json()
    assert listing["pagination"]["totalEntities"] == 1
    assert client.delete(f"/api/vouchers/{voucher_id}", headers=admin_headers).status_code == 204


def test_product_crud_and_search(client, admin_headers):
    biscoito = {"ean": "7891000100103", "description": "Biscoito Recheado", "brand": "Marca A"}
    client.post("/api/products", headers=admin_headers, json=biscoito)
    client.post("/api/products", headers=admin_headers, json={"ean": "7891000100104", "description": "Suco", "brand": "Marca B"})

    assert client.post("/api/products", headers=admin_headers, json=biscoito).status_code == 409
    assert client.post("/api/products", headers=admin_headers, json={"ean": "abc"}).status_code == 400

    found = client.get("/api/products?q=bisc", headers=admin_headers).get_json()
    assert [p["description"] for p in found["data"]] == ["Biscoito Recheado"]
    by_brand = client.get("/api/products?q=marca", headers=admin_headers).get_json()
    assert by_brand["pagination"]["totalEntities"] == 2


def test_opportunity_admin_routes(client, admin_headers, make_client, make_opportunity, make_voucher):
    opportunity = make_opportunity(make_client())

    listing = client.get("/api/opportunities", headers=admin_headers).get_json()
    assert [o["id"] for o in listing["data"]] == [opportunity.id]

    updated = client.put(f"/api/opportunities/{opportunity.id}", headers=admin_headers, json={"active": False})
    assert updated.get_json()["data"]["active"] is False

    bad_invoice = client.post("/api/opportunities", headers=admin_headers, json={"invoice_id": 999})
    assert bad_invoice.status_code == 400

    make_voucher(game_opportunity_id=opportunity.id)
    assert client.delete(f"/api/opportunities/{opportunity.id}", headers=admin_headers).status_code == 409


def test_manual_email_triggers(client, admin_headers, outbox):
    resp = client.get("/api/emails/welcome?email=ana@example.com&name=Ana", headers=admin_headers)
    assert resp.status_code == 200

    client.get("/api/emails/voucher-winner?email=ana@example.com&name=Ana&coupom=XYZ", headers=admin_headers)
    client.get("/api/emails/adjustment-voucher?email=ana@example.com&name=Ana", headers=admin_headers)
    client.get("/api/emails/draw?email=ana@example.com&name=Ana&number=0001234", headers=admin_headers)

    assert [m["To"] for m in outbox] == ["ana@example.com"] * 4
    assert "XYZ" in outbox[1].get_body(preferencelist=("html",)).get_content()

    assert client.get("/api/emails/welcome", headers=admin_headers).status_code == 400
    assert client.get("/api/emails/voucher-winner?email=ana@example.com", headers=admin_headers).status_code == 400


def test_health_and_unknown_route(client):
    assert client.get("/health").status_code == 200
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Rota não encontrada."


def test_voucher_release_time_with_offset_is_stored_in_utc(
    client, admin_headers, web_headers, make_client, make_opportunity
):
    release = utcnow().replace(microsecond=0) + timedelta(hours=2)
    brasilia = release.replace(tzinfo=timezone.utc).astimezone(timezone(timedelta(hours=-3)))

    created = client.post(
        "/api/vouchers", headers=admin_headers, json={"coupom": "TZ-1", "draw_date": brasilia.isoformat()}
    )
    assert created.status_code == 201
    assert created.get_json()["data"]["draw_date"] == release.isoformat()

    owner = make_client()
    make_opportunity(owner)
    luck = client.get("/api/invoices/try-my-luck", headers=web_headers(owner)).get_json()

    assert luck["data"]["win"] is False


def test_claimed_voucher_cannot_be_moved(client, admin_headers, make_client, make_opportunity, make_voucher):
    first = make_opportunity(make_client())
    second = make_opportunity(make_client())
    voucher = make_voucher(game_opportunity_id=first.id)
    url = f"/api/vouchers/{voucher.id}"

    assert client.put(url, headers=admin_headers, json={"game_opportunity_id": second.id}).status_code == 409
    assert client.put(url, headers=admin_headers, json={"game_opportunity_id": None}).status_code == 409

    same = client.put(url, headers=admin_headers, json={"game_opportunity_id": first.id, "voucher_value": 80})
    assert same.status_code == 200
    assert same.get_json()["data"]["voucher_value"] == 80


def test_voucher_cannot_go_to_a_previous_winner(client, admin_headers, make_client, make_opportunity, make_voucher):
    winner = make_client()
    won = make_opportunity(winner)
    spare = make_opportunity(winner)
    make_voucher(game_opportunity_id=won.id)
    free = make_voucher()

    linked = client.put(f"/api/vouchers/{free.id}", headers=admin_headers, json={"game_opportunity_id": spare.id})
    assert linked.status_code == 409

    created = client.post(
        "/api/vouchers",
        headers=admin_headers,
        json={"coupom": "EXTRA-1", "draw_date": "2024-01-01T10:00:00", "game_opportunity_id": spare.id},
    )
    assert created.status_code == 409


def test_winning_opportunity_keeps_its_invoice(client, admin_headers, make_client, make_opportunity, make_voucher):
    opportunity = make_opportunity(make_client())
    other = make_opportunity(make_client())
    make_voucher(game_opportunity_id=opportunity.id)

    moved = client.put(
        f"/api/opportunities/{opportunity.id}", headers=admin_headers, json={"invoice_id": other.invoice_id}
    )

    assert moved.status_code == 409


def test_integrity_error_hides_database_text(app, client):
    @app.get("/api/boom")
    def _boom():
        raise IntegrityError(
            "INSERT INTO draw_numbers (number) VALUES (?)",
            {},
            Exception("UNIQUE constraint failed: draw_numbers.number"),
        )

    resp = client.get("/api/boom")
    body = resp.get_json()

    assert resp.status_code == 409
    assert body["code"] == "conflict"
    assert body["details"] is None
    assert "draw_numbers" not in resp.get_data(as_text=True)
