import pytest

from campaign.services.invoice_service import ChanceRules, compute_chance_count


@pytest.mark.parametrize(
    "value, flags, expected",
    [
        (199.99, {}, 0),
        (200.0, {}, 1),
        (450.0, {}, 2),
        (450.0, {"has_item": True}, 4),
        (450.0, {"has_creditcard": True}, 4),
        (450.0, {"has_partner_code": True}, 4),
        (450.0, {"has_item": True, "has_creditcard": True, "has_partner_code": True}, 4),
        (1000.0, {}, 5),
    ],
)
def test_compute_chance_count(value, flags, expected):
    assert compute_chance_count(value, 200.0, **flags) == expected


def test_compute_chance_count_rejects_non_positive_threshold():
    with pytest.raises(ValueError):
        compute_chance_count(500.0, 0)


def test_qualifying_payment_methods():
    rules = ChanceRules(qualifying_payment_methods=("03", "04"))

    assert rules.qualifies_payment(["01", "04"])
    assert not rules.qualifies_payment(["01", "02"])
    assert not rules.qualifies_payment([])


def test_partner_code_any_value_when_no_list_configured():
    rules = ChanceRules(partner_codes=())

    assert rules.accepts_partner_code("ABC")
    assert not rules.accepts_partner_code(None)
    assert not rules.accepts_partner_code("")


def test_partner_code_restricted_to_configured_list():
    rules = ChanceRules(partner_codes=("PARC1",))

    assert rules.accepts_partner_code("PARC1")
    assert not rules.accepts_partner_code("OTHER")


def test_rules_from_config():
    rules = ChanceRules.from_config(
        {"MIN_INVOICE_VALUE": 150, "QUALIFYING_PAYMENT_METHODS": ("05",), "PARTNER_CODES": ("X",)}
    )

    assert rules.min_value == 150.0
    assert rules.qualifying_payment_methods == ("05",)
    assert rules.partner_codes == ("X",)
