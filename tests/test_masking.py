from datetime import date

from campaign.utils.masking import (
    client_mask_info,
    mask_birthday,
    mask_cel,
    mask_cpf,
    mask_email,
    mask_name,
    voucher_mask_info,
)


def test_mask_cpf_formatted_and_digits():
    assert mask_cpf("529.982.247-25") == "529.###.###-25"
    assert mask_cpf("52998224725") == "529.###.###-25"
    assert mask_cpf(None) is None


def test_mask_email():
    assert mask_email("maria@example.com") == "ma###@example.com"
    assert mask_email("") == ""


def test_mask_cel():
    assert mask_cel("(83) 98888-7777") == "(83) 9####-7777"


def test_mask_birthday():
    assert mask_birthday(date(1990, 5, 10)) == "####-05-10"
    assert mask_birthday("1990-05-10") == "####-05-10"
    assert mask_birthday(None) is None


def test_mask_name():
    assert mask_name("Maria Souza Lima") == "Maria S. L."
    assert mask_name("Maria") == "M."


def test_client_mask_info_drops_identifiers():
    masked = client_mask_info(
        {"id": 1, "token": "t", "security_token": "s", "created_at": "x", "cpf": "52998224725", "name": "Ana"}
    )

    assert set(masked) == {"cpf", "name", "email", "cel", "birthday"}
    assert masked["name"] == "Ana"
    assert client_mask_info(None) is None


def test_voucher_mask_info():
    row = voucher_mask_info({"draw_date": "2024-01-01", "name": "Ana Paula", "cpf": "52998224725"})

    assert row == {"draw_date": "2024-01-01", "name": "Ana P.", "cpf": "529.###.###-25"}
