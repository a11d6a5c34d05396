from campaign.utils.fiscal_code import compute_check_digit, is_valid_fiscal_code, normalize_fiscal_code

from conftest import make_fiscal_code


def test_check_digit_small_bodies():
    assert compute_check_digit("1") == 9
    assert compute_check_digit("11") == 6
    assert compute_check_digit("0" * 43) == 0


def test_valid_access_key():
    assert is_valid_fiscal_code("0" * 44)
    assert is_valid_fiscal_code(make_fiscal_code(123456))


def test_formatted_access_key_is_normalized():
    code = make_fiscal_code(987654)
    spaced = " ".join(code[i : i + 4] for i in range(0, 44, 4))

    assert normalize_fiscal_code(spaced) == code
    assert is_valid_fiscal_code(spaced)


def test_wrong_check_digit():
    code = make_fiscal_code(123456)
    broken = code[:-1] + str((int(code[-1]) + 1) % 10)

    assert not is_valid_fiscal_code(broken)


def test_wrong_length_or_empty():
    assert not is_valid_fiscal_code("123")
    assert not is_valid_fiscal_code("")
    assert not is_valid_fiscal_code(None)
