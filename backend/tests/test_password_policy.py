from app.core.password_policy import validate_password


def test_valid_password_passes():
    assert validate_password("Sunshine2024") == []


def test_empty_password():
    assert validate_password("") == ["Password is required"]


def test_short_password():
    errors = validate_password("ab1")
    assert any("at least 8" in e for e in errors)


def test_requires_letter_and_digit():
    assert any("digit" in e for e in validate_password("onlyletters"))
    assert any("letter" in e for e in validate_password("1234567890"))


def test_too_long_password():
    assert any("at most" in e for e in validate_password("a1" * 100))


def test_must_differ_from_current():
    errors = validate_password("SamePass123", current_password="SamePass123")
    assert errors == ["New password must differ from the current password"]
