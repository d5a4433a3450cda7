"""Unit tests for the request field validators."""
import pytest

from todoay import validation
from todoay.exceptions import ValidationError
from todoay.schemas import CategorySaveRequest, PasswordUpdateRequest, SignupRequest


class TestEmail:
    @pytest.mark.parametrize("value", ["user@example.com", "first.last+tag@sub.example.org"])
    def test_valid(self, value):
        assert validation.check_email(value) == []

    @pytest.mark.parametrize(
        "value, code",
        [
            ("", "REQUIRED"),
            ("plainaddress", "INVALID_EMAIL"),
            ("two@@example.com", "INVALID_EMAIL"),
            ("a" * 250 + "@example.com", "TOO_LONG"),
        ],
    )
    def test_invalid(self, value, code):
        assert [v.code for v in validation.check_email(value)] == [code]


class TestPassword:
    @pytest.mark.parametrize("value", ["Abcdef1!", "p@ssw0rd_long_enough"])
    def test_valid(self, value):
        assert validation.check_password(value) == []

    @pytest.mark.parametrize(
        "value, code",
        [
            ("", "REQUIRED"),
            ("Ab1!", "INVALID_LENGTH"),
            ("Abcdefgh1!" * 3, "INVALID_LENGTH"),
            ("abcdefgh!", "INVALID_PASSWORD"),
            ("12345678!", "INVALID_PASSWORD"),
            ("abcd1234", "INVALID_PASSWORD"),
            ("abcd 123!", "INVALID_PASSWORD"),
        ],
    )
    def test_invalid(self, value, code):
        assert [v.code for v in validation.check_password(value)] == [code]

    def test_field_name_follows_request(self):
        violations = validation.validate_password_update(PasswordUpdateRequest(new_password="x"))
        assert violations[0].field == "newPassword"


class TestNickname:
    @pytest.mark.parametrize("value", ["ab", "todo_er", "투두에이", "user2024"])
    def test_valid(self, value):
        assert validation.check_nickname(value) == []

    @pytest.mark.parametrize("value", ["a", "elevenchars", "with space", "dash-ed", "emoji🙂"])
    def test_invalid(self, value):
        assert [v.field for v in validation.check_nickname(value)] == ["nickname"]


class TestCategory:
    def test_valid_request(self):
        request = CategorySaveRequest(name="Study", color="#00aa11", order_index=0)
        assert validation.validate_category_save(request) == []

    def test_collects_all_violations(self):
        request = CategorySaveRequest(name="", color="blue", order_index=-3)
        fields = [v.field for v in validation.validate_category_save(request)]
        assert fields == ["name", "color", "orderIndex"]


class TestRaiseForViolations:
    def test_no_violations_is_silent(self):
        validation.raise_for_violations([])

    def test_raises_with_violations(self):
        request = SignupRequest(email="bad", password="Good1!pass", nickname="okay")
        with pytest.raises(ValidationError) as excinfo:
            validation.raise_for_violations(validation.validate_signup(request))
        assert excinfo.value.status_code == 400
        assert [v.field for v in excinfo.value.violations] == ["email"]


class TestPasswordBytes:
    def test_multibyte_password_within_byte_limit(self):
        assert validation.check_password("비밀번호abc1!") == []

    def test_multibyte_password_over_byte_limit(self):
        assert [v.code for v in validation.check_password("a1" + "😀" * 18)] == ["TOO_LONG"]


class TestNormalizeEmail:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("User@Example.COM", "user@example.com"),
            ("plain@example.com", "plain@example.com"),
            ("  Not An Email  ", "not an email"),
        ],
    )
    def test_normalize(self, value, expected):
        assert validation.normalize_email(value) == expected
