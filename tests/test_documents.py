"""Tests for CPF and phone helpers."""

import pytest

from condoflow.core.documents import (
    format_cpf,
    format_phone,
    is_valid_cpf,
    is_valid_phone,
    only_digits,
)


class TestCpf:
    """Check digits and mask of the CPF."""

    @pytest.mark.parametrize("cpf", ["529.982.247-25", "52998224725", "111.444.777-35"])
    def test_valid(self, cpf) -> None:
        """Test CPFs with both check digits right."""
        assert is_valid_cpf(cpf)

    @pytest.mark.parametrize(
        "cpf",
        [
            "529.982.247-24",  # wrong second check digit
            "529.982.247-15",  # wrong first check digit
            "111.111.111-11",  # repeated digits
            "5299822472",  # too short
            "",
            None,
        ],
    )
    def test_invalid(self, cpf) -> None:
        """Test CPFs rejected by length, repetition or check digit."""
        assert not is_valid_cpf(cpf)

    def test_format(self) -> None:
        """Test the 000.000.000-00 mask."""
        assert format_cpf("52998224725") == "529.982.247-25"
        assert format_cpf("5299") == "5299"


class TestPhone:
    """Brazilian phone numbers with area code."""

    @pytest.mark.parametrize("phone", ["(47) 99999-8888", "4733334444"])
    def test_valid(self, phone) -> None:
        """Test landline and mobile lengths."""
        assert is_valid_phone(phone)

    @pytest.mark.parametrize("phone", ["99999-8888", "(47) 99999-88881", "", None])
    def test_invalid(self, phone) -> None:
        """Test numbers without area code or with extra digits."""
        assert not is_valid_phone(phone)

    def test_format(self) -> None:
        """Test the mobile and landline masks."""
        assert format_phone("47999998888") == "(47) 99999-8888"
        assert format_phone("4733334444") == "(47) 3333-4444"


def test_only_digits() -> None:
    """Test that masks and blanks are stripped."""
    assert only_digits(" 529.982.247-25 ") == "52998224725"
    assert only_digits(None) == ""
