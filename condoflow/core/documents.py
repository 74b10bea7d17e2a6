"""Brazilian document helpers: CPF checksum and phone numbers."""

import re


def only_digits(value: str | None) -> str:
    """Strip everything but digits (masks, spaces, punctuation)."""
    return re.sub(r"\D", "", value or "")


def _cpf_check_digit(digits: str, weight_start: int) -> int:
    total = sum(int(d) * w for d, w in zip(digits, range(weight_start, 1, -1)))
    remainder = (total * 10) % 11
    return 0 if remainder == 10 else remainder


def is_valid_cpf(cpf: str | None) -> bool:
    """Validate a CPF, masked or not, by length, repeated digits and both check digits."""
    digits = only_digits(cpf)
    if len(digits) != 11:
        return False
    if digits == digits[0] * 11:
        return False
    if _cpf_check_digit(digits[:9], 10) != int(digits[9]):
        return False
    return _cpf_check_digit(digits[:10], 11) == int(digits[10])


def is_valid_phone(phone: str | None) -> bool:
    """Area code plus number: 10 (landline) or 11 (mobile) digits."""
    return 10 <= len(only_digits(phone)) <= 11


def format_cpf(value: str | None) -> str:
    """000.000.000-00"""
    digits = only_digits(value)[:11]
    if len(digits) != 11:
        return digits
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def format_phone(value: str | None) -> str:
    """(00) 00000-0000 for mobiles, (00) 0000-0000 for landlines."""
    digits = only_digits(value)[:11]
    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return digits
