"""
CPF helpers — isolated, testable, reusable.

The CPF (Cadastro de Pessoas Físicas) is stored as typed by the athlete,
so the kit validator has to try both representations:

    - unformatted: 11 digits, e.g. "52998224725"
    - formatted:   ###.###.###-##, e.g. "529.982.247-25"
"""

import re

_NON_DIGITS = re.compile(r'\D')


def normalize_cpf(value: str) -> str:
    """Strip everything but digits."""
    return _NON_DIGITS.sub('', value or '')


def format_cpf(value: str) -> str:
    """
    Canonical ###.###.###-## representation.

    Returns an empty string when the input does not normalize
    to exactly 11 digits.
    """
    digits = normalize_cpf(value)
    if len(digits) != 11:
        return ''
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def _check_digit(digits: list[int]) -> int:
    weight = len(digits) + 1
    total = sum(d * (weight - i) for i, d in enumerate(digits))
    remainder = (total * 10) % 11
    return 0 if remainder == 10 else remainder


def is_valid_cpf(value: str) -> bool:
    """
    Check length and both verification digits.

    Repeated-digit sequences (000.000.000-00, 111...) are rejected even
    though their check digits add up.
    """
    digits = normalize_cpf(value)
    if len(digits) != 11 or digits == digits[0] * 11:
        return False
    numbers = [int(d) for d in digits]
    if _check_digit(numbers[:9]) != numbers[9]:
        return False
    return _check_digit(numbers[:10]) == numbers[10]
