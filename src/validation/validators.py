import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[0-9\s+\-()]+$")
MIN_PHONE_DIGITS = 10


def is_valid_email(value: str) -> bool:
    """
    Check that a string has the ``local@domain.tld`` shape.

    :param value: Candidate email address.
    :return: True if the address matches.
    """
    return isinstance(value, str) and EMAIL_PATTERN.fullmatch(value) is not None


def is_valid_phone(value: str) -> bool:
    """
    Check that a string only holds digits, spaces, ``+ - ( )`` and at least ten digits.

    :param value: Candidate phone number.
    :return: True if the number is acceptable.
    """
    if not isinstance(value, str) or PHONE_PATTERN.fullmatch(value) is None:
        return False
    return sum(1 for char in value if char in "0123456789") >= MIN_PHONE_DIGITS
