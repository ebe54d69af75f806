"""Shared validation helpers."""

import re

_EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
_AIN_RE = re.compile(r'\d{9}', re.ASCII)

DEFAULT_LDAP_LENGTH = 7

# Companies with their own LDAP length. These companies only issue LDAP codes.
COMPANY_LDAP_LENGTHS = {
    "Link": 11,
    "Impact": 10,
}


class IdKind:
    """Identifier kind constants."""
    LDAP = "LDAP"
    TIME_CLOCK = "Time Clock"

    CHOICES = [
        (LDAP, "LDAP"),
        (TIME_CLOCK, "Time Clock (AIN)"),
    ]

    @classmethod
    def parse(cls, value) -> str:
        """Map a submitted selector value to a kind, defaulting to LDAP."""
        if value in (cls.TIME_CLOCK, "TimeClock", "AIN"):
            return cls.TIME_CLOCK
        return cls.LDAP


def is_valid_email(value: str) -> bool:
    """Return True if *value* looks like a valid email address."""
    return bool(value and _EMAIL_RE.match(value.strip()))


def is_ldap_only(company: str) -> bool:
    """Return True if *company* only uses LDAP identifiers."""
    return company in COMPANY_LDAP_LENGTHS


def ldap_length(company: str) -> int:
    return COMPANY_LDAP_LENGTHS.get(company, DEFAULT_LDAP_LENGTH)


def validate_identifier(company: str, id_kind: str, value: str):
    """Check the format of an identifier for a company.

    Returns None when *value* is well-formed, otherwise the error message
    to show next to the identifier field.  Required-field checks are the
    caller's job; an empty value simply fails the format check here.
    """
    value = value or ""

    if id_kind == IdKind.TIME_CLOCK:
        if _AIN_RE.fullmatch(value):
            return None
        return "AIN must be exactly 9 digits."

    length = ldap_length(company)
    # str.isalnum() accepts non-ASCII letters, so check the ASCII range explicitly
    if len(value) == length and value.isascii() and value.isalnum():
        return None
    if company in COMPANY_LDAP_LENGTHS:
        return f"{company} LDAP must be exactly {length} alphanumeric characters."
    return f"LDAP must be exactly {length} letters or numbers."
