"""
Validated account identities.

Counter owners and callers are account names: 2 to 64 characters of lowercase
letters and digits, split into parts by single ``-``, ``_`` or ``.``
separators (e.g. ``alice.testnet``, ``bob_1``).
"""

import re

MIN_LENGTH = 2
MAX_LENGTH = 64

_ACCOUNT_RE = re.compile(r'(([a-z0-9]+[-_])*[a-z0-9]+\.)*([a-z0-9]+[-_])*[a-z0-9]+')


class InvalidAccountId(ValueError):
    """Raised when a string is not a well-formed account name."""
    pass


def is_valid_account_id(value: str) -> bool:
    """Check an account name without raising."""
    return (
        isinstance(value, str)
        and MIN_LENGTH <= len(value) <= MAX_LENGTH
        and _ACCOUNT_RE.fullmatch(value) is not None
    )


class AccountId(str):
    """An account name that has passed validation."""

    def __new__(cls, value):
        if isinstance(value, AccountId):
            return value
        if not is_valid_account_id(value):
            raise InvalidAccountId(f"Invalid account id: {value!r}")
        return super().__new__(cls, value)

    def to_bytes(self) -> bytes:
        """Encoding mixed into the entropy pool."""
        return self.encode('ascii')

    def __repr__(self) -> str:
        return f"AccountId({str(self)!r})"
