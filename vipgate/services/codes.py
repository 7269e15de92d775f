"""
Code Verifier

Checks a submitted VIP code against the configured allow-list.
"""

from vipgate.errors import InvalidCodeError


def normalize_code(value):
    """Trim and lower-case a code."""
    return value.strip().lower()


class CodeVerifier:
    """Membership test against a normalized allow-list.

    An empty allow-list rejects everything.
    """

    def __init__(self, codes):
        self.codes = frozenset(codes)

    def verify(self, submitted):
        """Return True if `submitted` is a string on the allow-list.

        Casing and surrounding whitespace are ignored. Anything that is not
        a string (including None) is rejected.
        """
        if not isinstance(submitted, str):
            return False
        return normalize_code(submitted) in self.codes

    def check(self, submitted):
        """Like verify(), but raise InvalidCodeError on failure."""
        if not self.verify(submitted):
            raise InvalidCodeError()
