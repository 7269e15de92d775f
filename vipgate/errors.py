"""
Gate Errors

Exception types raised by the access gate.
"""


class GateError(Exception):
    """Base class for access gate errors."""


class ConfigurationError(GateError):
    """Required configuration is missing or malformed. Fatal at startup."""


class InvalidCodeError(GateError):
    """Submitted VIP code is absent, not a string, or not on the allow-list.

    The message is always generic so clients cannot tell an unknown format
    from a wrong code.
    """

    def __init__(self, message='Invalid code'):
        super().__init__(message)
        self.message = message


class MalformedRequestError(GateError):
    """Request body could not be read as a JSON object."""
