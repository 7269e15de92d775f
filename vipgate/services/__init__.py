"""
Services Package

Exports the gate services for easy importing.
"""

from vipgate.services.codes import CodeVerifier, normalize_code
from vipgate.services.session import SessionCookie, SessionManager
from vipgate.services.guard import AccessGuard, GuardDecision, init_guard

__all__ = [
    'CodeVerifier',
    'normalize_code',
    'SessionCookie',
    'SessionManager',
    'AccessGuard',
    'GuardDecision',
    'init_guard',
]
