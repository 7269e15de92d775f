"""
Access Guard

Decides, for every inbound request, whether it may reach a protected path.
"""

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

from flask import redirect, request

logger = logging.getLogger(__name__)

NEXT_PARAM = 'next'


@dataclass(frozen=True)
class GuardDecision:
    """Outcome of a guard evaluation: pass through, or redirect to `location`."""
    allowed: bool
    location: str = None


PASS = GuardDecision(allowed=True)


class AccessGuard:
    """Ordered prefix check in front of the protected area.

    Only the request path and the session cookie are consulted. A path is
    protected when it equals a prefix or lies below it (``/vip`` covers
    ``/vip/dashboard`` but not ``/vip-access``).
    """

    def __init__(self, prefixes, entry_path, sessions):
        self.prefixes = tuple(prefixes)
        self.entry_path = entry_path
        self.sessions = sessions

    def is_protected(self, path):
        for prefix in self.prefixes:
            if path == prefix or path.startswith(prefix.rstrip('/') + '/'):
                return True
        return False

    def redirect_location(self, path):
        query = urlencode({NEXT_PARAM: path}, safe='/')
        return f'{self.entry_path}?{query}'

    def evaluate(self, path, get_cookie):
        """Evaluate one request.

        Args:
            path: Request path, without query string.
            get_cookie: Callable taking a cookie name and returning its value
                or None (``request.cookies.get`` works).

        Returns:
            GuardDecision
        """
        if not self.is_protected(path):
            return PASS
        if self.sessions.is_active(get_cookie(self.sessions.cookie_name)):
            return PASS
        return GuardDecision(allowed=False, location=self.redirect_location(path))


def init_guard(app, guard):
    """Register the guard so it runs before every request is dispatched."""

    @app.before_request
    def enforce_vip_access():
        decision = guard.evaluate(request.path, request.cookies.get)
        if decision.allowed:
            return None
        logger.debug('Redirecting %s to VIP entry form', request.path)
        return redirect(decision.location, code=307)
