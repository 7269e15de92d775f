"""
Flask Extensions

The gate is wired into an app the way Flask extensions are: `init_app`
validates the configuration once and keeps the resulting services on
``app.extensions`` for request handlers to use.
"""

from flask import current_app

from vipgate.config import GateConfig
from vipgate.services import AccessGuard, CodeVerifier, SessionManager, init_guard

EXTENSION_NAME = 'vipgate'


class VipGate:
    """Verifier, session manager and guard built from one GateConfig."""

    def __init__(self, app=None):
        self.config = None
        self.verifier = None
        self.sessions = None
        self.guard = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Validate configuration and install the guard.

        Raises:
            ConfigurationError: if the app's VIP_* settings are unusable.
        """
        self.config = GateConfig.from_mapping(app.config)
        self.verifier = CodeVerifier(self.config.codes)
        self.sessions = SessionManager(self.config)
        self.guard = AccessGuard(self.config.protected_prefixes, self.config.entry_path, self.sessions)
        init_guard(app, self.guard)
        app.extensions[EXTENSION_NAME] = self


def current_gate():
    """Return the VipGate of the active application."""
    return current_app.extensions[EXTENSION_NAME]
