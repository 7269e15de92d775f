"""
Session Manager

Issues and revokes the VIP session cookie. The cookie is the whole session:
nothing is kept server-side.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from itsdangerous import BadSignature, TimestampSigner

logger = logging.getLogger(__name__)

SESSION_VALUE = '1'
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class SessionCookie:
    """A session cookie as it will be written to the response."""
    name: str
    value: str
    expires: datetime
    domain: str = None
    path: str = '/'
    httponly: bool = True
    secure: bool = True
    samesite: str = 'Lax'

    def apply(self, response):
        """Write the cookie onto a Flask/Werkzeug response."""
        response.set_cookie(
            self.name,
            self.value,
            expires=self.expires,
            path=self.path,
            domain=self.domain,
            secure=self.secure,
            httponly=self.httponly,
            samesite=self.samesite,
        )
        return response


class SessionManager:
    """Grants, revokes and recognises the VIP session cookie.

    In the default mode the cookie value is the bare sentinel ``"1"`` and its
    presence is the only proof of entry. With ``signed`` enabled the value is
    a timestamp-signed token of that sentinel, checked against the secret key
    and the session lifetime.
    """

    def __init__(self, config):
        self.config = config
        self._signer = None
        if config.signed:
            self._signer = TimestampSigner(config.secret_key, salt='vipgate.session')

    @property
    def cookie_name(self):
        return self.config.cookie_name

    def _cookie(self, value, expires):
        return SessionCookie(
            name=self.config.cookie_name,
            value=value,
            expires=expires,
            domain=self.config.cookie_domain,
        )

    def grant(self, response=None, now=None):
        """Issue a session cookie valid for the configured number of minutes."""
        if now is None:
            now = datetime.now(timezone.utc)
        value = SESSION_VALUE
        if self._signer is not None:
            value = self._signer.sign(SESSION_VALUE).decode('ascii')

        cookie = self._cookie(value, now + timedelta(minutes=self.config.session_minutes))
        if response is not None:
            cookie.apply(response)
        return cookie

    def revoke(self, response=None):
        """Overwrite the session cookie with an empty, already-expired one."""
        cookie = self._cookie('', EPOCH)
        if response is not None:
            cookie.apply(response)
        return cookie

    def is_active(self, value):
        """Return True if a cookie value proves a granted session."""
        if not value:
            return False
        if self._signer is None:
            return value == SESSION_VALUE
        try:
            payload = self._signer.unsign(value, max_age=self.config.session_seconds)
        except BadSignature:
            logger.debug('Rejected session cookie with bad or expired signature')
            return False
        return payload.decode('ascii') == SESSION_VALUE
