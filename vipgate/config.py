"""
Configuration settings for the VIP access gate
"""
import logging
import os
from dataclasses import dataclass

from vipgate.errors import ConfigurationError
from vipgate.services.codes import normalize_code

logger = logging.getLogger(__name__)

DEFAULT_COOKIE_NAME = 'td_vip'
DEFAULT_SESSION_MINUTES = 24 * 60
DEFAULT_PROTECTED_PREFIXES = '/vip,/viproom'
DEFAULT_ENTRY_PATH = '/vip-access'
DEFAULT_LANDING_PATH = '/vip'


class Config:
    """Flask application configuration"""

    # Only needed when VIP_COOKIE_SIGNED is on
    SECRET_KEY = os.environ.get('SECRET_KEY')

    # Comma-delimited allow-list. Required; may be empty (gate stays closed).
    VIP_CODES = os.environ.get('VIP_CODES')

    VIP_COOKIE_NAME = os.environ.get('VIP_COOKIE_NAME') or DEFAULT_COOKIE_NAME
    VIP_COOKIE_DOMAIN = os.environ.get('VIP_COOKIE_DOMAIN') or None
    VIP_SESSION_MINUTES = os.environ.get('VIP_SESSION_MINUTES') or DEFAULT_SESSION_MINUTES
    VIP_COOKIE_SIGNED = os.environ.get('VIP_COOKIE_SIGNED', '').lower() in ('1', 'true', 'yes', 'on')

    # Routing
    VIP_PROTECTED_PREFIXES = os.environ.get('VIP_PROTECTED_PREFIXES') or DEFAULT_PROTECTED_PREFIXES
    VIP_ENTRY_PATH = os.environ.get('VIP_ENTRY_PATH') or DEFAULT_ENTRY_PATH
    VIP_LANDING_PATH = os.environ.get('VIP_LANDING_PATH') or DEFAULT_LANDING_PATH


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    VIP_CODES = 'gold2024, Platinum ,,'
    VIP_COOKIE_NAME = DEFAULT_COOKIE_NAME
    VIP_COOKIE_DOMAIN = None
    VIP_SESSION_MINUTES = DEFAULT_SESSION_MINUTES
    VIP_COOKIE_SIGNED = False
    VIP_PROTECTED_PREFIXES = DEFAULT_PROTECTED_PREFIXES
    VIP_ENTRY_PATH = DEFAULT_ENTRY_PATH
    VIP_LANDING_PATH = DEFAULT_LANDING_PATH


def parse_codes(raw):
    """Build the allow-list from a comma-delimited string.

    Entries are trimmed and lower-cased; empty entries are dropped.
    """
    return frozenset(
        code for code in (normalize_code(part) for part in raw.split(','))
        if code
    )


def _parse_list(raw):
    if isinstance(raw, str):
        raw = raw.split(',')
    return tuple(item.strip() for item in raw if item and item.strip())


def _parse_minutes(raw):
    try:
        minutes = float(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f'VIP_SESSION_MINUTES must be a number, got {raw!r}')
    if minutes != minutes or minutes <= 0 or minutes == float('inf'):
        raise ConfigurationError(f'VIP_SESSION_MINUTES must be positive, got {raw!r}')
    return minutes


def _parse_flag(raw):
    if isinstance(raw, str):
        return raw.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(raw)


def _check_path(name, path):
    if not isinstance(path, str) or not path.startswith('/'):
        raise ConfigurationError(f'{name} must be an absolute path, got {path!r}')
    return path


@dataclass(frozen=True)
class GateConfig:
    """Validated, read-only gate settings.

    Built once when the app is created and passed to the verifier, the
    session manager and the guard.
    """
    codes: frozenset
    cookie_name: str = DEFAULT_COOKIE_NAME
    cookie_domain: str = None
    session_minutes: float = DEFAULT_SESSION_MINUTES
    protected_prefixes: tuple = ('/vip', '/viproom')
    entry_path: str = DEFAULT_ENTRY_PATH
    landing_path: str = DEFAULT_LANDING_PATH
    signed: bool = False
    secret_key: str = None

    @property
    def session_seconds(self):
        return int(self.session_minutes * 60)

    @classmethod
    def from_mapping(cls, mapping):
        """Validate a config mapping (usually ``app.config``).

        Raises:
            ConfigurationError: if a required value is missing or malformed.
        """
        raw_codes = mapping.get('VIP_CODES')
        if not isinstance(raw_codes, str):
            raise ConfigurationError('VIP_CODES is required (comma-delimited list of access codes)')
        codes = parse_codes(raw_codes)
        if not codes:
            logger.warning('VIP_CODES is empty; every access code will be rejected')

        cookie_name = mapping.get('VIP_COOKIE_NAME', DEFAULT_COOKIE_NAME)
        if not isinstance(cookie_name, str) or not cookie_name.strip():
            raise ConfigurationError('VIP_COOKIE_NAME must be a non-empty string')

        cookie_domain = mapping.get('VIP_COOKIE_DOMAIN') or None
        if cookie_domain is not None and not isinstance(cookie_domain, str):
            raise ConfigurationError('VIP_COOKIE_DOMAIN must be a string')

        minutes = _parse_minutes(mapping.get('VIP_SESSION_MINUTES', DEFAULT_SESSION_MINUTES))

        prefixes = _parse_list(mapping.get('VIP_PROTECTED_PREFIXES', DEFAULT_PROTECTED_PREFIXES))
        if not prefixes:
            raise ConfigurationError('VIP_PROTECTED_PREFIXES must name at least one path')
        for prefix in prefixes:
            _check_path('VIP_PROTECTED_PREFIXES', prefix)
        # "/vip/" and "/vip" protect the same subtree
        prefixes = tuple(dict.fromkeys(p.rstrip('/') or '/' for p in prefixes))

        entry_path = _check_path('VIP_ENTRY_PATH', mapping.get('VIP_ENTRY_PATH', DEFAULT_ENTRY_PATH))
        landing_path = _check_path('VIP_LANDING_PATH', mapping.get('VIP_LANDING_PATH', DEFAULT_LANDING_PATH))
        for prefix in prefixes:
            if entry_path == prefix or entry_path.startswith(prefix.rstrip('/') + '/'):
                raise ConfigurationError(
                    f'VIP_ENTRY_PATH {entry_path!r} is under protected prefix {prefix!r}'
                )

        signed = _parse_flag(mapping.get('VIP_COOKIE_SIGNED', False))
        secret_key = mapping.get('SECRET_KEY') or None
        if signed and not secret_key:
            raise ConfigurationError('SECRET_KEY is required when VIP_COOKIE_SIGNED is on')

        return cls(
            codes=codes,
            cookie_name=cookie_name.strip(),
            cookie_domain=cookie_domain,
            session_minutes=minutes,
            protected_prefixes=prefixes,
            entry_path=entry_path,
            landing_path=landing_path,
            signed=signed,
            secret_key=secret_key,
        )
