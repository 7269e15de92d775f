"""
Access Routes

VIP code login/logout endpoints and the entry form the guard redirects to.
"""

import logging

from flask import jsonify, render_template, request, url_for

from vipgate.access import access_bp
from vipgate.errors import InvalidCodeError, MalformedRequestError
from vipgate.extensions import current_gate
from vipgate.services.guard import NEXT_PARAM

logger = logging.getLogger(__name__)


def safe_next(target, default):
    """Return `target` if it is a local absolute path, otherwise `default`."""
    if not isinstance(target, str) or not target.startswith('/'):
        return default
    if target.startswith('//') or target.startswith('/\\'):
        return default
    # browsers drop tab, CR and LF before navigating, so "/\t/host" becomes "//host"
    if any(ord(c) <= 0x20 or c == '\x7f' for c in target):
        return default
    return target


def read_submitted_code():
    """Pull the `code` field out of a JSON request body.

    Raises:
        MalformedRequestError: if the body is not a JSON object.
    """
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        raise MalformedRequestError('Request body must be a JSON object')
    return body.get('code', '')


@access_bp.record_once
def register_entry_form(state):
    """Mount the entry form on the configured VIP_ENTRY_PATH."""
    gate = state.app.extensions['vipgate']
    state.add_url_rule(gate.config.entry_path, 'entry_form', entry_form)


def entry_form():
    """VIP code entry form."""
    gate = current_gate()
    next_url = safe_next(request.args.get(NEXT_PARAM), gate.config.landing_path)
    return render_template('access/entry.html',
                           next_url=next_url,
                           login_url=url_for('access.login'))


@access_bp.route('/')
def index():
    """Home page pointing visitors at the VIP entry form."""
    return render_template('access/index.html',
                           entry_url=current_gate().config.entry_path)


@access_bp.route('/api/vip/login', methods=['POST'])
def login():
    """Check the submitted code and grant a session cookie on success."""
    gate = current_gate()
    try:
        code = read_submitted_code()
    except MalformedRequestError:
        code = ''

    gate.verifier.check(code)

    response = jsonify(ok=True)
    gate.sessions.grant(response)
    logger.info('VIP session granted to %s', request.remote_addr)
    return response


@access_bp.route('/api/vip/logout', methods=['POST'])
def logout():
    """Clear the session cookie. Always succeeds."""
    response = jsonify(ok=True)
    current_gate().sessions.revoke(response)
    logger.info('VIP session revoked for %s', request.remote_addr)
    return response


@access_bp.errorhandler(InvalidCodeError)
def invalid_code(error):
    """Generic 401 for any rejected code."""
    logger.warning('Rejected VIP code from %s', request.remote_addr)
    return jsonify(message=error.message), 401
