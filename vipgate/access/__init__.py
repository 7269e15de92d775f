"""
Access Blueprint

VIP code entry form and the login/logout API.
"""

from flask import Blueprint

access_bp = Blueprint('access', __name__)

from vipgate.access import routes  # noqa: E402, F401
