"""
VIP Blueprint

Placeholder content area behind the access guard.
"""

from flask import Blueprint

vip_bp = Blueprint('vip', __name__)

from vipgate.vip import routes  # noqa: E402, F401
