"""
VIP Routes

Content pages behind the guard. They do no access checks of their own.
"""

from flask import render_template, url_for

from vipgate.vip import vip_bp


@vip_bp.route('/vip')
@vip_bp.route('/vip/<path:page>')
def vip_home(page=None):
    """VIP landing page"""
    return render_template('vip/index.html', room='vip', page=page,
                           logout_url=url_for('access.logout'))


@vip_bp.route('/viproom')
@vip_bp.route('/viproom/<path:page>')
def vip_room(page=None):
    """VIP room page"""
    return render_template('vip/index.html', room='viproom', page=page,
                           logout_url=url_for('access.logout'))
