"""
VIP Gate - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

from flask import Flask
from vipgate.config import Config
from vipgate.extensions import VipGate


def create_app(config_class=Config):
    """Create and configure the Flask application.
    
    Args:
        config_class: Configuration class to use (default: Config)
    
    Returns:
        Configured Flask application instance

    Raises:
        ConfigurationError: if the VIP gate settings are missing or malformed
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    
    # Validate gate settings and install the guard before any route exists
    VipGate(app)
    
    # Register blueprints
    from vipgate.access import access_bp
    from vipgate.vip import vip_bp
    
    app.register_blueprint(access_bp)
    app.register_blueprint(vip_bp)
    
    return app
