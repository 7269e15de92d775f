import pytest

from vipgate import config, create_app


@pytest.fixture()
def make_app():
    """Build an app from TestConfig with some settings overridden."""
    def _make_app(**overrides):
        config_class = type('GateTestConfig', (config.TestConfig,), overrides)
        return create_app(config_class)
    return _make_app


@pytest.fixture()
def app(make_app):
    return make_app()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def gate(app):
    return app.extensions['vipgate']
