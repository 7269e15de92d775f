from urllib.parse import parse_qs, urlsplit

import pytest
from flask import Flask

from vipgate import config
from vipgate.access.routes import safe_next
from vipgate.extensions import VipGate


def set_cookie_headers(response):
    return response.headers.getlist('Set-Cookie')


def login(client, code):
    return client.post('/api/vip/login', json={'code': code})


def test_login_with_valid_code_sets_cookie(client):
    r = login(client, '  GOLD2024 ')
    assert r.status_code == 200
    assert r.get_json() == {'ok': True}

    headers = set_cookie_headers(r)
    assert len(headers) == 1
    header = headers[0]
    assert header.startswith('td_vip=1;')
    for attr in ('HttpOnly', 'Secure', 'SameSite=Lax', 'Path=/', 'Expires='):
        assert attr in header
    assert 'Domain=' not in header

    cookie = client.get_cookie('td_vip')
    assert cookie is not None
    assert cookie.value == '1'


def test_login_with_invalid_code_is_unauthorized(client):
    r = login(client, 'silver')
    assert r.status_code == 401
    assert r.get_json() == {'message': 'Invalid code'}
    assert set_cookie_headers(r) == []
    assert client.get_cookie('td_vip') is None


@pytest.mark.parametrize('kwargs', [
    {'data': 'not json', 'content_type': 'application/json'},
    {'data': '', 'content_type': 'application/json'},
    {'data': 'code=gold2024', 'content_type': 'application/x-www-form-urlencoded'},
    {'json': ['gold2024']},
    {'json': 'gold2024'},
    {'json': {}},
    {'json': {'code': None}},
    {'json': {'code': 2024}},
    {'json': {'code': ['gold2024']}},
])
def test_malformed_login_is_generic_unauthorized(client, kwargs):
    r = client.post('/api/vip/login', **kwargs)
    assert r.status_code == 401
    assert r.get_json() == {'message': 'Invalid code'}
    assert set_cookie_headers(r) == []


def test_login_accepts_json_without_content_type(client):
    r = client.post('/api/vip/login', data='{"code": "platinum"}', content_type='text/plain')
    assert r.status_code == 200


def test_failure_message_does_not_depend_on_code(client):
    bodies = {login(client, code).get_data(as_text=True) for code in ('silver', '', 'x' * 500, 'GOLD2025')}
    assert len(bodies) == 1


def test_login_is_post_only(client):
    assert client.get('/api/vip/login').status_code == 405


def test_protected_path_without_cookie_redirects(client):
    r = client.get('/vip/dashboard')
    assert r.status_code == 307
    location = urlsplit(r.headers['Location'])
    assert location.path == '/vip-access'
    assert parse_qs(location.query) == {'next': ['/vip/dashboard']}


@pytest.mark.parametrize('path', ['/vip', '/vip/', '/viproom', '/viproom/lounge/table-1'])
def test_every_protected_path_redirects_with_destination(client, path):
    r = client.get(path)
    assert r.status_code == 307
    assert parse_qs(urlsplit(r.headers['Location']).query)['next'] == [path]


def test_redirect_drops_original_query_string(client):
    r = client.get('/vip/dashboard?tab=2')
    assert parse_qs(urlsplit(r.headers['Location']).query) == {'next': ['/vip/dashboard']}


def test_protected_path_with_cookie_passes(client):
    client.set_cookie('td_vip', '1')
    r = client.get('/vip/dashboard')
    assert r.status_code == 200
    assert 'Welcome to the VIP area' in r.get_data(as_text=True)


def test_wrong_cookie_value_redirects(client):
    client.set_cookie('td_vip', 'yes')
    assert client.get('/vip').status_code == 307


@pytest.mark.parametrize('path', ['/vip-access', '/api/vip/logout', '/nowhere'])
def test_unprotected_paths_are_not_redirected(client, path):
    for _ in range(2):
        r = client.get(path)
        assert r.status_code != 307
        client.set_cookie('td_vip', '1')


def test_login_then_protected_area(client):
    assert client.get('/viproom').status_code == 307
    assert login(client, 'gold2024').status_code == 200
    r = client.get('/viproom')
    assert r.status_code == 200
    assert 'Welcome to the VIP room' in r.get_data(as_text=True)


def test_logout_clears_cookie_and_guard_redirects_again(client):
    login(client, 'gold2024')
    assert client.get('/vip/dashboard').status_code == 200

    r = client.post('/api/vip/logout')
    assert r.status_code == 200
    assert r.get_json() == {'ok': True}
    header = set_cookie_headers(r)[0]
    assert header.startswith('td_vip=;')
    assert 'Expires=Thu, 01 Jan 1970 00:00:00 GMT' in header
    for attr in ('HttpOnly', 'Secure', 'SameSite=Lax', 'Path=/'):
        assert attr in header
    assert client.get_cookie('td_vip') is None

    r = client.get('/vip/dashboard')
    assert r.status_code == 307
    assert parse_qs(urlsplit(r.headers['Location']).query) == {'next': ['/vip/dashboard']}


def test_logout_without_session_still_succeeds(client):
    r = client.post('/api/vip/logout')
    assert r.status_code == 200
    assert r.get_json() == {'ok': True}


def test_entry_form_carries_next(client):
    r = client.get('/vip-access?next=/vip/dashboard')
    assert r.status_code == 200
    body = r.get_data(as_text=True)
    assert 'Enter VIP code' in body
    assert '"/vip/dashboard"' in body
    assert '"/api/vip/login"' in body


@pytest.mark.parametrize('target', [
    'https://evil.example/',
    '//evil.example/',
    '/\\evil.example',
    '/\t/evil.example',
    '/\n/evil.example',
    '/\r\n/evil.example',
    '/ /evil.example',
    'vip',
    '',
])
def test_entry_form_ignores_non_local_next(client, target):
    r = client.get('/vip-access', query_string={'next': target})
    body = r.get_data(as_text=True)
    assert 'const nextUrl = "/vip";' in body


def test_configured_cookie_name_domain_and_paths(make_app):
    app = make_app(
        VIP_COOKIE_NAME='club',
        VIP_COOKIE_DOMAIN='example.com',
        VIP_ENTRY_PATH='/enter',
        VIP_PROTECTED_PREFIXES='/viproom',
    )
    client = app.test_client()

    r = client.post('/api/vip/login', json={'code': 'gold2024'})
    header = set_cookie_headers(r)[0]
    assert header.startswith('club=1;')
    assert 'Domain=example.com' in header

    r = client.get('/viproom/x')
    assert r.status_code == 307
    assert urlsplit(r.headers['Location']).path == '/enter'
    # /vip is no longer behind the guard
    assert client.get('/vip').status_code == 200
    assert client.get('/enter').status_code == 200


def test_empty_allow_list_fails_closed(make_app):
    client = make_app(VIP_CODES=' , ').test_client()
    for code in ('gold2024', '', ' '):
        assert client.post('/api/vip/login', json={'code': code}).status_code == 401


def test_signed_cookie_flow(make_app):
    client = make_app(VIP_COOKIE_SIGNED=True).test_client()

    client.set_cookie('td_vip', '1')
    assert client.get('/vip').status_code == 307

    r = client.post('/api/vip/login', json={'code': 'platinum'})
    assert r.status_code == 200
    assert client.get_cookie('td_vip').value != '1'
    assert client.get('/vip').status_code == 200

    client.post('/api/vip/logout')
    assert client.get('/vip').status_code == 307


@pytest.mark.parametrize('target', ['/vip/dashboard', '/viproom?tab=2', '/vip/a%20b'])
def test_safe_next_keeps_local_paths(target):
    assert safe_next(target, '/vip') == target


@pytest.mark.parametrize('target', ['/\x00/evil.example', '/\x7f/evil.example', '/\x0b/evil.example', None, 42])
def test_safe_next_rejects_control_characters_and_non_strings(target):
    assert safe_next(target, '/vip') == '/vip'


def test_home_page_links_to_entry_form(client):
    r = client.get('/')
    assert r.status_code == 200
    body = r.get_data(as_text=True)
    assert 'VIP Gateway' in body
    assert 'href="/vip-access"' in body


def test_home_page_follows_configured_entry_path(make_app):
    client = make_app(VIP_ENTRY_PATH='/enter').test_client()
    assert 'href="/enter"' in client.get('/').get_data(as_text=True)


def test_gate_can_be_initialised_after_construction():
    app = Flask(__name__)
    app.config.from_object(config.TestConfig)
    gate = VipGate()
    assert gate.guard is None
    gate.init_app(app)
    assert app.extensions['vipgate'] is gate
    assert gate.config.cookie_name == 'td_vip'

    @app.route('/vip/page')
    def page():
        return 'inside'

    client = app.test_client()
    assert client.get('/vip/page').status_code == 307
    client.set_cookie('td_vip', '1')
    assert client.get('/vip/page').get_data(as_text=True) == 'inside'
