# tests/test_auth_profile.py

from __future__ import annotations

import json

import pytest
from django.contrib.auth.models import User
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from django.test import Client

from tdbackend.api.models import Profile

pytestmark = pytest.mark.django_db


def _post(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type='application/json')


def test_health_endpoints(client) -> None:
    assert client.get('/healthz').json() == {'ok': True}
    assert client.get('/api/ping/').json()['ok'] is True


def test_register_login_me_logout() -> None:
    c = Client()
    res = _post(c, '/api/auth/register', {'email': ' New@Example.com ', 'password': 'longenough', 'name': 'Ada'})
    assert res.status_code == 200
    assert res.json()['user']['email'] == 'new@example.com'
    assert res.json()['user']['name'] == 'Ada'

    assert c.get('/api/auth/me').json()['user']['email'] == 'new@example.com'
    assert _post(c, '/api/auth/logout', {}).json() == {'ok': True}
    assert c.get('/api/auth/me').json() == {'user': None}

    bad = _post(c, '/api/auth/login', {'email': 'new@example.com', 'password': 'wrong-pass'})
    assert bad.status_code == 401
    good = _post(c, '/api/auth/login', {'email': 'NEW@example.com', 'password': 'longenough'})
    assert good.status_code == 200


def test_register_rejects_short_password_and_duplicates(user) -> None:
    c = Client()
    assert _post(c, '/api/auth/register', {'email': 'a@example.com', 'password': 'short'}).status_code == 400
    dup = _post(c, '/api/auth/register', {'email': 'owner@example.com', 'password': 'longenough'})
    assert dup.status_code == 409


def test_profile_update_with_image(auth_client, user, settings, tmp_path) -> None:
    settings.MEDIA_ROOT = str(tmp_path)
    image = SimpleUploadedFile('me.png', b'\x89PNG\r\n', content_type='image/png')

    res = auth_client.post('/api/profile', {'name': 'Owner', 'image': image})

    assert res.status_code == 200
    body = res.json()
    assert body['success'] is True
    assert body['name'] == 'Owner'
    assert body['image'].startswith('/uploads/')
    assert body['image'].endswith('me.png')
    assert list(tmp_path.iterdir())
    assert Profile.objects.get(user=user).image == body['image']


def test_profile_rejects_large_image(auth_client, settings, tmp_path) -> None:
    settings.MEDIA_ROOT = str(tmp_path)
    settings.PROFILE_IMAGE_MAX_BYTES = 4
    image = SimpleUploadedFile('big.png', b'0123456789', content_type='image/png')

    res = auth_client.post('/api/profile', {'name': 'Owner', 'image': image})

    assert res.status_code == 400


def test_profile_requires_post_and_login(client, auth_client) -> None:
    assert client.post('/api/profile', {'name': 'x'}).status_code == 401
    assert auth_client.get('/api/profile').status_code == 405


def test_register_database_error_is_json_internal_error(monkeypatch) -> None:
    def broken(*args, **kwargs):
        raise DatabaseError('disk full')

    monkeypatch.setattr(User.objects, 'create_user', broken)
    c = Client(raise_request_exception=False)

    res = _post(c, '/api/auth/register', {'email': 'a@example.com', 'password': 'longenough'})

    assert res.status_code == 500
    assert res.json() == {'error': 'Internal server error'}


def test_session_for_missing_user_is_not_found(auth_client, monkeypatch) -> None:
    # The session still resolves, but the owner lookup finds no row.
    monkeypatch.setattr(User.objects, 'filter', lambda *args, **kwargs: User.objects.none())

    res = auth_client.get('/api/tasks/analytics')

    assert res.status_code == 404
    assert res.json() == {'error': 'User not found'}
