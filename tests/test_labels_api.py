# tests/test_labels_api.py

from __future__ import annotations

import json

import pytest
from django.db import DatabaseError

from tdbackend.api.models import Category, Tag, TaskTemplate

pytestmark = pytest.mark.django_db


def _post(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type='application/json')


def test_category_create_default_color_and_list_sorted(auth_client) -> None:
    res = _post(auth_client, '/api/categories', {'name': 'Work'})
    assert res.status_code == 201
    assert res.json()['color'] == '#3B82F6'

    _post(auth_client, '/api/categories', {'name': 'Errands', 'color': '#10B981'})

    names = [c['name'] for c in auth_client.get('/api/categories').json()]
    assert names == ['Errands', 'Work']


def test_category_duplicate_name_rejected(auth_client) -> None:
    _post(auth_client, '/api/categories', {'name': 'Work'})

    res = _post(auth_client, '/api/categories', {'name': 'Work'})

    assert res.status_code == 400
    assert res.json() == {'error': 'Category name already exists'}
    assert Category.objects.count() == 1


def test_category_requires_name(auth_client) -> None:
    assert _post(auth_client, '/api/categories', {'color': '#000000'}).status_code == 400


def test_tag_duplicate_is_case_insensitive(auth_client) -> None:
    first = _post(auth_client, '/api/tags', {'name': 'Urgent'})
    assert first.status_code == 201
    assert first.json()['color'] == '#6B7280'

    again = _post(auth_client, '/api/tags', {'name': 'urgent'})

    assert again.status_code == 200
    assert again.json()['id'] == first.json()['id']
    assert Tag.objects.count() == 1


def test_tags_are_per_owner(auth_client, other_user) -> None:
    Tag.objects.create(user=other_user, name='urgent')

    res = _post(auth_client, '/api/tags', {'name': 'urgent'})

    assert res.status_code == 201
    assert [t['name'] for t in auth_client.get('/api/tags').json()] == ['urgent']


def test_template_create_with_labels(auth_client, user) -> None:
    cat = Category.objects.create(user=user, name='Home')
    tag = Tag.objects.create(user=user, name='weekly')

    res = _post(auth_client, '/api/templates', {'title': 'Laundry', 'categoryId': cat.id, 'tagIds': [tag.id]})

    assert res.status_code == 201
    body = res.json()
    assert body['category']['name'] == 'Home'
    assert [t['id'] for t in body['tags']] == [tag.id]

    listed = auth_client.get('/api/templates').json()
    assert [t['title'] for t in listed] == ['Laundry']


def test_template_rejects_foreign_tag(auth_client, other_user) -> None:
    tag = Tag.objects.create(user=other_user, name='theirs')

    res = _post(auth_client, '/api/templates', {'title': 'x', 'tagIds': [tag.id]})

    assert res.status_code == 400
    assert res.json() == {'error': 'Unknown tag id'}


def test_labels_require_login(client) -> None:
    for url in ('/api/categories', '/api/tags', '/api/templates'):
        assert client.get(url).status_code == 401


def test_template_rejected_labels_leave_no_row(auth_client, user, other_user) -> None:
    cat = Category.objects.create(user=user, name='Home')
    foreign = Tag.objects.create(user=other_user, name='theirs')

    res = _post(auth_client, '/api/templates', {'title': 'x', 'categoryId': cat.id, 'tagIds': [foreign.id]})

    assert res.status_code == 400
    assert not TaskTemplate.objects.exists()


def test_database_error_is_json_internal_error(auth_client, monkeypatch) -> None:
    def broken(*args, **kwargs):
        raise DatabaseError('database is locked')

    monkeypatch.setattr(Category.objects, 'filter', broken)
    auth_client.raise_request_exception = False

    res = auth_client.get('/api/categories')

    assert res.status_code == 500
    assert res['Content-Type'] == 'application/json'
    assert res.json() == {'error': 'Internal server error'}
