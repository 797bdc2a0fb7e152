# tests/conftest.py

from __future__ import annotations

import datetime

import pytest
from django.contrib.auth.models import User
from django.test import Client
from django.utils import timezone

from tdbackend.api.models import Task
from tdbackend.api.store import TaskStore


@pytest.fixture()
def user(db) -> User:
    return User.objects.create_user(username='owner@example.com', email='owner@example.com', password='s3cret-pass')


@pytest.fixture()
def other_user(db) -> User:
    return User.objects.create_user(username='other@example.com', email='other@example.com', password='s3cret-pass')


@pytest.fixture()
def auth_client(user: User) -> Client:
    c = Client()
    c.force_login(user)
    return c


@pytest.fixture()
def store(db) -> TaskStore:
    return TaskStore(using='default')


@pytest.fixture()
def make_task(user: User):
    """
    Create a task and pin its creation timestamp.

    created_at is auto_now_add, so the timestamp is rewritten with a
    queryset update after insert.
    """

    def _make(status='pending', created=None, owner=None, title='task'):
        task = Task.objects.create(user=owner or user, title=title, status=status)
        if created is not None:
            if isinstance(created, datetime.date) and not isinstance(created, datetime.datetime):
                created = timezone.make_aware(datetime.datetime.combine(created, datetime.time(12, 0)))
            Task.objects.filter(pk=task.pk).update(created_at=created)
            task.refresh_from_db()
        return task

    return _make
