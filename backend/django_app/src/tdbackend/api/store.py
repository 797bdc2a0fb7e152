import contextlib
import logging

from django.db import DatabaseError, connections, transaction

from tdbackend.api.errors import InvalidInput, StoreFailure, TaskNotFound
from tdbackend.api.models import Category, Tag, Task, TaskStatus

logger = logging.getLogger(__name__)


def parse_status(raw):
    """Map a client-supplied status string onto TaskStatus, rejecting anything else."""
    try:
        return TaskStatus(raw)
    except ValueError:
        raise InvalidInput(f'Invalid status: {raw!r}') from None


class TaskStore:
    """
    Data-access handle for task records.

    Bound to one Django database alias. Every query goes through that alias,
    and any DatabaseError is re-raised as StoreFailure.
    """

    def __init__(self, using='default'):
        self.using = using

    def close(self):
        connections[self.using].close()

    @contextlib.contextmanager
    def _guard(self, op):
        try:
            yield
        except DatabaseError as exc:
            logger.exception('TaskStore %s failed', op)
            raise StoreFailure() from exc

    def _tasks(self):
        return Task.objects.using(self.using)

    def _owned(self, model, owner_id, ids):
        ids = list(dict.fromkeys(ids or []))
        found = list(model.objects.using(self.using).filter(user_id=owner_id, pk__in=ids))
        if len(found) != len(ids):
            raise InvalidInput(f'Unknown {model._meta.verbose_name} id')
        return found

    def owned_labels(self, owner_id, category_id=None, tag_ids=None):
        """Resolve category and tag ids, rejecting any the owner does not hold."""
        with self._guard('owned_labels'):
            category = self._owned(Category, owner_id, [category_id])[0] if category_id else None
            return category, self._owned(Tag, owner_id, tag_ids)

    # ---- reads ----

    def count(self, owner_id, status=None):
        qs = self._tasks().filter(user_id=owner_id)
        if status is not None:
            qs = qs.filter(status=parse_status(status))
        with self._guard('count'):
            return qs.count()

    def list_created_within_range(self, owner_id, status, start, end):
        """Creation timestamps of matching tasks with start <= created_at < end."""
        qs = self._tasks().filter(
            user_id=owner_id,
            status=parse_status(status),
            created_at__gte=start,
            created_at__lt=end,
        ).order_by('created_at')
        with self._guard('list_created_within_range'):
            return list(qs.values_list('created_at', flat=True))

    def list_for_owner(self, owner_id, status=None):
        qs = self._tasks().filter(user_id=owner_id)
        if status is not None:
            qs = qs.filter(status=parse_status(status))
        qs = qs.select_related('category').prefetch_related('tags').order_by('-created_at')
        with self._guard('list_for_owner'):
            return list(qs)

    def get_for_owner(self, owner_id, task_id):
        with self._guard('get_for_owner'):
            try:
                return self._tasks().select_related('category').get(user_id=owner_id, pk=task_id)
            except Task.DoesNotExist:
                raise TaskNotFound() from None

    # ---- writes ----

    def create(self, owner_id, title, description=None, status=TaskStatus.PENDING, category_id=None, tag_ids=None):
        if not title:
            raise InvalidInput('Title is required')
        status = parse_status(status)
        with self._guard('create'), transaction.atomic(using=self.using):
            category, tags = self.owned_labels(owner_id, category_id, tag_ids)
            task = Task(
                user_id=owner_id,
                title=title,
                description=description,
                status=status,
                category=category,
            )
            task.save(using=self.using)
            if tags:
                task.tags.set(tags)
        logger.debug('task created id=%s owner=%s status=%s', task.pk, owner_id, status)
        return task

    def update(self, owner_id, task_id, **fields):
        task = self.get_for_owner(owner_id, task_id)
        with self._guard('update'), transaction.atomic(using=self.using):
            if 'title' in fields:
                if not fields['title']:
                    raise InvalidInput('Title is required')
                task.title = fields['title']
            if 'description' in fields:
                task.description = fields['description']
            if 'status' in fields:
                task.status = parse_status(fields['status'])
            if 'category_id' in fields:
                category_id = fields['category_id']
                task.category = self._owned(Category, owner_id, [category_id])[0] if category_id else None
            task.save(using=self.using)
            if 'tag_ids' in fields:
                task.tags.set(self._owned(Tag, owner_id, fields['tag_ids']))
        return task

    def delete(self, owner_id, task_id):
        task = self.get_for_owner(owner_id, task_id)
        with self._guard('delete'):
            task.delete(using=self.using)
        logger.debug('task deleted id=%s owner=%s', task_id, owner_id)
