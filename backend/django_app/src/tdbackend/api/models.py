import uuid

from django.db import models
from django.db.models.functions import Lower
from django.contrib.auth.models import User


def _uuid():
    return str(uuid.uuid4())


class TaskStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    IN_PROGRESS = 'in-progress', 'In progress'
    COMPLETED = 'completed', 'Completed'


class Category(models.Model):
    id = models.CharField(primary_key=True, max_length=64, default=_uuid)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='categories')
    name = models.CharField(max_length=100)
    color = models.CharField(max_length=16, default='#3B82F6')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('user', 'name')


class Tag(models.Model):
    id = models.CharField(primary_key=True, max_length=64, default=_uuid)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='tags')
    name = models.CharField(max_length=100)
    color = models.CharField(max_length=16, default='#6B7280')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint('user', Lower('name'), name='uniq_tag_name_per_user_ci'),
        ]


class Task(models.Model):
    id = models.CharField(primary_key=True, max_length=64, default=_uuid)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='tasks')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=16, choices=TaskStatus.choices, default=TaskStatus.PENDING)
    category = models.ForeignKey(Category, on_delete=models.SET_NULL, blank=True, null=True, related_name='tasks')
    tags = models.ManyToManyField(Tag, blank=True, related_name='tasks')
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['user', 'status', 'created_at'], name='task_user_status_created'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(status__in=TaskStatus.values),
                name='task_status_valid',
            ),
            models.CheckConstraint(condition=~models.Q(title=''), name='task_title_not_empty'),
        ]


class TaskTemplate(models.Model):
    id = models.CharField(primary_key=True, max_length=64, default=_uuid)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='task_templates')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    category = models.ForeignKey(Category, on_delete=models.SET_NULL, blank=True, null=True, related_name='templates')
    tags = models.ManyToManyField(Tag, blank=True, related_name='templates')
    created_at = models.DateTimeField(auto_now_add=True)


class Profile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    name = models.CharField(max_length=150, blank=True, default='')
    image = models.CharField(max_length=255, blank=True, null=True)  # public path, e.g. /uploads/<file>
