from rest_framework import serializers

from tdbackend.api.models import Category, Tag, Task, TaskStatus, TaskTemplate


# Output shapes (camelCase keys, as the frontend reads them)

class CategorySerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source='user_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Category
        fields = ['id', 'name', 'color', 'userId', 'createdAt']


class TagSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source='user_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Tag
        fields = ['id', 'name', 'color', 'userId', 'createdAt']


class TaskSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source='user_id', read_only=True)
    categoryId = serializers.CharField(source='category_id', read_only=True, allow_null=True)
    category = CategorySerializer(read_only=True, allow_null=True)
    tags = TagSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Task
        fields = ['id', 'title', 'description', 'status', 'userId', 'categoryId', 'category', 'tags', 'createdAt', 'updatedAt']


class TaskTemplateSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source='user_id', read_only=True)
    categoryId = serializers.CharField(source='category_id', read_only=True, allow_null=True)
    category = CategorySerializer(read_only=True, allow_null=True)
    tags = TagSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = TaskTemplate
        fields = ['id', 'title', 'description', 'userId', 'categoryId', 'category', 'tags', 'createdAt']


class DayCountSerializer(serializers.Serializer):
    date = serializers.DateField()
    count = serializers.IntegerField()


class AnalyticsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    completed = serializers.IntegerField()
    pending = serializers.IntegerField()
    inProgress = serializers.IntegerField(source='in_progress')
    completedPerDay = DayCountSerializer(source='completed_per_day', many=True)


# Input validation

class TaskInputSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, trim_whitespace=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
    status = serializers.ChoiceField(choices=TaskStatus.choices, required=False)
    categoryId = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    tagIds = serializers.ListField(child=serializers.CharField(), required=False)


class TemplateInputSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, trim_whitespace=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
    categoryId = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    tagIds = serializers.ListField(child=serializers.CharField(), required=False)


class LabelInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, trim_whitespace=True)
    color = serializers.RegexField(r'^#[0-9A-Fa-f]{3,8}$', required=False, allow_blank=True)


class CredentialsSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=8, trim_whitespace=False)
    name = serializers.CharField(max_length=150, required=False, allow_blank=True)

    def validate_email(self, value):
        return value.strip().lower()


def first_error(errors):
    """Flatten DRF's error mapping into one readable message."""
    field, messages = next(iter(errors.items()))
    if isinstance(messages, dict):
        return first_error(messages)
    message = messages[0] if isinstance(messages, list) else messages
    if isinstance(message, dict):
        return first_error(message)
    if field == 'non_field_errors':
        return str(message)
    return f'{field}: {message}'
