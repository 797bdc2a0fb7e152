import functools
import json
import logging
import time

from django.apps import apps
from django.conf import settings
from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.models import User
from django.core.files.storage import default_storage
from django.db import DatabaseError, IntegrityError, transaction
from django.http import JsonResponse
from django.utils.text import get_valid_filename
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from tdbackend.api.analytics import compute_analytics
from tdbackend.api.errors import ApiError, InvalidInput, NotFound, StoreFailure, Unauthorized
from tdbackend.api.models import Category, Profile, Tag, TaskTemplate
from tdbackend.api.serializers import (
    AnalyticsSerializer,
    CategorySerializer,
    CredentialsSerializer,
    LabelInputSerializer,
    TagSerializer,
    TaskInputSerializer,
    TaskSerializer,
    TaskTemplateSerializer,
    TemplateInputSerializer,
    first_error,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = 'taskdash-backend-django'
DEFAULT_CATEGORY_COLOR = '#3B82F6'
DEFAULT_TAG_COLOR = '#6B7280'


def json_errors(view):
    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except StoreFailure as exc:
            logger.error('%s %s: %s', request.method, request.path, exc)
            return JsonResponse({"error": exc.message}, status=exc.status)
        except ApiError as exc:
            return JsonResponse({"error": exc.message}, status=exc.status)
        except DatabaseError:
            logger.exception('%s %s: database error', request.method, request.path)
            failure = StoreFailure()
            return JsonResponse({"error": failure.message}, status=failure.status)
    return wrapper


def _store():
    return apps.get_app_config('api').task_store


def _body(request):
    try:
        body = json.loads(request.body or b"{}")
    except ValueError:
        raise InvalidInput('Malformed JSON body') from None
    if not isinstance(body, dict):
        raise InvalidInput('JSON object expected')
    return body


def _validated(serializer_class, data, partial=False):
    serializer = serializer_class(data=data, partial=partial)
    if not serializer.is_valid():
        raise InvalidInput(first_error(serializer.errors))
    return serializer.validated_data


def _owner(request):
    if not request.user.is_authenticated:
        raise Unauthorized()
    if not User.objects.filter(pk=request.user.pk).exists():
        raise NotFound('User not found')
    return request.user


def _user_payload(user):
    profile = Profile.objects.filter(user=user).first()
    return {
        "id": user.id,
        "email": user.username,
        "name": profile.name if profile else '',
        "image": profile.image if profile else None,
    }


@require_http_methods(["GET"])
def healthz(request):
    return JsonResponse({"ok": True})


@require_http_methods(["GET"])
def ping(request):
    return JsonResponse({"ok": True, "service": SERVICE_NAME})


# Auth

@csrf_exempt
@require_http_methods(["POST"])
@json_errors
def register(request):
    data = _validated(CredentialsSerializer, _body(request))
    email = data['email']
    if User.objects.filter(username=email).exists():
        return JsonResponse({"error": "Email already registered"}, status=409)
    user = User.objects.create_user(username=email, email=email, password=data['password'])
    Profile.objects.create(user=user, name=data.get('name', ''))
    login(request, user)
    logger.info('registered user id=%s', user.id)
    return JsonResponse({"ok": True, "user": _user_payload(user)})


@csrf_exempt
@require_http_methods(["POST"])
@json_errors
def login_view(request):
    body = _body(request)
    email = (body.get('email') or '').strip().lower()
    password = body.get('password') or ''
    user = authenticate(request, username=email, password=password)
    if user is None:
        return JsonResponse({"error": "Invalid credentials"}, status=401)
    login(request, user)
    return JsonResponse({"ok": True, "user": _user_payload(user)})


@csrf_exempt
@require_http_methods(["POST"])
@json_errors
def logout_view(request):
    logout(request)
    return JsonResponse({"ok": True})


@require_http_methods(["GET"])
@json_errors
def me(request):
    if request.user.is_authenticated:
        return JsonResponse({"user": _user_payload(request.user)})
    return JsonResponse({"user": None})


# Tasks

@csrf_exempt
@require_http_methods(["GET", "POST"])
@json_errors
def tasks(request):
    owner = _owner(request)
    store = _store()
    if request.method == 'GET':
        items = store.list_for_owner(owner.id, status=request.GET.get('status') or None)
        return JsonResponse(TaskSerializer(items, many=True).data, safe=False)
    data = _validated(TaskInputSerializer, _body(request))
    task = store.create(
        owner.id,
        title=data['title'],
        description=data.get('description'),
        status=data.get('status') or 'pending',
        category_id=data.get('categoryId') or None,
        tag_ids=data.get('tagIds'),
    )
    return JsonResponse(TaskSerializer(task).data, status=201)


@csrf_exempt
@require_http_methods(["PATCH", "PUT", "DELETE"])
@json_errors
def task_detail(request, task_id: str):
    owner = _owner(request)
    store = _store()
    if request.method == 'DELETE':
        store.delete(owner.id, task_id)
        return JsonResponse({"success": True})
    data = _validated(TaskInputSerializer, _body(request), partial=True)
    fields = {}
    for key, field in (('title', 'title'), ('description', 'description'), ('status', 'status'),
                       ('categoryId', 'category_id'), ('tagIds', 'tag_ids')):
        if key in data:
            fields[field] = data[key]
    task = store.update(owner.id, task_id, **fields)
    return JsonResponse(TaskSerializer(task).data)


@require_http_methods(["GET"])
@json_errors
def task_analytics(request):
    owner = _owner(request)
    snapshot = compute_analytics(_store(), owner.id)
    return JsonResponse(AnalyticsSerializer(snapshot).data)


# Categories, tags and templates

@csrf_exempt
@require_http_methods(["GET", "POST"])
@json_errors
def categories(request):
    owner = _owner(request)
    if request.method == 'GET':
        items = Category.objects.filter(user=owner).order_by('name')
        return JsonResponse(CategorySerializer(items, many=True).data, safe=False)
    data = _validated(LabelInputSerializer, _body(request))
    try:
        with transaction.atomic():
            category = Category.objects.create(
                user=owner,
                name=data['name'],
                color=data.get('color') or DEFAULT_CATEGORY_COLOR,
            )
    except IntegrityError:
        return JsonResponse({"error": "Category name already exists"}, status=400)
    return JsonResponse(CategorySerializer(category).data, status=201)


@csrf_exempt
@require_http_methods(["GET", "POST"])
@json_errors
def tags(request):
    owner = _owner(request)
    if request.method == 'GET':
        items = Tag.objects.filter(user=owner).order_by('name')
        return JsonResponse(TagSerializer(items, many=True).data, safe=False)
    data = _validated(LabelInputSerializer, _body(request))
    existing = Tag.objects.filter(user=owner, name__iexact=data['name']).first()
    if existing:
        return JsonResponse(TagSerializer(existing).data)
    try:
        with transaction.atomic():
            tag = Tag.objects.create(user=owner, name=data['name'], color=data.get('color') or DEFAULT_TAG_COLOR)
    except IntegrityError:
        return JsonResponse({"error": "Tag name already exists"}, status=400)
    return JsonResponse(TagSerializer(tag).data, status=201)


@csrf_exempt
@require_http_methods(["GET", "POST"])
@json_errors
def templates(request):
    owner = _owner(request)
    if request.method == 'GET':
        items = (TaskTemplate.objects.filter(user=owner)
                 .select_related('category').prefetch_related('tags').order_by('-created_at'))
        return JsonResponse(TaskTemplateSerializer(items, many=True).data, safe=False)
    data = _validated(TemplateInputSerializer, _body(request))
    with transaction.atomic():
        category, tag_list = _store().owned_labels(owner.id, data.get('categoryId') or None, data.get('tagIds'))
        template = TaskTemplate.objects.create(
            user=owner,
            title=data['title'],
            description=data.get('description'),
            category=category,
        )
        if tag_list:
            template.tags.set(tag_list)
    return JsonResponse(TaskTemplateSerializer(template).data, status=201)


# Profile

@csrf_exempt
@require_http_methods(["POST"])
@json_errors
def profile(request):
    owner = _owner(request)
    prof, _ = Profile.objects.get_or_create(user=owner)
    name = (request.POST.get('name') or '').strip()
    image = request.FILES.get('image')
    if image is not None:
        if image.size > settings.PROFILE_IMAGE_MAX_BYTES:
            raise InvalidInput('Image too large')
        file_name = get_valid_filename(f'{owner.id}_{int(time.time() * 1000)}_{image.name}')
        saved = default_storage.save(file_name, image)
        prof.image = default_storage.url(saved)
        logger.info('profile image stored user=%s path=%s', owner.id, saved)
    prof.name = name
    prof.save()
    return JsonResponse({"success": True, "name": prof.name, "image": prof.image})
