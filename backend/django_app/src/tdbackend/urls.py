from django.urls import path
from tdbackend.api import views as api

urlpatterns = [
    # Health and ping (accept with and without trailing slash)
    path('healthz', api.healthz),
    path('healthz/', api.healthz),
    path('api/ping', api.ping),
    path('api/ping/', api.ping),

    # Auth endpoints
    path('api/auth/register', api.register),
    path('api/auth/register/', api.register),
    path('api/auth/login', api.login_view),
    path('api/auth/login/', api.login_view),
    path('api/auth/logout', api.logout_view),
    path('api/auth/logout/', api.logout_view),
    path('api/auth/me', api.me),
    path('api/auth/me/', api.me),

    # Tasks collection, analytics and detail (analytics before the id route)
    path('api/tasks', api.tasks),
    path('api/tasks/', api.tasks),
    path('api/tasks/analytics', api.task_analytics),
    path('api/tasks/analytics/', api.task_analytics),
    path('api/tasks/<str:task_id>', api.task_detail),
    path('api/tasks/<str:task_id>/', api.task_detail),

    # Categories, tags, templates
    path('api/categories', api.categories),
    path('api/categories/', api.categories),
    path('api/tags', api.tags),
    path('api/tags/', api.tags),
    path('api/templates', api.templates),
    path('api/templates/', api.templates),

    # Profile
    path('api/profile', api.profile),
    path('api/profile/', api.profile),
]
