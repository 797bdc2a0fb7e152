import atexit

from django.apps import AppConfig


class ApiConfig(AppConfig):
    name = 'tdbackend.api'
    label = 'api'
    default_auto_field = 'django.db.models.BigAutoField'

    def ready(self):
        from tdbackend.api.store import TaskStore

        self.task_store = TaskStore(using='default')
        atexit.register(self.task_store.close)
