class ApiError(Exception):
    status = 500
    message = 'Internal server error'

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidInput(ApiError):
    status = 400
    message = 'Invalid input'


class Unauthorized(ApiError):
    status = 401
    message = 'Unauthorized'


class NotFound(ApiError):
    status = 404
    message = 'Not found'


class TaskNotFound(NotFound):
    message = 'Task not found or unauthorized'


class StoreFailure(ApiError):
    """A read or write against the task store failed; never carries partial results."""
