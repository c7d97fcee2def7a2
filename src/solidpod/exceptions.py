import logging
from functools import wraps
from http import HTTPStatus

from requests import Response

logger = logging.getLogger(__name__)


def reason_phrase(response: Response) -> str:
    """The reason phrase of `response`, falling back to the standard phrase
    for its status code, or to an empty string for a non-standard code."""
    if response.reason:
        return response.reason
    try:
        return HTTPStatus(response.status_code).phrase
    except ValueError:
        return ''


class PodError(Exception):
    """Base class for errors raised while talking to a pod."""
    pass


class TransportError(PodError, RuntimeError):
    """Raised when a request never gets a complete HTTP response: connection
    refused, DNS failure, a connect or read timeout, a connection broken off
    in the middle of the body, or too many redirects."""
    pass


class ClientError(PodError):
    """Raised when a `Client` receives an unexpected HTTP response."""
    def __init__(self, response: Response, *args):
        super().__init__(*args)

        self.response: Response = response
        """The Requests `Response` object from the failed request."""

        self.status_code = self.response.status_code
        """The numeric HTTP status code (e.g., 404) for the failed request."""

        self.reason = reason_phrase(self.response)
        """The reason phrase (e.g., "Not Found") for the failed request. If
        the `response` does not have a reason code, use the standard status
        phrase from `HTTPStatus`, if there is one."""

    def __str__(self):
        return f'{self.status_code} {self.reason}'.rstrip()


class ConflictError(ClientError):
    """Raised when a conditional write is still rejected with
    `412 Precondition Failed` after the last attempt."""
    pass


class SerializationError(PodError, ValueError):
    pass


def best_effort(default=None, action: str = None):
    """Method decorator for the public operations of the pod components.

    If the instance has a false `strict` attribute, a `PodError` raised by the
    wrapped method is logged and the method returns `default` instead. If
    `default` is callable, it is called to produce a fresh value each time
    (e.g., `list`). With `strict` set, the error propagates unchanged.

    ```python
    class Reader:
        strict = False

        @best_effort(default=list, action='read')
        def read(self):
            raise TransportError('Connection error: refused')

    Reader().read()  # logs "Unable to read: Connection error: refused", returns []
    ```
    """
    def decorator(method):
        description = action or method.__name__.replace('_', ' ')

        @wraps(method)
        def wrapper(self, *args, **kwargs):
            try:
                return method(self, *args, **kwargs)
            except PodError as e:
                if getattr(self, 'strict', False):
                    raise
                logger.error(f'Unable to {description}: {e}')
                return default() if callable(default) else default
        return wrapper
    return decorator
