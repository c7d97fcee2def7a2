import logging
from http import HTTPStatus
from typing import NamedTuple, Optional

from requests import Response, Session
from requests.exceptions import ConnectionError, RequestException, Timeout
from urlobject import URLObject

from solidpod.exceptions import ClientError, TransportError, reason_phrase

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = (5, 5)
"""Connect and read timeouts, in seconds."""


class Content(NamedTuple):
    """Data object combining the body of a response, its media type, and
    its entity tag (if the server sent one)."""

    media_type: str
    """MIME type, e.g. "text/plain" """

    data: bytes
    """raw response body"""

    etag: Optional[str] = None
    """value of the `ETag` header, or `None`"""


class Endpoint:
    """Root URL of a pod. The URL always ends with a `/`, so container and
    resource URLs can be derived by concatenation:

    ```pycon
    >>> endpoint = Endpoint(url='http://localhost:3000/alice')

    >>> endpoint.url
    URLObject('http://localhost:3000/alice/')

    >>> endpoint.container_url('notes')
    'http://localhost:3000/alice/notes/'

    >>> endpoint.resource_url('notes', 'todo.txt')
    'http://localhost:3000/alice/notes/todo.txt'
    ```
    """

    def __init__(self, url: str):
        if not url.endswith('/'):
            url += '/'
        self._url = URLObject(url)

    @property
    def url(self) -> URLObject:
        return self._url

    def __str__(self):
        return str(self._url)

    def __repr__(self):
        return f'{self.__class__.__name__}(url={str(self._url)!r})'

    def __eq__(self, other):
        return isinstance(other, Endpoint) and self._url == other._url

    def __hash__(self):
        return hash(self._url)

    def container_url(self, name: str) -> str:
        return f'{self._url}{name.strip("/")}/'

    def resource_url(self, container: str, name: str) -> str:
        return self.container_url(container) + name.lstrip('/')


class SessionHeaderAttribute:
    """Descriptor that maps an attribute to a session header name. Requires
    the instance to have a `session` attribute with a `headers` attribute whose
    value is a mapping that supports the methods `get()` and `update()`, plus
    the `del` operator.
    """

    def __init__(self, header_name: str):
        self.header_name = header_name
        """The HTTP header name"""

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return instance.session.headers.get(self.header_name, None)

    def __set__(self, instance, value):
        if value is not None:
            instance.session.headers.update({self.header_name: str(value)})

    def __delete__(self, instance):
        try:
            del instance.session.headers[self.header_name]
        except KeyError:
            pass


class Client:
    """HTTP client for a pod. Every request is sent with the configured
    connect and read `timeout`."""
    ua_string = SessionHeaderAttribute('User-Agent')
    """`User-Agent` header value"""
    session: Session
    """Underlying Requests library
    [Session object](https://requests.readthedocs.io/en/latest/user/advanced/#session-objects),
    or a subclass thereof"""

    def __init__(
        self,
        endpoint: Endpoint,
        timeout: tuple[float, float] = DEFAULT_TIMEOUT,
        server_cert: str = None,
        ua_string: str = None,
        session: Session = None,
    ):
        self.endpoint: Endpoint = endpoint
        """Pod endpoint"""

        self.timeout: tuple[float, float] = timeout
        """Connect and read timeouts, in seconds"""

        if session is None:
            # defaults to a basic requests.Session object
            self.session = Session()
        else:
            # otherwise, use the session object as is
            self.session = session

        if server_cert is not None:
            self.session.verify = server_cert

        self.ua_string = ua_string

    def request(self, method: str, url: str, **kwargs) -> Response:
        """Send an HTTP request using the configured `session`. Additional
        keyword arguments are passed to the underlying `session.request()`
        method.

        Raises a `TransportError` if no complete response is received, for
        example because the connection failed or a timeout expired."""
        logger.debug(f'{method} {url}')
        kwargs.setdefault('timeout', self.timeout)
        try:
            response = self.session.request(method, url, **kwargs)
        except (ConnectionError, Timeout) as e:
            message = ' '.join(str(arg) for arg in e.args)
            logger.debug(message)
            raise TransportError(f'Connection error: {message}') from e
        except RequestException as e:
            message = ' '.join(str(arg) for arg in e.args)
            logger.debug(message)
            raise TransportError(f'Request failed: {message}') from e
        logger.debug(f'{response.status_code} {reason_phrase(response)}')
        return response

    def put(self, url: str, **kwargs) -> Response:
        """Send an HTTP PUT request using the configured session."""
        return self.request('PUT', url, **kwargs)

    def head(self, url: str, **kwargs) -> Response:
        """Send an HTTP HEAD request using the configured session."""
        return self.request('HEAD', url, **kwargs)

    def get(self, url: str, **kwargs) -> Response:
        """Send an HTTP GET request using the configured session."""
        return self.request('GET', url, **kwargs)

    def probe(self, url: str) -> bool:
        """Returns `True` if an HTTP HEAD request to `url` yields `200 OK`.
        Any other status, and any transport failure, counts as "does not
        exist"; failures are logged but never raised."""
        try:
            response = self.head(url)
        except TransportError as e:
            logger.debug(f'Probe of {url} failed: {e}')
            return False
        return response.status_code == HTTPStatus.OK

    def put_content(self, url: str, data: bytes, content_type: str, headers: dict = None) -> Response:
        """Send `data` to `url` with an HTTP PUT request, with the given
        `Content-Type`. Any additional `headers` are sent as well.

        Returns the response regardless of its status. Raises a
        `TransportError` if there is no response."""
        request_headers = {'Content-Type': content_type}
        if headers:
            request_headers.update(headers)
        return self.put(url, headers=request_headers, data=data)

    def get_content(self, url: str, accept: str = 'text/plain') -> Content:
        """Get the content at `url` by issuing an HTTP GET request with the
        given `Accept` header.

        Raises a `ClientError` if it does not get a `200 OK` response from the
        server, and a `TransportError` if it gets no response at all."""
        response = self.get(url, headers={'Accept': accept})
        if response.status_code != HTTPStatus.OK:
            logger.debug(f'Unable to get {accept} representation of {url}')
            raise ClientError(response)
        return Content(
            media_type=response.headers.get('Content-Type', accept),
            data=response.content,
            etag=response.headers.get('ETag'),
        )

    def is_reachable(self) -> bool:
        """Returns `True` if an HTTP HEAD request to the configured `endpoint`
        yields a non-error response, and `False` otherwise."""
        try:
            return self.head(self.endpoint.url).ok
        except TransportError as e:
            logger.error(str(e))
            return False

    def test_connection(self):
        """Test the connection to the pod using `is_reachable()`. If
        it returns false, raises a `ConnectionError`."""
        logger.info(f'Testing connection to {self.endpoint.url}')
        if self.is_reachable():
            logger.info('Connection successful.')
        else:
            raise ConnectionError(f'Unable to connect to {self.endpoint.url}')
