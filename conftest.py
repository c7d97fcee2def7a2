"""Common test fixtures for all solidpod tests"""
import re
from http import HTTPStatus
from itertools import count

import httpretty
import pytest
import requests

from solidpod.client import Client, Endpoint

POD_URL = 'http://localhost:9999/alice/'


class FakePod:
    """In-memory pod served through HTTPretty. Supports HEAD, GET, and PUT,
    with a fresh `ETag` on every write, and honors `If-Match` and
    `If-None-Match: *` on PUT. Every request is recorded in `requests` as a
    `(method, url, headers, body)` tuple."""

    def __init__(self, base_url: str = POD_URL):
        self.base_url = base_url
        self.resources: dict[str, bytes] = {}
        self.etags: dict[str, str] = {}
        self.requests: list[tuple[str, str, dict, bytes]] = []
        self.failures: dict[tuple[str, str], int] = {}
        self._versions = count(1)

    def register(self):
        pattern = re.compile(re.escape(self.base_url) + '.*')
        for method in (httpretty.HEAD, httpretty.GET, httpretty.PUT):
            httpretty.register_uri(method, pattern, body=self.handle)

    def fail(self, method: str, url: str, status: int):
        """Answer every `method` request to `url` with `status`."""
        self.failures[(method, url)] = status

    def sent(self, method: str) -> list[tuple[str, str, dict, bytes]]:
        return [r for r in self.requests if r[0] == method]

    def set(self, url: str, body: bytes):
        self.resources[url] = body
        self.etags[url] = f'"{next(self._versions)}"'

    def handle(self, request, uri, response_headers):
        status, body = self._respond(request, uri, response_headers)
        return [int(status), response_headers, body]

    def _respond(self, request, uri, response_headers):
        method = request.method
        headers = dict(request.headers)
        self.requests.append((method, uri, headers, request.body))

        if (method, uri) in self.failures:
            return self.failures[(method, uri)], ''

        if method in ('HEAD', 'GET'):
            if uri not in self.resources:
                return HTTPStatus.NOT_FOUND, ''
            response_headers.update({'Content-Type': 'text/plain', 'ETag': self.etags[uri]})
            body = self.resources[uri] if method == 'GET' else ''
            return HTTPStatus.OK, body

        # PUT
        exists = uri in self.resources
        if_match = request.headers.get('If-Match')
        if if_match is not None and (not exists or if_match != self.etags[uri]):
            return HTTPStatus.PRECONDITION_FAILED, ''
        if request.headers.get('If-None-Match') == '*' and exists:
            return HTTPStatus.PRECONDITION_FAILED, ''
        self.set(uri, request.body)
        response_headers['ETag'] = self.etags[uri]
        return (HTTPStatus.NO_CONTENT if exists else HTTPStatus.CREATED), ''


@pytest.fixture
def endpoint():
    return Endpoint(url=POD_URL)


@pytest.fixture
def client(endpoint):
    return Client(endpoint=endpoint)


@pytest.fixture
def fake_pod():
    """A `FakePod` served by HTTPretty for the duration of the test. Real
    network connections are refused while it is active."""
    httpretty.reset()
    httpretty.enable(allow_net_connect=False)
    pod = FakePod()
    pod.register()
    yield pod
    httpretty.disable()
    httpretty.reset()


@pytest.fixture
def monkeypatch_request(monkeypatch):
    def _monkeypatch_request(response):
        if isinstance(response, type):
            response = response()
        monkeypatch.setattr(requests.Session, 'request', lambda *args, **kwargs: response)
    return _monkeypatch_request


@pytest.fixture
def raise_on_request(monkeypatch):
    """Make every request fail with the given `requests` exception."""
    def _raise_on_request(error: Exception):
        def _request(*args, **kwargs):
            raise error
        monkeypatch.setattr(requests.Session, 'request', _request)
    return _raise_on_request
