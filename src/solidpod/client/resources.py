import logging
import threading
import weakref
from contextlib import nullcontext
from http import HTTPStatus
from typing import Any, Iterable, NamedTuple, Optional

from requests import Response

from solidpod.client import Client
from solidpod.exceptions import ClientError, ConflictError, best_effort
from solidpod.serializers import MEDIA_TYPE, decode, encode, to_text

logger = logging.getLogger(__name__)

WRITE_SUCCESS_CODES = (HTTPStatus.CREATED, HTTPStatus.OK, HTTPStatus.NO_CONTENT)


class Snapshot(NamedTuple):
    """The items of a resource as they were when it was read, plus what is
    needed to make a later write conditional on the resource being unchanged."""

    items: list[str]
    etag: Optional[str] = None
    exists: bool = True

    @property
    def precondition(self) -> dict[str, str]:
        """Request headers for a conditional PUT. Empty if the server did not
        send an `ETag` for an existing resource."""
        if not self.exists:
            return {'If-None-Match': '*'}
        if self.etag is None:
            return {}
        return {'If-Match': self.etag}


class LockRegistry:
    """Lazily created `threading.Lock` objects, one per key. A lock is only
    kept while something still refers to it, so the registry does not grow
    with every resource URL ever updated."""

    def __init__(self):
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()
        self._guard = threading.Lock()

    def __getitem__(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def __len__(self):
        return len(self._locks)


update_locks = LockRegistry()
"""Process-wide locks keyed by resource URL, used when a `ResourceClient`
has `lock_updates` set."""


class ResourceClient:
    """Reads, writes, and appends to line-delimited text resources inside
    containers of the client's pod.

    `update()` is a read followed by a write. The pod has no partial updates
    and no transactions, so two clients updating the same resource at the same
    time can lose one of the updates. Two options narrow that window:

    * `conditional`: the write is sent with `If-Match` (or `If-None-Match: *`
      for a new resource). If the server answers `412 Precondition Failed`,
      the read and write are repeated, up to `max_attempts` times in total.
    * `lock_updates`: updates to the same URL from this process are
      serialized. This does nothing for other processes.

    If `strict` is false (the default), failures are logged and the public
    methods return `[]` or `False`. Otherwise they raise."""

    def __init__(
        self,
        client: Client,
        strict: bool = False,
        conditional: bool = False,
        max_attempts: int = 3,
        lock_updates: bool = False,
        locks: LockRegistry = None,
    ):
        self.client = client
        self.strict = strict
        self.conditional = conditional
        self.max_attempts = max(1, max_attempts) if conditional else 1
        self.lock_updates = lock_updates
        self.locks = locks if locks is not None else update_locks

    def url(self, container: str, name: str) -> str:
        return self.client.endpoint.resource_url(container, name)

    def fetch(self, container: str, name: str) -> Snapshot:
        """Get the current items of a resource. A resource that does not
        exist yet (`404 Not Found`) is treated as empty.

        Raises a `ClientError` for any other non-OK response, and a
        `TransportError` if there is no response."""
        url = self.url(container, name)
        try:
            content = self.client.get_content(url, accept=MEDIA_TYPE)
        except ClientError as e:
            if e.status_code == HTTPStatus.NOT_FOUND:
                logger.debug(f'No resource at {url}')
                return Snapshot(items=[], exists=False)
            raise
        return Snapshot(items=decode(content.data), etag=content.etag)

    def store(self, container: str, name: str, items: Iterable[Any], headers: dict = None) -> Response:
        """Replace the content of a resource with `items`.

        Raises a `ConflictError` on `412 Precondition Failed`, and a
        `ClientError` on any other unsuccessful response."""
        url = self.url(container, name)
        response = self.client.put_content(
            url,
            data=encode(items).encode('utf-8'),
            content_type=MEDIA_TYPE,
            headers=headers,
        )
        if response.status_code == HTTPStatus.PRECONDITION_FAILED:
            raise ConflictError(response)
        if response.status_code not in WRITE_SUCCESS_CODES:
            raise ClientError(response)
        return response

    @best_effort(default=list, action='read data')
    def read(self, container: str, name: str) -> list[str]:
        logger.info(f'Attempting to read data from container: {container}, file: {name}')
        items = self.fetch(container, name).items
        logger.info(f'Data read successfully from: {self.url(container, name)}')
        return items

    @best_effort(default=False, action='publish data')
    def write(self, container: str, name: str, items: Iterable[Any]) -> bool:
        self.store(container, name, items)
        logger.info(f'Data published successfully to: {self.url(container, name)}')
        return True

    @best_effort(default=False, action='update data')
    def update(self, container: str, name: str, new_items: Iterable[Any]) -> bool:
        """Append `new_items` to the resource. If the current content cannot
        be read, nothing is written."""
        # fail before any request if a value cannot be serialized
        new_items = [to_text(item) for item in new_items]
        url = self.url(container, name)

        with self.locks[url] if self.lock_updates else nullcontext():
            for attempt in range(1, self.max_attempts + 1):
                snapshot = self.fetch(container, name)
                headers = None
                if self.conditional:
                    headers = snapshot.precondition
                    if not headers:
                        logger.warning(f'No ETag for {url}; sending an unconditional update')
                try:
                    self.store(container, name, snapshot.items + new_items, headers=headers)
                except ConflictError:
                    if attempt == self.max_attempts:
                        raise
                    logger.warning(f'{url} changed since it was read (attempt {attempt} of {self.max_attempts})')
                    continue
                logger.info(f'Data updated successfully at: {url}')
                return True
