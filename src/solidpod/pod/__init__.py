import logging
from typing import Any, Iterable

import yaml

from solidpod.client import DEFAULT_TIMEOUT, Client, Endpoint
from solidpod.client.containers import ContainerManager
from solidpod.client.resources import ResourceClient
from solidpod.utils import as_bool, envsubst

logger = logging.getLogger(__name__)


class Pod:
    """Entry point for an agent working with a single pod. Exposes the four
    operations `create_container()`, `publish()`, `read()`, and `update()`.

    By default, these never raise on network or protocol failures: a read that
    fails returns `[]`, and a write that fails returns `False`. In both cases
    the reason is logged. Pass `strict=True` to get the exceptions instead.

    ```python
    pod = Pod.from_url('http://localhost:3000/alice/')
    pod.create_container('notes')
    pod.publish('notes', 'todo.txt', ['milk', 'eggs'])
    pod.update('notes', 'todo.txt', ['bread'])
    pod.read('notes', 'todo.txt')  # ['milk', 'eggs', 'bread']
    ```
    """

    @classmethod
    def from_config_file(cls, filename: str) -> 'Pod':
        with open(filename) as file:
            return cls.from_config(config=envsubst(yaml.safe_load(file) or {}).get('POD', {}))

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> 'Pod':
        """Build a `Pod` from the `POD` section of a configuration file.

        Raises a `RuntimeError` if the required `URL` key is missing."""
        try:
            endpoint = Endpoint(url=config['URL'])
        except KeyError as e:
            raise RuntimeError(f"Missing configuration key {e} in section 'POD'")

        client = Client(
            endpoint=endpoint,
            timeout=(
                float(config.get('CONNECT_TIMEOUT', DEFAULT_TIMEOUT[0])),
                float(config.get('READ_TIMEOUT', DEFAULT_TIMEOUT[1])),
            ),
            server_cert=config.get('SERVER_CERT', None),
        )
        return cls(
            client=client,
            strict=as_bool(config.get('STRICT')),
            conditional=as_bool(config.get('CONDITIONAL_UPDATES')),
            max_attempts=int(config.get('MAX_ATTEMPTS', 3)),
            lock_updates=as_bool(config.get('LOCK_UPDATES')),
        )

    @classmethod
    def from_url(cls, url: str, **kwargs) -> 'Pod':
        return cls(client=Client(endpoint=Endpoint(url=url)), **kwargs)

    def __init__(
        self,
        client: Client,
        strict: bool = False,
        conditional: bool = False,
        max_attempts: int = 3,
        lock_updates: bool = False,
    ):
        self.client = client
        self.endpoint = client.endpoint
        self.containers = ContainerManager(client, strict=strict)
        self.resources = ResourceClient(
            client,
            strict=strict,
            conditional=conditional,
            max_attempts=max_attempts,
            lock_updates=lock_updates,
        )
        logger.info(f'Pod initialized for: {self.endpoint.url}')

    def __str__(self):
        return str(self.endpoint)

    @property
    def strict(self) -> bool:
        return self.resources.strict

    def create_container(self, name: str) -> bool:
        return self.containers.ensure(name)

    def publish(self, container: str, name: str, items: Iterable[Any]) -> bool:
        return self.resources.write(container, name, items)

    def read(self, container: str, name: str) -> list[str]:
        return self.resources.read(container, name)

    def update(self, container: str, name: str, items: Iterable[Any]) -> bool:
        return self.resources.update(container, name, items)
