from argparse import Namespace
from dataclasses import dataclass
from importlib.metadata import version
from typing import Any, Dict

from solidpod.client import Client, Endpoint
from solidpod.pod import Pod


@dataclass
class PodContext:
    config: Dict[str, Any] = None
    args: Namespace = None
    _pod: Pod = None

    @property
    def version(self):
        return version('solidpod')

    @property
    def pod(self) -> Pod:
        if self._pod is None:
            self._pod = Pod.from_config(self.config.get('POD', {}))
        return self._pod

    @property
    def client(self) -> Client:
        return self.pod.client

    @property
    def endpoint(self) -> Endpoint:
        return self.pod.endpoint
