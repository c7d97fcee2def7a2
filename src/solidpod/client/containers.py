import logging
from http import HTTPStatus

from rdflib import Namespace

from solidpod.client import Client
from solidpod.exceptions import ClientError, best_effort

logger = logging.getLogger(__name__)
ldp = Namespace('http://www.w3.org/ns/ldp#')

CONTAINER_MEDIA_TYPE = 'text/turtle'
CONTAINER_TYPE = ldp['personal-data']


def container_link_header(rdf_type=CONTAINER_TYPE) -> str:
    """Value of the `Link` header that marks a PUT request as creating an
    LDP container of the given type."""
    return f'<{rdf_type}>; rel="type"'


class ContainerManager:
    """Creates containers at the root of the client's pod.

    If `strict` is false (the default), a failed creation is logged and
    reported by returning `False`. If `strict` is true, the underlying
    `ClientError` or `TransportError` is raised instead."""

    def __init__(self, client: Client, strict: bool = False):
        self.client = client
        self.strict = strict

    def exists(self, name: str) -> bool:
        return self.client.probe(self.client.endpoint.container_url(name))

    @best_effort(default=False, action='create container')
    def ensure(self, name: str) -> bool:
        """Make sure the container `name` exists. If a HEAD request finds it,
        nothing else is sent. Otherwise, it is created with an empty
        `text/turtle` PUT request.

        Creation is not retried."""
        container_url = self.client.endpoint.container_url(name)
        logger.info(f'Attempting to create container at: {container_url}')
        if self.client.probe(container_url):
            logger.info(f'Container already exists at: {container_url}')
            return True

        response = self.client.put_content(
            container_url,
            data=b'',
            content_type=CONTAINER_MEDIA_TYPE,
            headers={'Link': container_link_header()},
        )
        if response.status_code not in (HTTPStatus.CREATED, HTTPStatus.OK):
            raise ClientError(response)

        logger.info(f'Container created successfully at: {container_url}')
        return True
