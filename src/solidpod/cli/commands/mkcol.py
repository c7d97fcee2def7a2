import logging
from argparse import Namespace

from solidpod.cli.commands import BaseCommand

logger = logging.getLogger(__name__)


def configure_cli(subparsers):
    parser = subparsers.add_parser(
        name='mkcol',
        description='Create containers at the root of the pod, if they do not already exist'
    )
    parser.add_argument(
        'names',
        nargs='+',
        help='name of the container to create; repeatable',
        metavar='NAME',
        action='store'
    )
    parser.set_defaults(cmd_name='mkcol')


class Command(BaseCommand):
    def __call__(self, args: Namespace):
        failed = [name for name in args.names if not self.pod.create_container(name)]
        self.result = len(args.names) - len(failed)
        if failed:
            raise RuntimeError(f'Unable to create {len(failed)} container(s): {", ".join(failed)}')
