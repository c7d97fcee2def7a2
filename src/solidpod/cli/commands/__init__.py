import sys
from argparse import Namespace
from typing import Iterable

from solidpod.cli.context import PodContext
from solidpod.serializers import decode


class BaseCommand:
    def __init__(self, context: PodContext = None):
        self.context = context
        self.result = None

    @property
    def pod(self):
        return self.context.pod


def add_items_arguments(parser):
    """Positional `ITEM` arguments plus a `-f/--file` option, shared by the
    commands that write data."""
    parser.add_argument(
        'items',
        nargs='*',
        help='values to write, one line each',
        metavar='ITEM',
        action='store'
    )
    parser.add_argument(
        '-f', '--file',
        help='read values from FILE, one per line; use "-" for STDIN',
        dest='items_file',
        metavar='FILE',
        action='store'
    )


def get_items(args: Namespace) -> Iterable[str]:
    """Values from `args.items_file` (if any), then from `args.items`. The
    file is split on `\\n` only, the same way a resource is; a `\\r` before
    the newline is kept as part of the value."""
    if getattr(args, 'items_file', None) is not None:
        if args.items_file == '-':
            yield from decode(sys.stdin.buffer.read())
        else:
            with open(args.items_file, 'rb') as file:
                yield from decode(file.read())
    if getattr(args, 'items', None):
        yield from args.items
