from argparse import Namespace

from solidpod.cli.commands import BaseCommand, add_items_arguments, get_items


def configure_cli(subparsers):
    parser = subparsers.add_parser(
        name='update',
        description='Append the given values to a resource'
    )
    parser.add_argument('container', help='name of the container', metavar='CONTAINER')
    parser.add_argument('name', help='name of the resource within the container', metavar='NAME')
    add_items_arguments(parser)
    parser.set_defaults(cmd_name='update')


class Command(BaseCommand):
    def __call__(self, args: Namespace):
        items = list(get_items(args))
        if not items:
            raise RuntimeError('Nothing to add; give at least one ITEM or a --file')
        if not self.pod.update(args.container, args.name, items):
            raise RuntimeError(f'Unable to update {args.container}/{args.name}')
        self.result = items
