from argparse import Namespace

from solidpod.cli.commands import BaseCommand


def configure_cli(subparsers):
    parser = subparsers.add_parser(
        name='read',
        description='Print the values stored in a resource, one per line'
    )
    parser.add_argument('container', help='name of the container', metavar='CONTAINER')
    parser.add_argument('name', help='name of the resource within the container', metavar='NAME')
    parser.set_defaults(cmd_name='read')


class Command(BaseCommand):
    def __call__(self, args: Namespace):
        self.result = self.pod.read(args.container, args.name)
        for item in self.result:
            print(item)
