#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import importlib.metadata
import logging
import logging.config
import os
import sys
from argparse import ArgumentParser, FileType
from copy import deepcopy
from datetime import datetime, timezone
from importlib import import_module
from pkgutil import iter_modules

import yaml

from solidpod.cli import commands
from solidpod.cli.context import PodContext
from solidpod.utils import DEFAULT_LOGGING_OPTIONS, envsubst

logger = logging.getLogger(__name__)
now = datetime.now(timezone.utc).strftime('%Y%m%d%H%M%S')


def load_commands(subparsers):
    # load all defined subcommands from the solidpod.cli.commands package,
    # using introspection
    command_modules = {}
    for finder, name, ispkg in iter_modules(commands.__path__):
        module = import_module(commands.__name__ + '.' + name)
        if hasattr(module, 'configure_cli'):
            module.configure_cli(subparsers)
            command_modules[name] = module
    return command_modules


def get_logging_options(config: dict, cmd_name: str, verbose: bool = False, quiet: bool = False) -> dict:
    """Build the `logging.config.dictConfig()` options from the `LOGGING`
    section of the configuration. Log files go in `LOG_DIR` (default "logs"),
    which is created if needed."""
    logging_config = config.get('LOGGING', {})
    if 'LOGGING_CONFIG' in logging_config:
        with open(logging_config['LOGGING_CONFIG'], 'r') as logging_config_file:
            logging_options = yaml.safe_load(logging_config_file)
    else:
        logging_options = deepcopy(DEFAULT_LOGGING_OPTIONS)

    if 'file' in logging_options.get('handlers', {}):
        log_dirname = logging_config.get('LOG_DIR', 'logs')
        if not os.path.isdir(log_dirname):
            os.makedirs(log_dirname)
        log_filename = f'solidpod.{cmd_name}.{now}.log'
        logging_options['handlers']['file']['filename'] = os.path.join(log_dirname, log_filename)

    # manipulate console verbosity
    if 'console' in logging_options.get('handlers', {}):
        if verbose:
            logging_options['handlers']['console']['level'] = 'DEBUG'
        elif quiet:
            logging_options['handlers']['console']['level'] = 'WARNING'

    return logging_options


def main():
    """Parse args and handle options."""

    parser = ArgumentParser(
        prog='solidpod',
        description='Read and write line-delimited data in the containers of a Solid pod.'
    )
    parser.set_defaults(cmd_name=None)

    common_required = parser.add_mutually_exclusive_group(required=True)
    common_required.add_argument(
        '-c', '--config',
        help='Path to configuration file.',
        action='store',
        dest='config_file',
        type=FileType('r')
    )
    common_required.add_argument(
        '-V', '--version',
        help='Print version and exit.',
        action='version',
        version=importlib.metadata.version('solidpod')
    )

    parser.add_argument(
        '-v', '--verbose',
        help='increase the verbosity of the status output',
        action='store_true'
    )
    parser.add_argument(
        '-q', '--quiet',
        help='decrease the verbosity of the status output',
        action='store_true'
    )

    subparsers = parser.add_subparsers(title='commands')

    command_modules = load_commands(subparsers)

    # parse command line args
    args = parser.parse_args()

    # if no subcommand was selected, display the help
    if args.cmd_name is None:
        parser.print_help()
        sys.exit(0)

    config = envsubst(yaml.safe_load(args.config_file) or {})
    context = PodContext(config=config, args=args)

    logging.config.dictConfig(get_logging_options(config, args.cmd_name, args.verbose, args.quiet))

    # get the selected subcommand
    command_module = command_modules[args.cmd_name]

    # dispatch to the selected subcommand
    try:
        if not hasattr(command_module, 'Command'):
            raise RuntimeError(f'Unable to execute command {args.cmd_name}')

        context.client.ua_string = f'solidpod/{context.version} ({args.cmd_name})'
        logger.debug(f'Client User-Agent set to "{context.client.ua_string}"')
        logger.info(f'Loaded pod configuration from {args.config_file.name}')

        command = command_module.Command(context=context)
        command(args)
    except RuntimeError as e:
        # something failed, exit with non-zero status
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        # aborted due to Ctrl+C
        sys.exit(2)


if __name__ == "__main__":
    main()
