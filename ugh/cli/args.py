"""CLI Argument Parsing"""

import argparse
import argcomplete

from ugh import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ugh',
        description='File a ticket for your uncommitted changes and check out a matching branch',
        epilog='Example: ugh ticket --board DEMO'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    ticket = subparsers.add_parser('ticket', help='Create a ticket from local changes and a matching branch')
    ticket.add_argument('-b', '--board', type=str, metavar='PROJECT', help='Project key (overrides default_project_key)')
    ticket.add_argument('--hint', type=str, metavar='TEXT', help='Add context: --hint "fixing the login bug"')
    ticket.add_argument('--no-cache', action='store_true', help='Ignore cached drafts and ask the LLM again')
    ticket.add_argument('--verbose', action='store_true', help='Show debug info (fingerprint, provenance, timings)')

    config = subparsers.add_parser('config', help='Manage settings')
    config_sub = config.add_subparsers(dest='config_command', metavar='ACTION')
    config_sub.required = True
    config_sub.add_parser('init', help='Run the interactive setup wizard')
    config_sub.add_parser('show', help='Show current settings (secrets masked)')

    cache = subparsers.add_parser('cache', help='Manage the draft cache')
    cache_sub = cache.add_subparsers(dest='cache_command', metavar='ACTION')
    cache_sub.required = True
    cache_sub.add_parser('clear', help='Delete cached drafts to force regeneration')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
