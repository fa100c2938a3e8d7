"""Configuration: argument parser and config file loader."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from pygit_reconcile.errors import UnknownOptionError

CONFIG_FILE_NAME = '.gitreconcile.toml'

# Keys honoured in the config file and the type each must have. `force` is
# deliberately absent: it must be requested on the command line for every run.
FILE_KEYS = {'rebase': bool, 'remote_name': str, 'verbose': bool, 'json_output': bool}


class ReconcileArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UnknownOptionError instead of exiting with status 2."""

    def error(self, message: str):
        raise UnknownOptionError(message)


def create_argument_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with all git-reconcile flags."""
    # Lazy import to avoid circular dependency with __init__.py
    from pygit_reconcile import __version__

    parser = ReconcileArgumentParser(
        prog='git-reconcile',
        description="Synchronize the current branch with its remote counterpart",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
        epilog="""
This command will:
  1. Fetch latest changes from remote
  2. Stash any uncommitted changes
  3. Synchronize local and remote branches
  4. Restore stashed changes

When to use --rebase:
  \u2022 Working on feature branches
  \u2022 Want clean, linear history

When to use merge (default):
  \u2022 Working on shared branches such as main
  \u2022 Want to preserve complete history

When to use --force:
  \u2022 After rewriting local history that was already pushed
  \u2022 DANGER: This overwrites remote history!
        """
    )

    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-f', '--force', action='store_true',
                       help='Force push (use with caution - overwrites remote)')
    parser.add_argument('-r', '--rebase', action='store_true',
                       help='Use rebase instead of merge (creates linear history)')
    parser.add_argument('--remote', dest='remote_name', default='origin',
                       help='Remote to synchronize with (default: origin)')
    parser.add_argument('--dry-run', action='store_true',
                       help='Show what would happen without changing anything')
    parser.add_argument('--json', dest='json_output', action='store_true',
                       help='Output the result as JSON (suppresses normal output)')
    parser.add_argument('--verbose', action='store_true',
                       help='Verbose output')
    parser.add_argument('--config', type=str, default=None,
                       help=f'Path to config file (default: {CONFIG_FILE_NAME} in current or home dir)')

    return parser


def explicit_destinations(argv: list[str]) -> set[str]:
    """Return the option dests set on the command line, however the flags were spelled.

    Re-parses argv with every default cleared, so combined short flags such as
    ``-rf`` count as explicit just like ``--rebase --force``.
    """
    parser = create_argument_parser()
    parser.set_defaults(**{
        action.dest: None for action in parser._actions if action.dest not in ('help', 'version')
    })
    args = parser.parse_args(argv)
    return {dest for dest, value in vars(args).items() if value is not None}


def load_config_file(search_dir: Path, config_path: str | None = None) -> dict[str, Any]:
    """Load .gitreconcile.toml from explicit path, search dir, or home dir.

    Returns only the recognised keys whose values have the expected type;
    empty dict if no file was found.
    """
    candidates = [Path(config_path)] if config_path else [search_dir / CONFIG_FILE_NAME, Path.home() / CONFIG_FILE_NAME]
    for path in candidates:
        if path.is_file():
            try:
                with open(path, 'rb') as f:
                    data = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                print(f"Warning: Failed to parse {path}: {e}")
                return {}
            return _validated(path, data)
    if config_path:
        print(f"Warning: Config file '{config_path}' not found. Ignoring.")
    return {}


def _validated(path: Path, data: dict[str, Any]) -> dict[str, Any]:
    config = {}
    for key, expected in FILE_KEYS.items():
        if key not in data:
            continue
        value = data[key]
        if expected is bool and not isinstance(value, bool):
            print(f"Warning: Ignoring '{key}' in {path}: expected true or false, got {value!r}")
            continue
        if expected is str and not (isinstance(value, str) and value.strip()):
            print(f"Warning: Ignoring '{key}' in {path}: expected a non-empty string, got {value!r}")
            continue
        config[key] = value
    return config
