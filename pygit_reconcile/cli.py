"""CLI entry point: main() function."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from colorama import Fore, Style

from pygit_reconcile.config import create_argument_parser, explicit_destinations, load_config_file
from pygit_reconcile.errors import SyncError, UnknownOptionError
from pygit_reconcile.models import SyncOptions
from pygit_reconcile.output import BufferedOutputHandler, ConsoleOutputHandler
from pygit_reconcile.reporter import SummaryReporter
from pygit_reconcile.repository import GitPythonBackend
from pygit_reconcile.synchronizer import Synchronizer


def main(argv: list[str] | None = None):
    """Main entry point"""
    argv = sys.argv[1:] if argv is None else argv
    parser = create_argument_parser()
    try:
        args = parser.parse_args(argv)
    except UnknownOptionError as e:
        print(f"{Fore.RED}[ERROR]{Style.RESET_ALL} {e.message}")
        parser.print_help()
        sys.exit(1)

    file_config = load_config_file(Path.cwd(), args.config)

    cli_explicit = explicit_destinations(argv)

    def effective(dest: str):
        if dest not in cli_explicit and dest in file_config:
            return file_config[dest]
        return getattr(args, dest)

    options = SyncOptions(
        force=args.force,
        rebase=effective('rebase'),
        remote_name=effective('remote_name'),
        dry_run=args.dry_run,
        verbose=effective('verbose'),
        json_output=effective('json_output'),
    )

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    output = BufferedOutputHandler() if options.json_output else ConsoleOutputHandler(verbose=options.verbose)
    reporter = SummaryReporter(output)
    reporter.print_header()

    backend = GitPythonBackend(Path.cwd())
    try:
        report = Synchronizer(backend, output, options).synchronize()

        if options.json_output:
            print(json.dumps({**report.to_dict(), 'messages': output.messages}, indent=2))
        else:
            reporter.print_summary(report)
        sys.exit(0)

    except SyncError as e:
        if options.json_output:
            print(json.dumps({**e.to_dict(), 'messages': output.messages}, indent=2))
        else:
            reporter.print_failure(e)
        sys.exit(1)
    except KeyboardInterrupt:
        if not options.json_output:
            output.warning("\n\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        if options.json_output:
            print(json.dumps({'error': str(e)}, indent=2))
        else:
            output.error(f"\nUnexpected error: {e}")
            if options.verbose:
                import traceback
                traceback.print_exc()
        sys.exit(1)
    finally:
        backend.close()
