#!/usr/bin/env python3
"""
PyShell - An Embeddable Interactive Command Shell

This is the main entry point for the pyshell console.

Modes:
- Interactive console (default)
- One command line (-c)
- Script files

Author: YSNRFD
Version: 1.0.0
"""

import argparse
import sys
from typing import List, Optional

from pyshell.core.config_loader import ConfigLoader
from pyshell.exceptions import ConfigValidationError
from pyshell.logger import Logger, get_logger
from pyshell.shell.executor import ExecutionStatus
from pyshell.shell.shell import create_shell


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pyshell',
        description='Interactive command shell'
    )
    parser.add_argument('--config', help='Path to a JSON configuration file')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging and stack traces')
    parser.add_argument('-c', '--command', help='Execute a command line and exit')
    parser.add_argument('scripts', nargs='*', help='Script files to run instead of the console')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for pyshell.

    Sequence:
    1. Load configuration
    2. Initialize logging
    3. Create and open the shell
    4. Run the command, scripts or console
    5. Close the shell
    """
    args = build_parser().parse_args(argv)

    loader = ConfigLoader()
    if args.config:
        try:
            loader.load(args.config)
        except ConfigValidationError as e:
            print(f"pyshell: {e}", file=sys.stderr)
            return 2

    config = loader.config
    if args.debug:
        config.shell.show_stacktrace = True
        config.logging.level = 'DEBUG'

    Logger.initialize(
        level=config.logging.level,
        log_file=config.logging.log_file,
        console_output=config.logging.console_output
    )
    get_logger('main').debug("Effective configuration", context={'config': loader.to_dict()})

    shell = create_shell(config)
    shell.open()

    try:
        if args.command is not None:
            return _finish(shell, shell.execute(args.command))

        if args.scripts:
            result = None
            for script in args.scripts:
                try:
                    with open(script, 'r', encoding='utf-8') as f:
                        text = f.read()
                except OSError as e:
                    print(f"pyshell: {e}", file=sys.stderr)
                    return 1
                result = shell.run_script(text)
                if result.stops:
                    break
            return _finish(shell, result)

        return shell.run()
    except KeyboardInterrupt:
        print("\n\nInterrupted", file=sys.stderr)
        return 130
    finally:
        shell.close()


def _finish(shell, result) -> int:
    """Exit code for a non-interactive run."""
    if result is None:
        return 0
    if result.status == ExecutionStatus.EXIT:
        return result.exit_code
    if result.status == ExecutionStatus.FAILURE:
        shell.handle_error(result.error)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
