"""
PyShell Shell Module

The interactive command shell session.

Author: YSNRFD
Version: 1.0.0
"""

import os
import re
from pathlib import Path
from typing import Any, Callable, List, Optional

from pyshell.core.config_loader import Config, CommandSetConfig, get_config
from pyshell.core.registrar import CommandEntry, CommandRegistrar, CommandSetDescriptor
from pyshell.core.registry import AliasRegistry, CommandRegistry
from pyshell.core.resolver import CommandResolver
from pyshell.core.paths import ROOT
from pyshell.core.variables import Variables, VariableNames
from pyshell.exceptions import ShellException
from pyshell.logger import get_logger
from .completer import AggregateCompleter, AliasNameCompleter, CommandNameCompleter, HelpPageNameCompleter
from .error_handler import ConsoleErrorHandler
from .executor import CommandExecutor, ExecutionResult, ExecutionStatus
from .help_pages import HelpPage, HelpPageManager
from .io import IO


VARIABLE_REFERENCE = re.compile(r'\$\{([A-Za-z0-9_.\-]+)\}')


class Shell:
    """
    A shell session.

    Owns the session variable scope and wires input to the executor.
    Embedding applications call execute(); the console front end calls
    run().

    Example:
        >>> shell = create_shell()
        >>> shell.open()
        >>> shell.execute('echo hello').status
        hello
        <ExecutionStatus.SUCCESS: 'success'>
    """

    def __init__(
        self,
        executor: CommandExecutor,
        commands: CommandRegistry,
        aliases: AliasRegistry,
        io: Optional[IO] = None,
        config: Optional[Config] = None,
        help_pages: Optional[HelpPageManager] = None,
        completer: Optional[AggregateCompleter] = None,
        error_handler: Optional[ConsoleErrorHandler] = None,
        variables: Optional[Variables] = None
    ):
        self._executor = executor
        self._commands = commands
        self._aliases = aliases
        self._io = io or IO()
        self._config = config or get_config()
        self._help_pages = help_pages or HelpPageManager()
        self._completer = completer or AggregateCompleter()
        self._error_handler = error_handler or ConsoleErrorHandler(self._io)
        self._variables = variables if variables is not None else Variables()
        self._logger = get_logger('shell')
        self._opened = False
        self._running = False

    @property
    def variables(self) -> Variables:
        return self._variables

    @property
    def io(self) -> IO:
        return self._io

    @property
    def config(self) -> Config:
        return self._config

    @property
    def executor(self) -> CommandExecutor:
        return self._executor

    @property
    def commands(self) -> CommandRegistry:
        return self._commands

    @property
    def aliases(self) -> AliasRegistry:
        return self._aliases

    @property
    def resolver(self) -> CommandResolver:
        return self._executor.resolver

    @property
    def help_pages(self) -> HelpPageManager:
        return self._help_pages

    @property
    def completer(self) -> AggregateCompleter:
        return self._completer

    @property
    def error_handler(self) -> ConsoleErrorHandler:
        return self._error_handler

    @property
    def is_open(self) -> bool:
        return self._opened

    @property
    def running(self) -> bool:
        return self._running

    def open(self) -> None:
        """
        Prepare the session.

        Seeds the reserved variables, defines configured aliases, starts
        the completers and runs the profile scripts. Opening twice does
        nothing.
        """
        if self._opened:
            return

        settings = self._config.shell
        home = settings.home or str(Path(__file__).resolve().parent.parent)
        user_home = os.path.expanduser(settings.user_home or '~')
        user_dir = os.path.expanduser(settings.user_dir) if settings.user_dir else os.getcwd()

        self._variables.set_system(VariableNames.HOME, home)
        self._variables.set_system(VariableNames.PROGRAM, settings.program)
        self._variables.set_system(VariableNames.VERSION, settings.version)
        self._variables.set_system(VariableNames.LAST_RESULT, None)
        self._variables.set_system(VariableNames.USER_HOME, user_home)
        self._variables.set(VariableNames.USER_DIR, user_dir)
        self._variables.set(VariableNames.PROMPT, settings.prompt)
        self._variables.set(VariableNames.GROUP, ROOT)
        self._variables.set(VariableNames.SHOW_STACKTRACE, settings.show_stacktrace)

        for name, target in self._config.aliases.items():
            try:
                self._aliases.register_alias(name, target)
            except ShellException as e:
                self._logger.warning(
                    f"Ignoring configured alias '{name}': {e}",
                    context={'target': target}
                )

        self._completer.attach()
        self._opened = True

        self._logger.info(
            f"Shell opened: {settings.program} {settings.version}",
            context={'home': home, 'user_dir': user_dir}
        )

        for script in settings.profile_scripts:
            self._load_profile(script)

    def _load_profile(self, script: str) -> None:
        path = Path(script).expanduser()
        if not path.is_file():
            self._logger.debug(f"Profile script not found: {path}")
            return

        self._logger.debug(f"Loading profile script: {path}")
        result = self.run_script(path.read_text(encoding='utf-8'))
        if result.status == ExecutionStatus.FAILURE:
            self.handle_error(result.error)

    def close(self) -> None:
        """End the session and stop following registry changes."""
        self._running = False
        if self._opened:
            self._completer.detach()
            self._opened = False
            self._logger.info("Shell closed")
        self._io.flush()

    def execute(self, line: str, variables: Optional[Variables] = None) -> ExecutionResult:
        """
        Execute a command line.

        Args:
            line: Command line, possibly several commands joined by ';'
            variables: Caller scope; defaults to the running command's
                scope, or the session scope at top level
        """
        return self._executor.execute(self, line, variables)

    def execute_command(self, name: str, *args: Any, variables: Optional[Variables] = None) -> ExecutionResult:
        """Execute a command with already-split arguments."""
        return self._executor.execute_command(self, name, args, variables)

    def run_script(self, script: str, variables: Optional[Variables] = None) -> ExecutionResult:
        """
        Run a script (one command line per line).

        Stops at the first failing or exiting line and returns its result.

        Returns:
            Result of the last line run
        """
        result = ExecutionResult.success()

        for line in script.splitlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            result = self.execute(line, variables)
            if result.stops:
                break

        return result

    def handle_error(self, error: Optional[BaseException]) -> None:
        if error is not None:
            self._error_handler.handle(error, self._variables)

    def expand_variables(self, text: str) -> str:
        """Expand ${name} references; unknown names stay as written."""
        def replace_var(match):
            name = match.group(1)
            if not self._variables.contains(name):
                return match.group(0)
            value = self._variables.get(name)
            return '' if value is None else str(value)

        return VARIABLE_REFERENCE.sub(replace_var, text)

    def prompt(self) -> str:
        template = self._variables.get(VariableNames.PROMPT) or '> '
        return self.expand_variables(str(template))

    def run(self, input_func: Callable[[str], str] = input) -> int:
        """
        Run the interactive shell.

        This is the main REPL loop. Failed lines are reported and the
        loop continues; 'exit' or end of input ends it.

        Returns:
            Exit code
        """
        self.open()
        self._running = True
        exit_code = 0

        if self._config.shell.enable_autocomplete and input_func is input:
            self._install_completion()

        try:
            while self._running:
                try:
                    line = input_func(self.prompt())
                except EOFError:
                    self._io.println()
                    break
                except KeyboardInterrupt:
                    self._io.println("^C")
                    continue

                try:
                    result = self.execute(line)
                except Exception as e:
                    self._logger.error(f"Shell error: {e}", exc_info=e)
                    self.handle_error(e)
                    continue

                if result.status == ExecutionStatus.EXIT:
                    exit_code = result.exit_code
                    break
                if result.status == ExecutionStatus.FAILURE:
                    self.handle_error(result.error)
        finally:
            self._running = False

        return exit_code

    def stop(self) -> None:
        """Stop the interactive loop after the current line."""
        self._running = False

    def _install_completion(self) -> None:
        try:
            import readline
        except ImportError:
            self._logger.debug("readline unavailable, completion disabled")
            return

        readline.set_completer(self._completer.readline_complete)
        readline.set_completer_delims(' \t;')
        readline.parse_and_bind('tab: complete')


def command_sets_from_config(sets: List[CommandSetConfig]) -> List[CommandSetDescriptor]:
    """Convert configured command sets into registrar descriptors."""
    return [
        CommandSetDescriptor(
            id=s.id,
            commands=[CommandEntry(c.action, c.name, c.enabled) for c in s.commands],
            enabled=s.enabled,
            rank=s.rank,
        )
        for s in sets
    ]


DEFAULT_HELP_PAGES = (
    HelpPage(
        'variables',
        'Shell variables and substitution',
        "Variables are referenced as ${name} and substituted outside single quotes.\n"
        "Unknown references are left as written.\n"
        "Reserved: shell.home, shell.program, shell.version, shell.user.home, shell.last.result\n"
        "Session: shell.user.dir, shell.prompt, shell.group, shell.show.stacktrace"
    ),
    HelpPage(
        'syntax',
        'Command line syntax',
        "Commands are separated by ';'. Lines starting with '#' are comments.\n"
        "'single quotes' are literal, \"double quotes\" substitute variables,\n"
        "and a backslash escapes the next character. '--' ends option parsing."
    ),
)


def create_shell(config: Optional[Config] = None, io: Optional[IO] = None) -> Shell:
    """
    Factory function to create a shell.

    Builds the registries, registers the configured command sets and
    wires the completers; the returned shell still needs open().
    """
    config = config or get_config()
    io = io or IO(verbose=config.shell.verbose, quiet=config.shell.quiet)

    commands = CommandRegistry()
    aliases = AliasRegistry()
    help_pages = HelpPageManager()

    registrar = CommandRegistrar(commands)
    registrar.register_sets(command_sets_from_config(config.command_sets))

    for page in DEFAULT_HELP_PAGES:
        help_pages.add_page(page)

    completer = AggregateCompleter([
        CommandNameCompleter(commands),
        AliasNameCompleter(aliases),
        HelpPageNameCompleter(help_pages),
    ])

    return Shell(
        executor=CommandExecutor(CommandResolver(commands, aliases)),
        commands=commands,
        aliases=aliases,
        io=io,
        config=config,
        help_pages=help_pages,
        completer=completer,
        error_handler=ConsoleErrorHandler(io),
    )
